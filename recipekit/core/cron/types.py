"""Cron reconciliation types — job specs, scopes, mapping state, results."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

CronInstallMode = Literal["off", "prompt", "on"]

ReconcileAction = Literal["created", "updated", "unchanged", "disabled", "disabled-removed"]


# ════════════════════════════════════════════════════════════
# DESIRED STATE
# ════════════════════════════════════════════════════════════


class CronJobSpec(BaseModel):
    """Canonical cron job declared by a recipe (post-normalization)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    schedule: str
    message: str
    name: str | None = None
    description: str | None = None
    timezone: str | None = None
    channel: str | None = None
    to: str | None = None
    agent_id: str | None = Field(default=None, alias="agentId")
    enabled_by_default: bool = Field(default=True, alias="enabledByDefault")


class ReconcileScope(BaseModel):
    """Namespace a reconciliation pass applies to (one team or one agent)."""

    kind: Literal["team", "agent"]
    scope_id: str
    recipe_id: str
    state_dir: str

    @classmethod
    def team(cls, team_id: str, recipe_id: str, state_dir: str) -> ReconcileScope:
        return cls(kind="team", scope_id=team_id, recipe_id=recipe_id, state_dir=str(state_dir))

    @classmethod
    def agent(cls, agent_id: str, recipe_id: str, state_dir: str) -> ReconcileScope:
        return cls(kind="agent", scope_id=agent_id, recipe_id=recipe_id, state_dir=str(state_dir))

    @property
    def key_prefix(self) -> str:
        """Prefix shared by every mapping key of this scope + recipe."""
        return f"{self.kind}:{self.scope_id}:recipe:{self.recipe_id}:cron:"

    def mapping_key(self, job_id: str) -> str:
        """e.g. ``team:acme-team:recipe:standup-bot:cron:daily``."""
        return f"{self.key_prefix}{job_id}"


# ════════════════════════════════════════════════════════════
# PERSISTED STATE
# ════════════════════════════════════════════════════════════


class MappingEntry(BaseModel):
    """Durable link between a recipe job key and the scheduler's job id."""

    model_config = ConfigDict(populate_by_name=True)

    installed_cron_id: str = Field(alias="installedCronId")
    spec_hash: str = Field(default="", alias="specHash")  # "" forces an update
    orphaned: bool = False
    updated_at_ms: int = Field(default=0, alias="updatedAtMs")


class MappingState(BaseModel):
    """Contents of ``notes/cron-jobs.json``."""

    version: Literal[1] = 1
    entries: dict[str, MappingEntry] = Field(default_factory=dict)


# ════════════════════════════════════════════════════════════
# REMOTE + RESULTS
# ════════════════════════════════════════════════════════════


class RemoteJob(BaseModel):
    """Scheduler-side job. Only ``id`` and ``enabled`` are trusted."""

    model_config = ConfigDict(extra="ignore")

    id: str
    enabled: bool = False


class ReconcileResult(BaseModel):
    """One entry of the reconciliation log."""

    model_config = ConfigDict(populate_by_name=True)

    action: ReconcileAction
    key: str
    installed_cron_id: str = Field(alias="installedCronId")
    enabled: bool | None = None  # set for "created" only

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ReconcileOutcome(BaseModel):
    """Return value of a reconciliation call."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    changed: bool = False
    note: str | None = None
    desired_count: int | None = Field(default=None, alias="desiredCount")
    results: list[ReconcileResult] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
