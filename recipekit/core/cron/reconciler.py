"""CronReconciler — converge the host scheduler to a recipe's declared jobs.

Per call:
    1. normalize the recipe's cronJobs and resolve install consent
    2. load the mapping store; list remote jobs only if something is mapped
    3. create / update / disable each desired job in declaration order
    4. disable jobs this scope + recipe no longer declares (orphan sweep)
    5. persist the mapping store

The mapping store is saved after every successful remote mutation, so a
failure mid-pass never forgets a job that was already created remotely.
One reconciliation per scope + recipe at a time is assumed.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from recipekit.core.cron.consent import resolve_consent
from recipekit.core.cron.hashing import hash_spec
from recipekit.core.cron.mapping import (
    load_mapping_state,
    mapping_state_path,
    save_mapping_state,
)
from recipekit.core.cron.normalize import normalize_recipe_cron_jobs
from recipekit.core.cron.registry import CronRegistry
from recipekit.core.cron.types import (
    CronJobSpec,
    MappingEntry,
    MappingState,
    ReconcileOutcome,
    ReconcileResult,
    ReconcileScope,
    RemoteJob,
)
from recipekit.errors import RecipeKitError

NOTE_NO_JOBS = "no-cron-jobs"
WAKE_MODE = "next-heartbeat"
DEFAULT_CHANNEL = "last"

_CHANGING_ACTIONS = {"created", "updated", "disabled", "disabled-removed"}


# ════════════════════════════════════════════════════════════
# JOB DEFINITIONS
# ════════════════════════════════════════════════════════════


def display_name(scope: ReconcileScope, job: CronJobSpec) -> str:
    """Explicit job name, else ``"<scopeId> • <recipeId> • <jobId>"``."""
    return job.name or f"{scope.scope_id} • {scope.recipe_id} • {job.id}"


def spec_fields(scope: ReconcileScope, job: CronJobSpec) -> dict[str, str]:
    """Fields that decide what gets installed remotely (not enablement)."""
    return {
        "schedule": job.schedule,
        "message": job.message,
        "timezone": job.timezone or "",
        "channel": job.channel or DEFAULT_CHANNEL,
        "to": job.to or "",
        "agentId": job.agent_id or "",
        "name": display_name(scope, job),
        "description": job.description or "",
    }


def build_job_patch(job: CronJobSpec, name: str) -> dict[str, Any]:
    """Scheduler job body without ``enabled``; shared by create and update."""
    schedule: dict[str, Any] = {"kind": "cron", "expr": job.schedule}
    if job.timezone:
        schedule["tz"] = job.timezone

    if job.agent_id:
        payload: dict[str, Any] = {"kind": "agentTurn", "message": job.message}
    else:
        payload = {"kind": "systemEvent", "text": job.message}

    body: dict[str, Any] = {
        "name": name,
        "agentId": job.agent_id,
        "description": job.description or "",
        "sessionTarget": "isolated" if job.agent_id else "main",
        "wakeMode": WAKE_MODE,
        "schedule": schedule,
        "payload": payload,
    }
    if job.channel or job.to:
        delivery: dict[str, Any] = {"mode": "announce"}
        if job.channel:
            delivery["channel"] = job.channel
        if job.to:
            delivery["to"] = job.to
        delivery["bestEffort"] = True
        body["delivery"] = delivery
    return body


def build_job_for_create(
    scope: ReconcileScope, job: CronJobSpec, want_enabled: bool
) -> dict[str, Any]:
    body = build_job_patch(job, display_name(scope, job))
    body["enabled"] = want_enabled
    return body


def _job_id_from_key(scope: ReconcileScope, key: str) -> str | None:
    if not key.startswith(scope.key_prefix):
        return None
    return key[len(scope.key_prefix):] or None


def _needs_remote_listing(
    scope: ReconcileScope, desired: list[CronJobSpec], state: MappingState
) -> bool:
    """True if a desired job is mapped, or a live entry may need an orphan disable."""
    if any(scope.mapping_key(j.id) in state.entries for j in desired):
        return True
    return any(
        key.startswith(scope.key_prefix) and not entry.orphaned
        for key, entry in state.entries.items()
    )


# ════════════════════════════════════════════════════════════
# RECONCILER
# ════════════════════════════════════════════════════════════


class CronReconciler:
    """Diff desired jobs against the mapping store + scheduler and apply."""

    def __init__(
        self,
        registry: CronRegistry,
        clock: Callable[[], int] | None = None,
    ):
        self.registry = registry
        self._clock = clock or (lambda: int(time.time() * 1000))

    def reconcile(
        self,
        scope: ReconcileScope,
        desired: list[CronJobSpec],
        user_opt_in: bool,
    ) -> ReconcileOutcome:
        """Apply ``desired`` for ``scope``; returns the action log."""
        state_path = mapping_state_path(scope.state_dir)
        state = load_mapping_state(state_path)
        now = self._clock()
        results: list[ReconcileResult] = []

        try:
            remote: dict[str, RemoteJob] = {}
            if _needs_remote_listing(scope, desired, state):
                remote = {j.id: j for j in self.registry.list_jobs()}
            else:
                logger.debug(f"No mapped cron jobs for {scope.key_prefix}*, skipping cron.list")

            for job in desired:
                self._reconcile_one(scope, job, user_opt_in, state, state_path, remote, now, results)
            self._disable_orphans(scope, {j.id for j in desired}, state, state_path, remote, now, results)
        except RecipeKitError as e:
            logger.error(
                f"Cron reconcile aborted for {scope.kind}:{scope.scope_id} "
                f"recipe={scope.recipe_id}: {e}"
            )
            raise

        save_mapping_state(state_path, state)

        changed = any(r.action in _CHANGING_ACTIONS for r in results)
        logger.info(
            f"Cron reconcile {scope.kind}:{scope.scope_id} recipe={scope.recipe_id}: "
            f"{len(results)} result(s), changed={changed}"
        )
        return ReconcileOutcome(ok=True, changed=changed, results=results)

    # ── Desired jobs ─────────────────────────────────────────

    def _reconcile_one(
        self,
        scope: ReconcileScope,
        job: CronJobSpec,
        user_opt_in: bool,
        state: MappingState,
        state_path: Path,
        remote: dict[str, RemoteJob],
        now: int,
        results: list[ReconcileResult],
    ) -> None:
        key = scope.mapping_key(job.id)
        spec_hash = hash_spec(spec_fields(scope, job))
        prev = state.entries.get(key)
        existing = remote.get(prev.installed_cron_id) if prev else None
        want_enabled = user_opt_in and job.enabled_by_default

        if existing is None:
            new_id = self.registry.create(build_job_for_create(scope, job, want_enabled))
            logger.info(f"Cron job created: {key} → {new_id} (enabled={want_enabled})")
            state.entries[key] = MappingEntry(
                installed_cron_id=new_id, spec_hash=spec_hash, orphaned=False, updated_at_ms=now,
            )
            save_mapping_state(state_path, state)
            results.append(ReconcileResult(
                action="created", key=key, installed_cron_id=new_id, enabled=want_enabled,
            ))
            return

        mutated = False
        if prev.spec_hash != spec_hash:
            self.registry.update(existing.id, build_job_patch(job, display_name(scope, job)))
            logger.info(f"Cron job updated: {key} → {existing.id}")
            mutated = True
            results.append(ReconcileResult(action="updated", key=key, installed_cron_id=existing.id))
        else:
            logger.debug(f"Cron job unchanged: {key} → {existing.id}")
            results.append(ReconcileResult(action="unchanged", key=key, installed_cron_id=existing.id))

        if not user_opt_in and existing.enabled:
            self.registry.update(existing.id, {"enabled": False})
            logger.info(f"Cron job disabled (no opt-in): {key} → {existing.id}")
            mutated = True
            results.append(ReconcileResult(action="disabled", key=key, installed_cron_id=existing.id))

        state.entries[key] = MappingEntry(
            installed_cron_id=existing.id, spec_hash=spec_hash, orphaned=False, updated_at_ms=now,
        )
        if mutated:
            save_mapping_state(state_path, state)

    # ── Orphans ──────────────────────────────────────────────

    def _disable_orphans(
        self,
        scope: ReconcileScope,
        desired_ids: set[str],
        state: MappingState,
        state_path: Path,
        remote: dict[str, RemoteJob],
        now: int,
        results: list[ReconcileResult],
    ) -> None:
        for key, entry in list(state.entries.items()):
            job_id = _job_id_from_key(scope, key)
            if job_id is None or job_id in desired_ids:
                continue

            job = remote.get(entry.installed_cron_id)
            disable = job is not None and job.enabled
            if disable:
                self.registry.update(job.id, {"enabled": False})
                logger.info(f"Cron job disabled (removed from recipe): {key} → {job.id}")
                results.append(ReconcileResult(
                    action="disabled-removed", key=key, installed_cron_id=job.id,
                ))
            state.entries[key] = entry.model_copy(update={"orphaned": True, "updated_at_ms": now})
            if disable:
                save_mapping_state(state_path, state)


# ════════════════════════════════════════════════════════════
# ENTRY POINT
# ════════════════════════════════════════════════════════════


def reconcile_recipe_cron_jobs(
    registry: CronRegistry,
    recipe: Any,
    scope: ReconcileScope,
    cron_installation: str,
    prompt_yes_no: Callable[[str], bool] | None = None,
    is_interactive: bool | None = None,
    clock: Callable[[], int] | None = None,
) -> ReconcileOutcome:
    """Reconcile a recipe's cron jobs for one team or agent.

    Returns an outcome with a ``note`` when nothing was attempted
    (no jobs, installation off, user declined). Errors propagate.
    """
    desired = normalize_recipe_cron_jobs(recipe)
    if not desired:
        return ReconcileOutcome(ok=True, changed=False, note=NOTE_NO_JOBS)

    decision = resolve_consent(
        cron_installation,
        scope.recipe_id,
        len(desired),
        prompt_yes_no=prompt_yes_no,
        is_interactive=is_interactive,
    )
    if not decision.proceed:
        logger.info(f"Cron install skipped for recipe={scope.recipe_id}: {decision.note}")
        return ReconcileOutcome(
            ok=True, changed=False, note=decision.note, desired_count=len(desired),
        )

    return CronReconciler(registry, clock=clock).reconcile(scope, desired, decision.user_opt_in)
