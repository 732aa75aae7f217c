"""Remote job registry — list/create/update against the host scheduler."""

from __future__ import annotations

from typing import Any, Protocol

from loguru import logger

from recipekit.core.cron.types import RemoteJob
from recipekit.core.gateway.client import GatewayClient, parse_tool_text_json
from recipekit.errors import ParseError


class CronRegistry(Protocol):
    """What the reconciler needs from a job scheduler."""

    def list_jobs(self) -> list[RemoteJob]: ...

    def create(self, job: dict[str, Any]) -> str: ...

    def update(self, job_id: str, patch: dict[str, Any]) -> None: ...


class GatewayCronRegistry:
    """CronRegistry backed by the gateway's ``cron`` tool."""

    TOOL = "cron"

    def __init__(self, client: GatewayClient):
        self._client = client

    def list_jobs(self) -> list[RemoteJob]:
        result = self._client.invoke(self.TOOL, {"action": "list", "includeDisabled": True})
        parsed = parse_tool_text_json(result, "cron.list")
        raw_jobs = parsed.get("jobs") if isinstance(parsed, dict) else None
        jobs = [
            RemoteJob(id=str(j["id"]), enabled=bool(j.get("enabled", False)))
            for j in raw_jobs or []
            if isinstance(j, dict) and j.get("id")
        ]
        logger.debug(f"cron.list returned {len(jobs)} jobs")
        return jobs

    def create(self, job: dict[str, Any]) -> str:
        result = self._client.invoke(self.TOOL, {"action": "add", "job": job})
        parsed = parse_tool_text_json(result, "cron.add")
        new_id = None
        if isinstance(parsed, dict):
            new_id = parsed.get("id")
            if not new_id and isinstance(parsed.get("job"), dict):
                new_id = parsed["job"].get("id")
        if not new_id:
            raise ParseError("cron.add", detail="Failed to parse cron add output (missing id)")
        return str(new_id)

    def update(self, job_id: str, patch: dict[str, Any]) -> None:
        result = self._client.invoke(
            self.TOOL, {"action": "update", "jobId": job_id, "patch": patch}
        )
        parse_tool_text_json(result, "cron.update")
