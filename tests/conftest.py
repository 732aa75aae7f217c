"""Shared fixtures — in-memory CronRegistry for reconciler tests."""

from __future__ import annotations

from typing import Any

import pytest

from recipekit.core.cron.types import RemoteJob
from recipekit.errors import RemoteUnavailable


class FakeRegistry:
    """Records calls; keeps jobs in a dict keyed by id."""

    def __init__(self) -> None:
        self.jobs: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple] = []
        self.fail_on_create: int | None = None  # 1-based create call that raises
        self._next = 0
        self._creates = 0

    def list_jobs(self) -> list[RemoteJob]:
        self.calls.append(("list",))
        return [RemoteJob(id=i, enabled=bool(j.get("enabled"))) for i, j in self.jobs.items()]

    def create(self, job: dict[str, Any]) -> str:
        self._creates += 1
        if self.fail_on_create == self._creates:
            raise RemoteUnavailable("gateway down")
        self._next += 1
        job_id = f"cron-{self._next}"
        self.jobs[job_id] = dict(job)
        self.calls.append(("create", job))
        return job_id

    def update(self, job_id: str, patch: dict[str, Any]) -> None:
        self.calls.append(("update", job_id, patch))
        self.jobs.setdefault(job_id, {}).update(patch)

    def mutations(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("create", "update")]

    def actions(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def registry():
    return FakeRegistry()
