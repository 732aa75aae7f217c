"""Normalize raw ``cronJobs`` declarations into validated CronJobSpec objects."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from recipekit.core.cron.types import CronJobSpec
from recipekit.errors import ValidationError

# Newest spelling first; older recipes used task/prompt.
MESSAGE_ALIASES = ("message", "task", "prompt")

_OPTIONAL_FIELDS = ("name", "description", "timezone", "channel", "to", "agentId")


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _resolve_message(raw: Mapping[str, Any]) -> str:
    for alias in MESSAGE_ALIASES:
        if raw.get(alias) is not None:
            return _text(raw[alias])
    return ""


def _normalize_one(raw: Any, seen: set[str]) -> CronJobSpec:
    if not isinstance(raw, Mapping):
        raise ValidationError("cronJobs entries must be objects")

    job_id = _text(raw.get("id"))
    if not job_id:
        raise ValidationError("cronJobs[].id is required")
    schedule = _text(raw.get("schedule"))
    if not schedule:
        raise ValidationError(f"cronJobs[{job_id}].schedule is required")
    message = _resolve_message(raw)
    if not message:
        raise ValidationError(f"cronJobs[{job_id}].message is required")
    if job_id in seen:
        raise ValidationError(f"Duplicate cronJobs[].id: {job_id}")
    seen.add(job_id)

    fields: dict[str, Any] = {"id": job_id, "schedule": schedule, "message": message}
    for name in _OPTIONAL_FIELDS:
        if raw.get(name) is not None:
            fields[name] = str(raw[name])
    if raw.get("enabledByDefault") is not None:
        fields["enabledByDefault"] = bool(raw["enabledByDefault"])
    return CronJobSpec(**fields)


def normalize_cron_jobs(raw_jobs: Any) -> list[CronJobSpec]:
    """Validate and canonicalize a recipe's cron job list.

    Returns ``[]`` when nothing was declared. Raises ValidationError for a
    non-list value, an entry without id/schedule/message, or a repeated id.
    Declaration order is preserved.
    """
    if raw_jobs is None:
        return []
    if not isinstance(raw_jobs, list):
        raise ValidationError("frontmatter.cronJobs must be an array")

    seen: set[str] = set()
    return [_normalize_one(raw, seen) for raw in raw_jobs]


def normalize_recipe_cron_jobs(recipe: Any) -> list[CronJobSpec]:
    """Normalize the ``cronJobs`` of a recipe mapping or Recipe object."""
    if isinstance(recipe, Mapping):
        return normalize_cron_jobs(recipe.get("cronJobs"))
    return normalize_cron_jobs(getattr(recipe, "cron_jobs", None))
