"""Tests for recipekit.core.cron.normalize."""

import pytest

from recipekit.core.cron.normalize import normalize_cron_jobs, normalize_recipe_cron_jobs
from recipekit.errors import ValidationError


def test_none_is_empty():
    assert normalize_cron_jobs(None) == []


def test_not_a_list():
    with pytest.raises(ValidationError, match="must be an array"):
        normalize_cron_jobs({"id": "daily"})


def test_entry_not_object():
    with pytest.raises(ValidationError, match="must be objects"):
        normalize_cron_jobs(["daily"])


def test_minimal_job():
    jobs = normalize_cron_jobs([{"id": " daily ", "schedule": " 0 9 * * * ", "message": " standup "}])
    assert len(jobs) == 1
    j = jobs[0]
    assert j.id == "daily"
    assert j.schedule == "0 9 * * *"
    assert j.message == "standup"
    assert j.agent_id is None
    assert j.enabled_by_default is True


def test_optional_fields_stringified():
    jobs = normalize_cron_jobs([{
        "id": "d", "schedule": "0 9 * * *", "message": "m",
        "name": "Daily", "timezone": "Europe/Istanbul", "channel": "telegram",
        "to": 12345, "agentId": "lead", "description": "desc", "enabledByDefault": False,
    }])
    j = jobs[0]
    assert j.to == "12345"
    assert j.agent_id == "lead"
    assert j.timezone == "Europe/Istanbul"
    assert j.enabled_by_default is False


@pytest.mark.parametrize("field", ["message", "task", "prompt"])
def test_message_aliases(field):
    jobs = normalize_cron_jobs([{"id": "d", "schedule": "* * * * *", field: "hello"}])
    assert jobs[0].message == "hello"


def test_message_alias_priority():
    jobs = normalize_cron_jobs([{
        "id": "d", "schedule": "* * * * *", "message": "new", "task": "old", "prompt": "older",
    }])
    assert jobs[0].message == "new"

    jobs = normalize_cron_jobs([{"id": "d", "schedule": "* * * * *", "task": "old", "prompt": "older"}])
    assert jobs[0].message == "old"


def test_missing_id():
    with pytest.raises(ValidationError, match=r"cronJobs\[\]\.id is required"):
        normalize_cron_jobs([{"id": "  ", "schedule": "* * * * *", "message": "m"}])


def test_missing_schedule():
    with pytest.raises(ValidationError, match=r"cronJobs\[daily\]\.schedule is required"):
        normalize_cron_jobs([{"id": "daily", "message": "m"}])


def test_blank_message():
    with pytest.raises(ValidationError, match=r"cronJobs\[daily\]\.message is required"):
        normalize_cron_jobs([{"id": "daily", "schedule": "* * * * *", "message": "   "}])


def test_duplicate_id_named():
    raw = [
        {"id": "daily", "schedule": "0 9 * * *", "message": "a"},
        {"id": "daily", "schedule": "0 10 * * *", "message": "b"},
    ]
    with pytest.raises(ValidationError) as exc_info:
        normalize_cron_jobs(raw)
    assert "Duplicate" in str(exc_info.value)
    assert "daily" in str(exc_info.value)


def test_declaration_order_kept():
    raw = [{"id": i, "schedule": "* * * * *", "message": "m"} for i in ("c", "a", "b")]
    assert [j.id for j in normalize_cron_jobs(raw)] == ["c", "a", "b"]


def test_recipe_mapping_and_object():
    raw = [{"id": "d", "schedule": "* * * * *", "message": "m"}]
    assert len(normalize_recipe_cron_jobs({"id": "r", "cronJobs": raw})) == 1
    assert normalize_recipe_cron_jobs({"id": "r"}) == []

    class _Recipe:
        cron_jobs = raw

    assert normalize_recipe_cron_jobs(_Recipe())[0].id == "d"
