"""Tests for recipekit.cli."""

import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from recipekit.cli.commands import app
from recipekit.core.config import Config
from recipekit.errors import RemoteUnavailable

runner = CliRunner()

_PATCH_CONFIG = "recipekit.core.config.loader.load_config"
_PATCH_CLIENT = "recipekit.core.gateway.client.GatewayClient"
_PATCH_REGISTRY = "recipekit.core.cron.registry.GatewayCronRegistry"

_RECIPE = """---
id: standup-bot
cronJobs:
  - id: daily
    schedule: "0 9 * * *"
    message: standup
---
body
"""


def _recipe_file(tmp_path):
    path = tmp_path / "standup-bot.md"
    path.write_text(_RECIPE)
    return path


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "cron" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "recipekit v" in result.output


def test_reconcile_creates(tmp_path, registry):
    state_dir = tmp_path / "ws"
    with (
        patch(_PATCH_CONFIG, return_value=Config()),
        patch(_PATCH_CLIENT) as client_cls,
        patch(_PATCH_REGISTRY, return_value=registry),
    ):
        result = runner.invoke(app, [
            "cron", "reconcile", str(_recipe_file(tmp_path)),
            "--team", "acme-team", "--state-dir", str(state_dir), "--mode", "on",
        ])

    assert result.exit_code == 0, result.output
    assert "created" in result.output
    client_cls.from_config.return_value.close.assert_called_once()
    state = json.loads((state_dir / "notes" / "cron-jobs.json").read_text())
    assert list(state["entries"]) == ["team:acme-team:recipe:standup-bot:cron:daily"]


def test_reconcile_mode_off_note(tmp_path, registry):
    with (
        patch(_PATCH_CONFIG, return_value=Config(recipes={"cron_installation": "off"})),
        patch(_PATCH_CLIENT),
        patch(_PATCH_REGISTRY, return_value=registry),
    ):
        result = runner.invoke(app, [
            "cron", "reconcile", str(_recipe_file(tmp_path)),
            "--agent", "lead", "--state-dir", str(tmp_path / "ws"),
        ])
    assert result.exit_code == 0
    assert "cron-installation-off" in result.output
    assert registry.calls == []


def test_reconcile_requires_one_scope(tmp_path):
    result = runner.invoke(app, ["cron", "reconcile", str(_recipe_file(tmp_path))])
    assert result.exit_code == 1
    assert "exactly one" in result.output


def test_reconcile_missing_token(tmp_path):
    with patch(_PATCH_CONFIG, return_value=Config()):
        result = runner.invoke(app, [
            "cron", "reconcile", str(_recipe_file(tmp_path)),
            "--team", "acme-team", "--state-dir", str(tmp_path / "ws"), "--mode", "on",
        ])
    assert result.exit_code == 1
    assert "gateway.auth.token" in result.output


def test_reconcile_mode_off_needs_no_token(tmp_path):
    with patch(_PATCH_CONFIG, return_value=Config()):
        result = runner.invoke(app, [
            "cron", "reconcile", str(_recipe_file(tmp_path)),
            "--team", "acme-team", "--state-dir", str(tmp_path / "ws"), "--mode", "off",
        ])
    assert result.exit_code == 0, result.output
    assert "cron-installation-off" in result.output


def test_reconcile_remote_error(tmp_path):
    failing = MagicMock()
    failing.create.side_effect = RemoteUnavailable("gateway down")
    with (
        patch(_PATCH_CONFIG, return_value=Config()),
        patch(_PATCH_CLIENT),
        patch(_PATCH_REGISTRY, return_value=failing),
    ):
        result = runner.invoke(app, [
            "cron", "reconcile", str(_recipe_file(tmp_path)),
            "--team", "acme-team", "--state-dir", str(tmp_path / "ws"), "--mode", "on",
        ])
    assert result.exit_code == 1
    assert "gateway down" in result.output


def test_reconcile_unknown_recipe_id(tmp_path):
    with patch(_PATCH_CONFIG, return_value=Config(workspace=str(tmp_path / "workspace"))):
        result = runner.invoke(app, ["cron", "reconcile", "nope", "--team", "t"])
    assert result.exit_code == 1
    assert "Recipe not found" in result.output


def test_status_empty(tmp_path):
    result = runner.invoke(app, ["cron", "status", "--state-dir", str(tmp_path)])
    assert result.exit_code == 0
    assert "No cron mappings" in result.output


def test_status_lists_entries(tmp_path):
    path = tmp_path / "notes" / "cron-jobs.json"
    path.parent.mkdir()
    path.write_text(json.dumps({
        "version": 1,
        "entries": {"team:t:recipe:r:cron:daily": {
            "installedCronId": "cron-1", "specHash": "h", "orphaned": True, "updatedAtMs": 0,
        }},
    }))
    result = runner.invoke(app, ["cron", "status", "--state-dir", str(tmp_path)])
    assert result.exit_code == 0
    assert "cron-1" in result.output


def test_validate_ok(tmp_path):
    with patch(_PATCH_CONFIG, return_value=Config()):
        result = runner.invoke(app, ["cron", "validate", str(_recipe_file(tmp_path))])
    assert result.exit_code == 0
    assert "1 cron job(s)" in result.output


def test_validate_duplicate(tmp_path):
    path = tmp_path / "dup.md"
    path.write_text(_RECIPE.replace("---\nbody", "  - id: daily\n    schedule: x\n    message: y\n---\nbody"))
    with patch(_PATCH_CONFIG, return_value=Config()):
        result = runner.invoke(app, ["cron", "validate", str(path)])
    assert result.exit_code == 1
    assert "Duplicate" in result.output


def test_main_module():
    """python -m recipekit entry point is importable."""
    from recipekit.__main__ import app as main_app

    assert main_app is app
