"""Configuration loader — YAML file (own or host layout) + env override."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from recipekit.core.config.schema import Config

# Host config: plugin settings live under plugins.entries.recipes.config
_HOST_RECIPE_KEYS = {
    "workspaceRecipesDir": "workspace_recipes_dir",
    "builtinRecipesDir": "builtin_recipes_dir",
    "cronInstallation": "cron_installation",
}


def load_config(config_path: str | Path | None = None) -> Config:
    """
    Load configuration.

    Resolution order for config file:
        1. Explicit ``config_path`` argument
        2. ``RECIPEKIT_CONFIG`` env variable
        3. ``./config.yaml`` in cwd

    The file may be recipekit's own layout or the host's config
    (``gateway`` + ``agents.defaults.workspace`` + ``plugins.entries.recipes``).

    Values priority (handled by pydantic-settings):
        env vars  >  .env file  >  YAML  >  defaults
    """
    data = _load_yaml(_resolve_path(config_path))
    return Config(**from_host_layout(data))


def from_host_layout(data: dict[str, Any]) -> dict[str, Any]:
    """Translate a host config dict into Config kwargs; own layout passes through."""
    plugin = ((data.get("plugins") or {}).get("entries") or {}).get("recipes")
    workspace = ((data.get("agents") or {}).get("defaults") or {}).get("workspace")
    if plugin is None and workspace is None:
        return data

    out = {k: v for k, v in data.items() if k in ("gateway", "workspace", "recipes")}
    if workspace and "workspace" not in out:
        out["workspace"] = workspace

    recipes = dict(out.get("recipes") or {})
    for host_key, key in _HOST_RECIPE_KEYS.items():
        value = ((plugin or {}).get("config") or {}).get(host_key)
        if value is not None:
            recipes.setdefault(key, value)
    if recipes:
        out["recipes"] = recipes
    return out


def _resolve_path(config_path: str | Path | None = None) -> Path | None:
    if config_path:
        return Path(config_path)

    env = os.environ.get("RECIPEKIT_CONFIG")
    if env:
        return Path(env)

    default = Path("config.yaml")
    return default if default.exists() else None


def _load_yaml(path: Path | None) -> dict[str, Any]:
    """Load YAML (JSON is valid YAML too); empty dict if not found."""
    if not path or not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}
