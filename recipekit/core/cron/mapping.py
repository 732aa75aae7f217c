"""Mapping store — recipe job key → installed scheduler job id (JSON file).

Single writer per scope + recipe is assumed: there is no lock and no
version check, the last save wins.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from recipekit.core.cron.types import MappingEntry, MappingState

STATE_FILE = Path("notes") / "cron-jobs.json"


def mapping_state_path(state_dir: str | Path) -> Path:
    """``<stateDir>/notes/cron-jobs.json``."""
    return Path(state_dir) / STATE_FILE


def load_mapping_state(path: str | Path) -> MappingState:
    """Load mapping state; an unusable file yields an empty v1 state.

    Individual entries that fail validation are dropped, the rest are kept.
    """
    path = Path(path)
    if not path.exists():
        return MappingState()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.debug(f"Ignoring unreadable cron mapping state {path}: {e}")
        return MappingState()

    if not isinstance(data, dict) or data.get("version") != 1:
        logger.debug(f"Discarding cron mapping state {path} (unsupported version)")
        return MappingState()
    if not isinstance(data.get("entries"), dict):
        return MappingState()

    entries: dict[str, MappingEntry] = {}
    for key, raw in data["entries"].items():
        try:
            entries[key] = MappingEntry.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning(f"Dropping malformed cron mapping entry {key} in {path}: {e}")
    return MappingState(entries=entries)


def save_mapping_state(path: str | Path, state: MappingState) -> None:
    """Write the full state atomically (temp file + rename)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(state.model_dump(by_alias=True), indent=2) + "\n"

    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp", prefix=".cron-jobs_")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
