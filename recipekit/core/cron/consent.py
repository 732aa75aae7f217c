"""Consent resolution for recipe cron installation (off / prompt / on)."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from recipekit.core.cron.types import CronInstallMode
from recipekit.errors import ValidationError

NOTE_OFF = "cron-installation-off"
NOTE_DECLINED = "cron-installation-declined"


@dataclass(frozen=True)
class ConsentDecision:
    """proceed=False carries a note; proceed=True carries user_opt_in."""

    proceed: bool
    user_opt_in: bool = False
    note: str | None = None


def _stdin_is_tty() -> bool:
    return bool(sys.stdin and sys.stdin.isatty())


def resolve_consent(
    mode: CronInstallMode,
    recipe_id: str,
    desired_count: int,
    prompt_yes_no: Callable[[str], bool] | None = None,
    is_interactive: bool | None = None,
) -> ConsentDecision:
    """Decide whether recipe jobs get installed and whether they may be enabled.

    In ``prompt`` mode without a terminal, jobs are still installed but kept
    disabled so the user can opt in later.
    """
    if mode == "off":
        return ConsentDecision(proceed=False, note=NOTE_OFF)
    if mode == "on":
        return ConsentDecision(proceed=True, user_opt_in=True)
    if mode != "prompt":
        raise ValidationError(f"Unknown cron installation mode: {mode!r}")

    interactive = _stdin_is_tty() if is_interactive is None else is_interactive
    if not interactive or prompt_yes_no is None:
        logger.warning("Non-interactive mode: defaulting cron install to disabled.")
        return ConsentDecision(proceed=True, user_opt_in=False)

    header = (
        f"Recipe {recipe_id} defines {desired_count} cron job(s).\n"
        "These run automatically on a schedule. Install them?"
    )
    if not prompt_yes_no(header):
        return ConsentDecision(proceed=False, note=NOTE_DECLINED)
    return ConsentDecision(proceed=True, user_opt_in=True)
