"""Interactive yes/no oracle for cron install consent."""

from __future__ import annotations

import sys

from rich.console import Console
from rich.prompt import Confirm


def prompt_yes_no(header: str, console: Console | None = None) -> bool:
    """Ask ``header`` + ``Proceed?``; False without prompting when not on a TTY."""
    if not (sys.stdin and sys.stdin.isatty()):
        return False
    console = console or Console()
    console.print(header)
    return Confirm.ask("Proceed?", default=False, console=console)
