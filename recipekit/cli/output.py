"""Rich output formatters for the CLI."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.table import Table

from recipekit.core.cron.types import CronJobSpec, MappingState, ReconcileOutcome

_ACTION_STYLES = {
    "created": "green",
    "updated": "yellow",
    "unchanged": "dim",
    "disabled": "red",
    "disabled-removed": "red",
}


def render_outcome(console: Console, outcome: ReconcileOutcome) -> None:
    """Render a reconciliation outcome as a Rich table."""
    if outcome.note:
        suffix = f" ({outcome.desired_count} job(s))" if outcome.desired_count is not None else ""
        console.print(f"[dim]No cron changes: {outcome.note}{suffix}[/dim]")
        return
    table = Table(title="Cron Reconcile")
    table.add_column("Action", no_wrap=True)
    table.add_column("Key", style="cyan")
    table.add_column("Installed ID", style="blue", no_wrap=True)
    table.add_column("Enabled", style="green")
    for r in outcome.results:
        style = _ACTION_STYLES.get(r.action, "white")
        enabled = "-" if r.enabled is None else str(r.enabled)
        table.add_row(f"[{style}]{r.action}[/{style}]", r.key, r.installed_cron_id, enabled)
    console.print(table)
    console.print(f"changed: {outcome.changed}")


def render_mapping_table(console: Console, state: MappingState) -> None:
    """Render the mapping store entries."""
    if not state.entries:
        console.print("[dim]No cron mappings.[/dim]")
        return
    table = Table(title="Cron Mappings")
    table.add_column("Key", style="cyan")
    table.add_column("Installed ID", style="blue", no_wrap=True)
    table.add_column("Orphaned", style="yellow")
    table.add_column("Updated", style="dim")
    for key, entry in sorted(state.entries.items()):
        updated = datetime.fromtimestamp(entry.updated_at_ms / 1000).isoformat(timespec="seconds")
        table.add_row(key, entry.installed_cron_id, str(entry.orphaned), updated)
    console.print(table)


def render_jobs_table(console: Console, jobs: list[CronJobSpec]) -> None:
    """Render normalized recipe cron jobs."""
    if not jobs:
        console.print("[dim]No cron jobs declared.[/dim]")
        return
    table = Table(title="Recipe Cron Jobs")
    table.add_column("ID", style="cyan")
    table.add_column("Schedule", style="yellow")
    table.add_column("Message", style="white")
    table.add_column("Agent", style="blue")
    table.add_column("Enabled by default", style="green")
    for j in jobs:
        table.add_row(j.id, j.schedule, j.message, j.agent_id or "-", str(j.enabled_by_default))
    console.print(table)
