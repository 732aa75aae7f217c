"""recipekit CLI — Typer-based command-line interface."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from recipekit import __version__

app = typer.Typer(
    name="recipekit",
    help="recipekit - recipe cron job installer",
    no_args_is_help=True,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"recipekit v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=_version_callback, is_eager=True
    ),
) -> None:
    """recipekit - recipe cron job installer."""


def _resolve_recipe(ref: str, config):
    """Load a recipe from a file path, else by id from the workspace recipes dir."""
    from recipekit.recipes.loader import RecipeLoader, load_recipe

    path = Path(ref)
    if path.suffix == ".md" or path.exists():
        return load_recipe(path)

    builtin = config.recipes.builtin_recipes_dir
    loader = RecipeLoader(
        config.workspace_path / config.recipes.workspace_recipes_dir,
        Path(builtin).expanduser() if builtin else None,
    )
    recipe = loader.get(ref)
    if recipe is None:
        console.print(f"[red]Recipe not found:[/red] {ref}")
        raise typer.Exit(code=1)
    return recipe


def _scope_id(team: str | None, agent: str | None) -> tuple[str, str]:
    if bool(team) == bool(agent):
        console.print("[red]Error:[/red] pass exactly one of --team or --agent")
        raise typer.Exit(code=1)
    return ("team", team) if team else ("agent", agent)


# ════════════════════════════════════════════════════════════
# cron: recipe cron job management (sub-command group)
# ════════════════════════════════════════════════════════════

cron_app = typer.Typer(help="Manage recipe cron jobs")
app.add_typer(cron_app, name="cron")


@cron_app.command("reconcile")
def cron_reconcile(
    recipe_ref: str = typer.Argument(help="Recipe id or path to a recipe .md file"),
    team: str | None = typer.Option(None, "--team", help="Team id (team scope)"),
    agent: str | None = typer.Option(None, "--agent", help="Agent id (agent scope)"),
    state_dir: str | None = typer.Option(None, "--state-dir", help="Scope workspace dir"),
    mode: str | None = typer.Option(None, "--mode", "-m", help="off | prompt | on"),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
) -> None:
    """Install/update a recipe's cron jobs for a team or agent."""
    from recipekit.cli.output import render_outcome
    from recipekit.cli.prompt import prompt_yes_no
    from recipekit.core.config.loader import load_config
    from recipekit.core.cron.reconciler import reconcile_recipe_cron_jobs
    from recipekit.core.cron.registry import GatewayCronRegistry
    from recipekit.core.cron.types import ReconcileScope
    from recipekit.core.gateway.client import GatewayClient
    from recipekit.errors import RecipeKitError

    kind, scope_id = _scope_id(team, agent)
    config = load_config(config_path)
    client = None
    try:
        recipe = _resolve_recipe(recipe_ref, config)
        scope = ReconcileScope(
            kind=kind,
            scope_id=scope_id,
            recipe_id=recipe.id,
            state_dir=str(state_dir or config.scope_workspace(scope_id)),
        )
        client = GatewayClient.from_config(config)
        outcome = reconcile_recipe_cron_jobs(
            GatewayCronRegistry(client),
            recipe,
            scope,
            mode or config.recipes.cron_installation,
            prompt_yes_no=prompt_yes_no,
        )
    except (RecipeKitError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    finally:
        if client is not None:
            client.close()

    render_outcome(console, outcome)


@cron_app.command("status")
def cron_status(
    team: str | None = typer.Option(None, "--team", help="Team id"),
    agent: str | None = typer.Option(None, "--agent", help="Agent id"),
    state_dir: str | None = typer.Option(None, "--state-dir", help="Scope workspace dir"),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
) -> None:
    """Show the cron mapping store of a team/agent workspace."""
    from recipekit.cli.output import render_mapping_table
    from recipekit.core.config.loader import load_config
    from recipekit.core.cron.mapping import load_mapping_state, mapping_state_path

    if not state_dir:
        _, scope_id = _scope_id(team, agent)
        state_dir = str(load_config(config_path).scope_workspace(scope_id))

    path = mapping_state_path(state_dir)
    console.print(f"[dim]{path}[/dim]")
    render_mapping_table(console, load_mapping_state(path))


@cron_app.command("validate")
def cron_validate(
    recipe_ref: str = typer.Argument(help="Recipe id or path to a recipe .md file"),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config YAML path"),
) -> None:
    """Parse and validate a recipe's cron job declarations."""
    from recipekit.cli.output import render_jobs_table
    from recipekit.core.config.loader import load_config
    from recipekit.core.cron.normalize import normalize_recipe_cron_jobs
    from recipekit.errors import RecipeKitError

    config = load_config(config_path)
    try:
        recipe = _resolve_recipe(recipe_ref, config)
        jobs = normalize_recipe_cron_jobs(recipe)
    except (RecipeKitError, OSError) as e:
        console.print(f"[red]Invalid:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]Recipe[/green] {recipe.id}: {len(jobs)} cron job(s)")
    render_jobs_table(console, jobs)
