"""CLI: appconsole members list|update"""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

console = Console()


def _get_client():
    from appconsole.cli.main import _get_client
    return _get_client()


def _run(coro):
    from appconsole.cli.main import _run
    return _run(coro)


def _protected(client, render):
    from appconsole.cli.main import _protected
    return _protected(client, render)


@click.group()
def members():
    """Member level management."""


@members.command("list")
@click.option("--permissions", is_flag=True, help="Print each level's permissions JSON")
def members_list(permissions):
    """List member levels."""

    async def _list():
        async with _get_client() as client:

            async def render():
                levels = await client.members.levels()
                table = Table(title=f"Member levels ({len(levels)})")
                table.add_column("Level", style="bold")
                table.add_column("Name")
                table.add_column("App")
                for lv in levels:
                    table.add_row(str(lv.level), lv.name, str(lv.app_id or "-"))
                console.print(table)
                if permissions:
                    for lv in levels:
                        console.print(f"[bold]{lv.name}[/bold]")
                        console.print(Syntax(lv.permissions, "json"))

            await _protected(client, render)

    _run(_list())


@members.command("update")
@click.argument("levels_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def members_update(levels_file: Path):
    """Replace member levels with the JSON list in LEVELS_FILE."""
    try:
        levels = json.loads(levels_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e.msg}", param_hint="LEVELS_FILE") from e
    if isinstance(levels, dict):
        levels = levels.get("levels", [])
    if not isinstance(levels, list):
        raise click.BadParameter("expected a JSON list of levels or {\"levels\": [...]}", param_hint="LEVELS_FILE")
    for index, lv in enumerate(levels, start=1):
        if not isinstance(lv, dict):
            raise click.BadParameter(f"level {index} is not a JSON object", param_hint="LEVELS_FILE")
        # Permissions may be given inline as an object
        if isinstance(lv.get("permissions"), (dict, list)):
            lv["permissions"] = json.dumps(lv["permissions"], indent=2)

    async def _update():
        async with _get_client() as client:

            async def render():
                with console.status("Saving member levels..."):
                    saved = await client.members.update_levels(levels)
                console.print(f"[green]Saved {len(saved)} member levels.[/green]")

            await _protected(client, render)

    _run(_update())
