"""CLI: appconsole apps list|show|create|delete"""

import json

import click
from rich.console import Console
from rich.table import Table

console = Console()

STATUS_STYLES = {"active": "green", "maintenance": "yellow", "deprecated": "red"}


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
def apps():
    """Application management."""


@apps.command("list")
@click.option("--json-output", "--json", is_flag=True)
def apps_list(json_output):
    """List applications."""

    async def _list():
        async with _get_client() as client:

            async def render():
                with console.status("Loading applications..."):
                    items = await client.apps.list()
                if json_output:
                    click.echo(json.dumps([a.model_dump(by_alias=True) for a in items], indent=2))
                    return
                table = Table(title=f"Applications ({len(items)} total)")
                table.add_column("ID", style="bold")
                table.add_column("Name")
                table.add_column("Latest")
                table.add_column("Status")
                table.add_column("Updated")
                for a in items:
                    style = STATUS_STYLES.get(a.status, "white")
                    table.add_row(
                        str(a.id), a.name, a.latest_version or "-", f"[{style}]{a.status}[/{style}]", a.updated_at,
                    )
                console.print(table)

            await _protected(client, render)

    _run(_list())


@apps.command("show")
@click.argument("app_id", type=int)
def apps_show(app_id):
    """Show one application and its API key."""

    async def _show():
        async with _get_client() as client:

            async def render():
                app = await client.apps.get(app_id)
                console.print(f"[bold]{app.name}[/bold] (ID {app.id}) [{STATUS_STYLES.get(app.status, 'white')}]{app.status}[/]")
                if app.description:
                    console.print(app.description)
                console.print(f"Latest version: {app.latest_version or '-'}")
                console.print(f"API key: {app.api_key}")
                console.print(f"[dim]Created {app.created_at}, updated {app.updated_at}[/dim]")

            await _protected(client, render)

    _run(_show())


@apps.command("create")
@click.argument("name")
@click.option("-d", "--description", default="")
def apps_create(name, description):
    """Create an application."""

    async def _create():
        async with _get_client() as client:

            async def render():
                with console.status("Creating application..."):
                    app = await client.apps.create(name, description)
                console.print(f"[green]Application created: {app.name} (ID {app.id})[/green]")
                console.print(f"API key: {app.api_key}")

            await _protected(client, render)

    _run(_create())


@apps.command("delete")
@click.argument("app_id", type=int)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
def apps_delete(app_id, yes):
    """Delete an application."""
    if not yes:
        click.confirm(f"Delete application {app_id}?", abort=True)

    async def _delete():
        async with _get_client() as client:

            async def render():
                with console.status("Deleting..."):
                    await client.apps.delete(app_id)
                console.print(f"[green]Application {app_id} deleted.[/green]")

            await _protected(client, render)

    _run(_delete())
