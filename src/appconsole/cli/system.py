"""CLI: appconsole system audit-logs|perf|perf-reset|cache|cache-clear"""

import click
from rich.console import Console
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


def _stats_table(title: str, stats) -> Table:
    table = Table(title=title)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    for key, value in stats.model_dump(by_alias=True).items():
        if value is not None:
            table.add_row(key, str(value))
    return table


@click.group()
def system():
    """System settings and telemetry."""


@system.command("audit-logs")
@click.option("--limit", default=50, type=int)
def system_audit_logs(limit):
    """Show recent audit log entries."""

    async def _logs():
        async with _get_client() as client:

            async def render():
                with console.status("Loading audit log..."):
                    entries = await client.system.audit_logs()
                table = Table(title=f"Audit log ({len(entries)} entries)")
                table.add_column("Time")
                table.add_column("User")
                table.add_column("Action")
                table.add_column("Target")
                table.add_column("IP")
                table.add_column("Status")
                for e in entries[:limit]:
                    style = "green" if e.status == "success" else "red"
                    table.add_row(
                        e.timestamp or e.created_at, e.actor, e.action, e.target, e.ip_address,
                        f"[{style}]{e.status}[/{style}]",
                    )
                console.print(table)

            await _protected(client, render)

    _run(_logs())


@system.command("perf")
def system_perf():
    """Show request performance statistics."""

    async def _perf():
        async with _get_client() as client:

            async def render():
                stats = await client.system.performance_stats()
                console.print(_stats_table("Performance", stats))

            await _protected(client, render)

    _run(_perf())


@system.command("perf-reset")
def system_perf_reset():
    """Reset performance statistics."""

    async def _reset():
        async with _get_client() as client:

            async def render():
                await client.system.reset_performance_stats()
                console.print("[green]Performance statistics reset.[/green]")

            await _protected(client, render)

    _run(_reset())


@system.command("cache")
def system_cache():
    """Show cache statistics."""

    async def _cache():
        async with _get_client() as client:

            async def render():
                stats = await client.system.cache_stats()
                console.print(_stats_table("Cache", stats))

            await _protected(client, render)

    _run(_cache())


@system.command("cache-clear")
def system_cache_clear():
    """Clear the backend cache."""

    async def _clear():
        async with _get_client() as client:

            async def render():
                await client.system.clear_cache()
                console.print("[green]Cache cleared.[/green]")

            await _protected(client, render)

    _run(_clear())
