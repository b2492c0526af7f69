"""
appconsole CLI — `appconsole` command.

Commands:
  appconsole init               Create the first administrator
  appconsole auth <cmd>         Log in / out, register, show status
  appconsole apps <cmd>         Application management
  appconsole release <cmd>      Check, publish, list and diff releases
  appconsole members <cmd>      Member levels
  appconsole system <cmd>       Audit log, performance and cache telemetry
"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import click
from rich.console import Console

from appconsole.client import AsyncAdminConsole
from appconsole.config import load_config, resolve_base_url
from appconsole.errors import ConsoleError
from appconsole.gate import MountScope, SessionState, View
from appconsole.logging_setup import setup_logging
from appconsole.session_store import FileSessionStore

console = Console()
logger = logging.getLogger(__name__)

T = TypeVar("T")

REDIRECTS = {
    View.INIT: "System is not initialized. Run `appconsole init` first.",
    View.LOGIN: "Not logged in. Run `appconsole auth login` first.",
}


def _get_client() -> AsyncAdminConsole:
    ctx = click.get_current_context(silent=True)
    override = (ctx.find_root().obj or {}).get("base_url") if ctx else None
    return AsyncAdminConsole(
        base_url=resolve_base_url(override, load_config()),
        session_store=FileSessionStore(),
    )


def _run(coro: Awaitable[T]) -> T:
    """Run a command coroutine; console errors end the command with a message."""
    try:
        return asyncio.run(coro)
    except ConsoleError as e:
        logger.debug("command failed", exc_info=e)
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)


def _redirect(view: View) -> None:
    console.print(f"[yellow]{REDIRECTS[view]}[/yellow]")


def _notice(message: str) -> None:
    console.print(f"[yellow]{message}[/yellow]")


async def _protected(client: AsyncAdminConsole, render: Callable[[], Awaitable[T]]) -> Optional[T]:
    """Gate a protected command: render only once the session is READY."""
    with MountScope() as scope:
        gate = client.gate(scope, navigator=_redirect, notifier=_notice)
        result = await gate.guard(render)
    if gate.state is not SessionState.READY:
        raise SystemExit(1)
    return result


@click.group()
@click.version_option("0.1.0")
@click.option("--base-url", default=None, help="Backend base URL (default: config, then http://localhost:8080)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also write DEBUG logs to this file")
@click.pass_context
def main(ctx: click.Context, base_url: Optional[str], verbose: bool, log_file: Optional[Path]) -> None:
    """appconsole — manage applications, releases and member levels."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["base_url"] = base_url


# Register subcommands from separate modules
from appconsole.cli.auth import auth, init_cmd
from appconsole.cli.apps import apps
from appconsole.cli.release import release
from appconsole.cli.members import members
from appconsole.cli.system import system

main.add_command(init_cmd)
main.add_command(auth)
main.add_command(apps)
main.add_command(release)
main.add_command(members)
main.add_command(system)


if __name__ == "__main__":
    main()
