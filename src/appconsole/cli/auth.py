"""CLI: appconsole init, appconsole auth login|register|status|logout"""

from typing import Optional

import click
from rich.console import Console

from appconsole.config import load_config, save_config
from appconsole.session_store import FileSessionStore

console = Console()


def _get_client():
    from appconsole.cli.main import _get_client
    return _get_client()


def _run(coro):
    from appconsole.cli.main import _run
    return _run(coro)


@click.command("init")
@click.option("--username", prompt=True)
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def init_cmd(username: str, email: str, password: str):
    """Create the first administrator account."""

    async def _init():
        async with _get_client() as client:
            with console.status("Checking system status..."):
                status = await client.system.get_init_status()
            if status.initialized:
                console.print("[green]System is already initialized.[/green] Run `appconsole auth login`.")
                return
            with console.status("Creating administrator..."):
                await client.system.init_admin(username, email, password)
        console.print("[green]Administrator account created.[/green] Run `appconsole auth login`.")

    _run(_init())


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--username", default=None, help="Administrator username")
@click.option("--password", default=None, help="Password (prompted when omitted)")
def auth_login(username: Optional[str], password: Optional[str]):
    """Log in with username and password."""
    cfg = load_config()
    username = username or click.prompt("Username", default=cfg.get("username"))
    password = password or click.prompt("Password", hide_input=True)

    async def _login():
        async with _get_client() as client:
            with console.status("Logging in..."):
                result = await client.auth.login(username, password)
        user = result.get("user") or {}
        console.print(f"[green]Logged in as {user.get('username', username)}[/green]")

    _run(_login())
    # The token is already in the config file; keep it and add the username.
    save_config({**load_config(), "username": username})


@auth.command("register")
@click.option("--username", prompt=True)
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def auth_register(username: str, email: str, password: str):
    """Register a new console account."""

    async def _register():
        async with _get_client() as client:
            with console.status("Registering..."):
                await client.auth.register(username, email, password)
        console.print(f"[green]Account {username} registered.[/green] Run `appconsole auth login`.")

    _run(_register())


@auth.command("status")
def auth_status():
    """Show current auth status."""
    cfg = load_config()
    if cfg.get("access_token"):
        console.print(f"[green]Logged in[/green] as {cfg.get('username', 'unknown')}")
    else:
        console.print("[yellow]Not logged in. Run `appconsole auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Clear the saved session token."""
    FileSessionStore().clear()
    console.print("[green]Logged out.[/green]")
