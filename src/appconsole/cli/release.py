"""CLI: appconsole release check|publish|history|diff"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from appconsole.apps import INITIAL_BASELINE
from appconsole.changelog import diff_changelogs, render_changelog, render_diff, validate_changelog
from appconsole.errors import InvalidFormat
from appconsole.versioning import VersionComparison, check_release, release_tier

console = Console()

BADGES = {
    VersionComparison.HIGHER: "[green]upgrade[/green]",
    VersionComparison.LOWER: "[red]downgrade[/red]",
    VersionComparison.EQUAL: "[yellow]same[/yellow]",
}
TIER_STYLES = {"major": "red", "minor": "yellow", "patch": "green"}

CHANGELOG_TEMPLATE = "## New features\n- \n\n## Fixes\n- \n"


def _get_client():
    from appconsole.cli.main import _get_client
    return _get_client()


def _run(coro):
    from appconsole.cli.main import _run
    return _run(coro)


def _protected(client, render):
    from appconsole.cli.main import _protected
    return _protected(client, render)


def _report_check(candidate: str, baseline: str) -> bool:
    """Print the badge and reason for a candidate; True when it may be released."""
    check = check_release(candidate, baseline)
    if check.comparison is not None:
        console.print(f"{candidate} vs {baseline}: {BADGES[check.comparison]}")
    if not check.allowed:
        console.print(f"[red]{check.reason}[/red]")
    return check.allowed


def _tier_badge(version: str) -> str:
    try:
        style = TIER_STYLES[release_tier(version)]
    except InvalidFormat:
        return version
    return f"[{style}]{version}[/{style}]"


@click.group()
def release():
    """Release versions and browse version history."""


@release.command("check")
@click.argument("candidate")
@click.argument("baseline")
def release_check(candidate, baseline):
    """Check whether CANDIDATE may be released on top of BASELINE."""
    if not _report_check(candidate, baseline):
        raise SystemExit(1)


@release.command("publish")
@click.argument("app_id", type=int)
@click.argument("version")
@click.option("-m", "--changelog", "changelog_md", default=None, help="Changelog Markdown")
@click.option("-f", "--changelog-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None)
@click.option("--preview", is_flag=True, help="Show the rendered changelog and ask before publishing")
def release_publish(app_id, version, changelog_md: Optional[str], changelog_file: Optional[Path], preview):
    """Publish VERSION for application APP_ID."""
    if changelog_file is not None:
        changelog_md = changelog_file.read_text(encoding="utf-8")
    elif changelog_md is None:
        changelog_md = click.edit(CHANGELOG_TEMPLATE) or ""

    async def _publish():
        async with _get_client() as client:

            async def render():
                app = await client.apps.get(app_id)
                baseline = app.latest_version or INITIAL_BASELINE
                if not _report_check(version, baseline):
                    raise SystemExit(1)
                validate_changelog(changelog_md)
                if preview:
                    console.print(Panel(render_changelog(changelog_md), title=f"{app.name} {version}"))
                    click.confirm("Publish this release?", abort=True)
                with console.status("Publishing..."):
                    published = await client.apps.release(app_id, version, changelog_md, baseline=baseline)
                console.print(f"[green]Released {app.name} {published.version}.[/green]")

            await _protected(client, render)

    _run(_publish())


@release.command("history")
@click.argument("app_id", type=int)
@click.option("--show", "show_version", default=None, help="Render the changelog of one version")
def release_history(app_id, show_version):
    """List the versions of an application."""

    async def _history():
        async with _get_client() as client:

            async def render():
                with console.status("Loading versions..."):
                    versions = await client.apps.versions(app_id)
                if show_version:
                    match = next((v for v in versions if v.version == show_version), None)
                    if match is None:
                        console.print(f"[red]Version {show_version} not found.[/red]")
                        raise SystemExit(1)
                    console.print(Panel(render_changelog(match.changelog_md), title=match.version))
                    return
                table = Table(title=f"Versions ({len(versions)} total)")
                table.add_column("Version")
                table.add_column("Released")
                table.add_column("Changelog")
                for v in versions:
                    first = next((line for line in v.changelog_md.split("\n") if line.strip()), "")
                    table.add_row(_tier_badge(v.version), v.created_at, first)
                console.print(table)

            await _protected(client, render)

    _run(_history())


@release.command("diff")
@click.argument("app_id", type=int)
@click.argument("version_a", required=False)
@click.argument("version_b", required=False)
def release_diff(app_id, version_a, version_b):
    """Compare the changelogs of two versions (default: the two newest)."""

    async def _diff():
        async with _get_client() as client:

            async def render():
                versions = await client.apps.versions(app_id)
                a, b = version_a, version_b
                if a is None and len(versions) >= 1:
                    a = versions[0].version
                if b is None and len(versions) >= 2:
                    b = versions[1].version
                by_version = {v.version: v for v in versions}
                if a not in by_version or b not in by_version:
                    console.print("[red]Select two existing versions to compare.[/red]")
                    raise SystemExit(1)
                diff = diff_changelogs(by_version[a].changelog_md, by_version[b].changelog_md)
                console.print(Panel(render_diff(diff), title=f"{a} → {b}"))

            await _protected(client, render)

    _run(_diff())
