"""GITSENTINEL hook install, remove and status commands."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from gitsentinel.commands._utils import _quiet_logging
from gitsentinel.exceptions import HookInstallError
from gitsentinel.hooks import hook_status, install_hooks, remove_hooks

console = Console()

_PATH_OPTION = click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Repository root",
)


@click.group(name="hook")
def hook_group() -> None:
    """Manage the post-commit and pre-push hooks."""
    pass


@hook_group.command(name="install")
@_PATH_OPTION
@click.option("--post-commit/--no-post-commit", default=True, help="Install the post-commit notifier")
@click.option("--pre-push/--no-pre-push", default=True, help="Install the pre-push secret scan")
def install_command(path: Path, post_commit: bool, pre_push: bool) -> None:
    """Install hooks. Re-running refreshes them in place."""
    if not post_commit and not pre_push:
        raise click.UsageError("Nothing to install: both hooks are disabled")
    try:
        installed = install_hooks(path.resolve(), post_commit=post_commit, pre_push=pre_push)
    except HookInstallError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    for name in installed:
        console.print(f"  [green]installed[/green] {name}")


@hook_group.command(name="remove")
@_PATH_OPTION
def remove_command(path: Path) -> None:
    """Remove hooks, keeping any other content in the hook files."""
    try:
        removed = remove_hooks(path.resolve())
    except HookInstallError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    if not removed:
        console.print("[dim]No gitsentinel hooks found[/dim]")
    for name in removed:
        console.print(f"  [yellow]removed[/yellow] {name}")


@hook_group.command(name="status")
@_PATH_OPTION
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def status_command(path: Path, json_output: bool) -> None:
    """Show which hooks are installed."""
    status = hook_status(path.resolve())

    if json_output:
        _quiet_logging()
        click.echo(json.dumps(status, indent=2))
        return

    table = Table(title=f"Hooks in {path.resolve().name}")
    table.add_column("Hook", style="cyan")
    table.add_column("Installed")
    for name, installed in status.items():
        table.add_row(name, "[green]Yes[/green]" if installed else "[red]No[/red]")
    console.print(table)
