"""GITSENTINEL offline queue commands."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from gitsentinel.commands._utils import _quiet_logging
from gitsentinel.config import SentinelConfig, resolve_dev_root
from gitsentinel.exceptions import ConfigurationError
from gitsentinel.queue import complete, drain_pending

console = Console()

_ROOT_OPTION = click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding projects (default: DEV_ROOT or current directory)",
)


def _root(root: Path | None) -> Path:
    if root is not None:
        return root.resolve()
    try:
        return resolve_dev_root()
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e


def _queue_dir_name(root_path: Path) -> str:
    """Queue directory name from the root's config, matching what serve drains."""
    try:
        return SentinelConfig.for_project(root_path).queue.dir_name
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e


@click.group(name="queue")
def queue_group() -> None:
    """Inspect pending post-commit jobs."""
    pass


@queue_group.command(name="list")
@_ROOT_OPTION
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def list_command(root: Path | None, json_output: bool) -> None:
    """List pending jobs under the root and its immediate subdirectories."""
    if json_output:
        _quiet_logging()
    root_path = _root(root)
    jobs = drain_pending(root_path, _queue_dir_name(root_path))

    if json_output:
        click.echo(json.dumps([job.to_dict() for job in jobs], indent=2))
        return
    if not jobs:
        console.print("[dim]No pending jobs[/dim]")
        return

    table = Table(title=f"{len(jobs)} pending job(s)")
    table.add_column("Project", style="cyan")
    table.add_column("Type")
    table.add_column("Saved at")
    for job in jobs:
        table.add_row(job.project_path, job.type, job.saved_at)
    console.print(table)


@queue_group.command(name="clear")
@_ROOT_OPTION
@click.confirmation_option(prompt="Delete all pending jobs?")
def clear_command(root: Path | None) -> None:
    """Delete every pending job record."""
    root_path = _root(root)
    jobs = drain_pending(root_path, _queue_dir_name(root_path))
    for job in jobs:
        complete(job)
    console.print(f"Removed {len(jobs)} job(s)")
