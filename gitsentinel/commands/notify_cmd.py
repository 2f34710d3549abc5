"""GITSENTINEL post-commit notifier command."""

from __future__ import annotations

import click

from gitsentinel.commands._utils import _configure_logging, _load_config_or_default
from gitsentinel.logging import get_logger, set_hook_context
from gitsentinel.notify import run_post_commit

logger = get_logger("commands.notify")


@click.group(name="notify")
def notify_group() -> None:
    """Deliver hook events to the companion service."""
    pass


@notify_group.command(name="post-commit")
@click.argument("project_path", default=".")
def post_commit_command(project_path: str) -> None:
    """Notify of a new commit, queuing it when the service is down. Always exits 0."""
    set_hook_context(hook="post-commit", project=project_path)
    try:
        config = _load_config_or_default(project_path)
        _configure_logging(config)
        result = run_post_commit(project_path, config)
        click.echo(f"gitsentinel: {result.outcome.value}")
    except Exception as e:  # noqa: BLE001 -- intentional: never break git commit
        logger.warning(f"Post-commit notification failed: {e}")
