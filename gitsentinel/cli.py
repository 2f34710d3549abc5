"""GITSENTINEL command-line interface."""

import click

from gitsentinel import __version__
from gitsentinel.commands import (
    health,
    hook_group,
    notify_group,
    queue_group,
    scan_group,
    serve,
)


@click.group()
@click.version_option(version=__version__, prog_name="gitsentinel")
def cli() -> None:
    """GITSENTINEL - commit notifications and a pre-push secret gate for git."""
    pass


cli.add_command(hook_group)
cli.add_command(scan_group)
cli.add_command(notify_group)
cli.add_command(queue_group)
cli.add_command(serve)
cli.add_command(health)


if __name__ == "__main__":
    cli()
