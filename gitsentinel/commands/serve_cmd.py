"""GITSENTINEL companion service command."""

from __future__ import annotations

from pathlib import Path

import click
import uvicorn
from rich.console import Console

from gitsentinel.commands._utils import _configure_logging
from gitsentinel.config import SentinelConfig, resolve_dev_root
from gitsentinel.exceptions import ConfigurationError
from gitsentinel.llm import build_provider
from gitsentinel.service import create_app

console = Console()


@click.command(name="serve")
@click.option("--host", default=None, help="Bind address (default from config)")
@click.option("--port", type=int, default=None, help="Port (default from config or PORT)")
@click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding projects (default: DEV_ROOT or current directory)",
)
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
def serve(host: str | None, port: int | None, root: Path | None, config_path: Path | None) -> None:
    """Run the companion service and drain queued jobs."""
    try:
        root_path = resolve_dev_root(env={} if root else None, cwd=root)
        config = SentinelConfig.load(config_path or root_path / ".gitsentinel" / "config.yaml")
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    _configure_logging(config)
    provider = build_provider(config.llm, cwd=root_path)
    if provider is None:
        console.print("[yellow]No LLM provider configured; queued jobs will wait[/yellow]")

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    console.print(f"[bold blue]gitsentinel[/bold blue] serving {root_path} on http://{bind_host}:{bind_port}")
    uvicorn.run(create_app(config, root_path, provider=provider), host=bind_host, port=bind_port, log_level="warning")
