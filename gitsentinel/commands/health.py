import click
from rich.console import Console
from rich.table import Table

from gitsentinel.config import SentinelConfig
from gitsentinel.exceptions import ConfigurationError
from gitsentinel.llm import OllamaProvider, build_provider
from gitsentinel.notify import probe_server

console = Console()


@click.command()
def health() -> None:
    """Check the companion service and the configured LLM provider."""
    try:
        config = SentinelConfig.load()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e

    console.print("[bold blue]GITSENTINEL Health Check[/bold blue]")
    console.print("-" * 40)

    if probe_server(config.server.base_url, config.server.probe_timeout_seconds):
        console.print(f"[bold green]✔ Companion service running[/bold green] at {config.server.base_url}")
    else:
        console.print(f"[yellow]✘ Companion service not reachable[/yellow] at {config.server.base_url}")

    provider = build_provider(config.llm)
    if provider is None:
        console.print("[dim]No LLM provider configured (verification and analysis disabled)[/dim]")
        return

    console.print(f"Active Provider: [bold green]{provider.name}[/bold green]")
    health_data = provider.check_health()
    if health_data["status"] == "ok":
        console.print("[bold green]✔ LLM Provider is Healthy[/bold green]")
    else:
        console.print("[bold red]✘ LLM Provider Health Check Failed[/bold red]")

    if isinstance(provider, OllamaProvider):
        table = Table(title=f"Ollama Hosts (Model: {provider.model})")
        table.add_column("Host", style="cyan")
        table.add_column("Reachable", style="magenta")
        table.add_column("Model Downloaded", style="green")
        for host in health_data.get("hosts", []):
            table.add_row(
                host["host"],
                "[green]Yes[/green]" if host["reachable"] else "[red]No[/red]",
                "[green]Yes[/green]" if host.get("has_model") else "[red]No[/red]",
            )
        console.print(table)
    else:
        console.print(f"Claude CLI: {health_data.get('binary') or '[red]not found[/red]'}")
