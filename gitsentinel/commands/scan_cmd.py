"""GITSENTINEL secret scan commands."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from gitsentinel.commands._utils import _configure_logging, _load_config_or_default
from gitsentinel.git import GitRunner
from gitsentinel.llm import build_provider
from gitsentinel.logging import get_logger, set_hook_context
from gitsentinel.security import Finding, PathFilter, scan_content
from gitsentinel.security.gate import PushGate, parse_ref_updates
from gitsentinel.security.verifier import FindingVerifier

console = Console()
logger = get_logger("commands.scan")


@click.group(name="scan")
def scan_group() -> None:
    """Scan content for secrets."""
    pass


@scan_group.command(name="pre-push")
@click.argument("project_path", type=click.Path(path_type=Path), default=".")
def pre_push_command(project_path: Path) -> None:
    """Pre-push gate: read ref updates on stdin, exit 1 to block.

    Invoked by the pre-push hook. Tool failures allow the push.
    """
    set_hook_context(hook="pre-push", project=str(project_path))
    try:
        exit_code = _run_gate(project_path, click.get_text_stream("stdin").read().splitlines())
    except Exception as e:  # noqa: BLE001 -- intentional: a broken scanner must not block pushes
        logger.warning(f"Secret scan failed, allowing push: {e}")
        exit_code = 0
    sys.exit(exit_code)


def _run_gate(project_path: Path, lines: list[str]) -> int:
    config = _load_config_or_default(project_path)
    _configure_logging(config)

    provider = build_provider(config.llm, cwd=project_path) if config.scan.verify else None
    gate = PushGate(
        GitRunner(project_path),
        config=config.scan,
        verifier=FindingVerifier(provider, timeout=config.scan.verify_timeout_seconds),
    )
    decision = gate.decide(parse_ref_updates(lines), os.environ)

    if decision.bypassed:
        click.echo(f"gitsentinel: secret scan skipped ({config.scan.bypass_env_var} is set)", err=True)
    elif decision.report:
        click.echo(decision.report, err=True, nl=False)
    return decision.exit_code


@scan_group.command(name="file")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
def file_command(paths: tuple[Path, ...]) -> None:
    """Scan working-tree files. Exits 1 when anything is found."""
    path_filter = PathFilter()
    findings: list[Finding] = []

    for path in paths:
        display = path.as_posix()
        if path_filter.should_skip(display):
            console.print(f"[dim]skipped {display}[/dim]")
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[dim]unreadable {display}: {e}[/dim]")
            continue
        findings.extend(scan_content(content, display))

    if not findings:
        console.print("[green]No secrets found[/green]")
        return

    table = Table(title=f"{len(findings)} potential secret(s)")
    table.add_column("Location", style="cyan")
    table.add_column("Severity")
    table.add_column("Rule")
    table.add_column("Value", style="magenta")
    for f in findings:
        color = "red" if f.severity == "critical" else "yellow"
        table.add_row(f"{f.file_path}:{f.line_number}", f"[{color}]{f.severity.upper()}[/{color}]", f.rule_name, f.masked_value)
    console.print(table)
    sys.exit(1)
