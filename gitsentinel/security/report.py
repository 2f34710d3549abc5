"""Human-readable block report for a rejected push."""

from __future__ import annotations

from collections.abc import Sequence

from gitsentinel.constants import BYPASS_ENV_VAR
from gitsentinel.security import Finding

BOX_WIDTH = 54

FIX_STEPS = (
    "Remove the secret from the file",
    "git commit --amend (to fix the last commit)",
    "or git rebase -i to fix earlier commits",
)


def severity_badge(severity: str) -> str:
    return f"[{severity.upper()}]"


def render_block_report(findings: Sequence[Finding], bypass_env_var: str = BYPASS_ENV_VAR) -> str:
    """Render the report printed to stderr when a push is blocked.

    Args:
        findings: Verified findings, in report order
        bypass_env_var: Name of the escape hatch variable shown to the user

    Returns:
        Multi-line report text ending with a newline
    """
    title = f"  gitsentinel: SECRET DETECTED ({len(findings)} finding{'s' if len(findings) != 1 else ''})"
    rule = "=" * BOX_WIDTH
    lines = [
        "",
        f"+{rule}+",
        f"|{title.ljust(BOX_WIDTH)}|",
        f"+{rule}+",
        "",
        "Push blocked. Review the following:",
        "",
    ]

    for i, finding in enumerate(findings, start=1):
        lines.append(f"  {i}. {finding.file_path}:{finding.line_number} {severity_badge(finding.severity)}")
        lines.append(f"     Type:  {finding.rule_name}")
        lines.append(f"     Value: {finding.masked_value}")
        if finding.remediation:
            lines.append(f"     Fix:   {finding.remediation}")
        lines.append("")

    lines.append("How to fix:")
    lines.extend(f"  {i}. {step}" for i, step in enumerate(FIX_STEPS, start=1))
    lines.append("  If a key was already published, revoke and rotate it now.")
    lines.append("")
    lines.append("To push anyway (false positive):")
    lines.append(f"  {bypass_env_var}=1 git push")
    lines.append("")
    return "\n".join(lines) + "\n"
