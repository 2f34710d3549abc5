"""Push-time secret detection package for GITSENTINEL.

- patterns.py: fixed rule catalog
- path_filter.py: path-shape scan exemptions
- matcher.py: rule application, masking and suppression
- verifier.py: optional fail-open second pass
- gate.py: pre-push decision over all ref updates
- report.py: human-readable block report
"""

from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Finding:
    """One candidate secret occurrence. Values are already masked."""

    rule_name: str
    severity: str  # "critical", "high", "medium"
    file_path: str
    line_number: int
    masked_value: str
    line_excerpt: str
    remediation: str = ""


@dataclass
class ScanResult:
    """Findings across every ref update of one push attempt."""

    findings: list[Finding] = field(default_factory=list)
    refs_scanned: int = 0
    files_scanned: int = 0

    @property
    def clean(self) -> bool:
        return not self.findings

    def summary(self) -> dict[str, int]:
        """Count findings per severity."""
        counts: dict[str, int] = {}
        for finding in self.findings:
            counts[finding.severity] = counts.get(finding.severity, 0) + 1
        return counts


# ---------------------------------------------------------------------------
# Re-exports
# ---------------------------------------------------------------------------
from gitsentinel.security.matcher import mask_value, scan_content  # noqa: E402
from gitsentinel.security.path_filter import PathFilter, should_skip  # noqa: E402
from gitsentinel.security.patterns import RULE_CATALOG, HookRule  # noqa: E402

__all__ = [
    "Finding",
    "ScanResult",
    "HookRule",
    "RULE_CATALOG",
    "PathFilter",
    "mask_value",
    "scan_content",
    "should_skip",
]
