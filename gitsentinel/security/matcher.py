"""Apply the rule catalog to file content.

Raw matched text never leaves this module: every Finding carries only the
masked value and an excerpt in which the match has been replaced by its mask.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from collections.abc import Iterable

from gitsentinel.constants import DEFAULT_MAX_FINDINGS_PER_LINE, EXCERPT_MAX_CHARS, Severity
from gitsentinel.security import Finding
from gitsentinel.security.patterns import RULE_CATALOG, HookRule

_COMMENT_PREFIX = re.compile(r"^(?://|#|\*|<!--)")

# Paths that look like tests, specs, mocks or fixtures
_TEST_LIKE_PATH = re.compile(r"test|spec|mock|fixture", re.IGNORECASE)


def mask_value(value: str) -> str:
    """Mask a secret: first 4 + ``****`` + last 4 chars, or ``****`` when short."""
    if len(value) > 8:
        return f"{value[:4]}****{value[-4:]}"
    return "****"


def is_comment_line(line: str) -> bool:
    """Check whether a line is a comment once leading whitespace is removed."""
    return bool(_COMMENT_PREFIX.match(line.strip()))


def is_test_like_path(file_path: str) -> bool:
    """Check whether a path looks like test, spec, mock or fixture material."""
    return bool(_TEST_LIKE_PATH.search(file_path))


def _line_starts(content: str) -> list[int]:
    starts = [0]
    starts.extend(m.end() for m in re.finditer("\n", content))
    return starts


def _masked_excerpt(line: str, rules: list[HookRule]) -> str:
    # Spans come from the unmodified line so one rule's mask cannot hide another rule's match
    text = line.strip()
    spans = sorted(m.span() for rule in rules for m in rule.pattern.finditer(text) if m.end() > m.start())

    merged: list[list[int]] = []
    for start, end in spans:
        if merged and start <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    parts: list[str] = []
    pos = 0
    for start, end in merged:
        parts.append(text[pos:start])
        parts.append(mask_value(text[start:end]))
        pos = end
    parts.append(text[pos:])
    return "".join(parts)[:EXCERPT_MAX_CHARS]


def scan_content(
    content: str,
    file_path: str,
    rules: Iterable[HookRule] = RULE_CATALOG,
    max_per_line: int = DEFAULT_MAX_FINDINGS_PER_LINE,
) -> list[Finding]:
    """Scan text for secrets.

    Args:
        content: File content
        file_path: Repository-relative path, used for test-path suppression
        rules: Rules to apply, in order
        max_per_line: Maximum findings kept for one line

    Returns:
        Findings ordered by rule, then by match position
    """
    findings: list[Finding] = []
    per_line: dict[int, int] = {}
    excerpts: dict[int, str] = {}
    rule_list = list(rules)
    lines = content.split("\n")
    starts = _line_starts(content)
    suppress_medium = is_test_like_path(file_path)

    for rule in rule_list:
        if suppress_medium and rule.severity == Severity.MEDIUM.value:
            continue

        for match in rule.pattern.finditer(content):
            line_number = bisect_right(starts, match.start())
            line = lines[line_number - 1]
            if is_comment_line(line):
                continue
            if per_line.get(line_number, 0) >= max_per_line:
                continue

            masked = mask_value(match.group(0))
            if line_number not in excerpts:
                excerpts[line_number] = _masked_excerpt(line, rule_list)

            findings.append(
                Finding(
                    rule_name=rule.name,
                    severity=rule.severity,
                    file_path=file_path,
                    line_number=line_number,
                    masked_value=masked,
                    line_excerpt=excerpts[line_number],
                    remediation=rule.remediation,
                )
            )
            per_line[line_number] = per_line.get(line_number, 0) + 1

    return findings
