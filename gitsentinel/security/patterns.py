"""Secret rule catalog for the pre-push gate.

A fixed, reviewable list of named regexes. Catalog order is the order in
which rules are applied and therefore the order findings are reported.

WARNING: All regexes are compiled at import time. Avoid nested quantifiers
that could cause ReDoS (e.g. ``(a+)+``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from gitsentinel.constants import Severity


@dataclass(frozen=True)
class HookRule:
    """A named secret pattern with a severity and a remediation hint."""

    name: str
    pattern: re.Pattern[str]
    severity: str  # "critical", "high", "medium"
    remediation: str


def _rule(
    name: str,
    pattern: str,
    severity: Severity,
    remediation: str,
    *,
    flags: int = 0,
) -> HookRule:
    """Shorthand factory for HookRule construction."""
    return HookRule(
        name=name,
        pattern=re.compile(pattern, flags),
        severity=severity.value,
        remediation=remediation,
    )


# Values that mark an assignment as an example rather than a credential
_PLACEHOLDER_PREFIXES = "your_|example|placeholder|changeme|dummy|test|sample|xxx"

RULE_CATALOG: tuple[HookRule, ...] = (
    _rule(
        "AWS Access Key",
        r"AKIA[0-9A-Z]{16}",
        Severity.CRITICAL,
        "Deactivate the key in IAM and load credentials from the environment or an IAM role",
    ),
    _rule(
        "AWS Secret Key (40-char)",
        r"(?<![A-Za-z0-9/+])[A-Za-z0-9/+]{40}(?![A-Za-z0-9/+])",
        Severity.HIGH,
        "Rotate the AWS secret key and read it from a secrets manager",
    ),
    _rule(
        "Google API Key",
        r"AIza[0-9A-Za-z\-_]{35}",
        Severity.CRITICAL,
        "Regenerate the key in the Google Cloud console and restrict its usage",
    ),
    _rule(
        "GitHub Personal Token",
        r"ghp_[A-Za-z0-9]{36}",
        Severity.CRITICAL,
        "Revoke the token in GitHub settings and inject it via a secrets manager",
    ),
    _rule(
        "GitHub OAuth Token",
        r"gho_[A-Za-z0-9]{36}",
        Severity.CRITICAL,
        "Revoke the OAuth token and keep tokens out of source files",
    ),
    _rule(
        "GitHub Fine-grained Token",
        r"github_pat_[A-Za-z0-9_]{82}",
        Severity.CRITICAL,
        "Revoke the token in GitHub settings and inject it via a secrets manager",
    ),
    _rule(
        "Slack Token",
        r"xox[baprs]-[0-9a-zA-Z\-]{10,48}",
        Severity.CRITICAL,
        "Revoke the Slack token and store it outside the repository",
    ),
    _rule(
        "Stripe Secret Key",
        r"sk_(?:test|live)_[0-9a-zA-Z]{24}",
        Severity.CRITICAL,
        "Roll the key in the Stripe dashboard and load it from the environment",
    ),
    _rule(
        "Stripe Public Key",
        r"pk_(?:test|live)_[0-9a-zA-Z]{24}",
        Severity.HIGH,
        "Move publishable keys to configuration so they can be rotated",
    ),
    _rule(
        "Private Key PEM",
        r"-----BEGIN (?:RSA |EC |DSA |OPENSSH |PGP |ENCRYPTED )?PRIVATE KEY",
        Severity.CRITICAL,
        "Remove the key from source control, replace the key pair and use an agent or secrets manager",
    ),
    _rule(
        "Anthropic API Key",
        r"sk-ant-[a-zA-Z0-9\-_]{90,}",
        Severity.CRITICAL,
        "Rotate the key in the Anthropic console and inject it via environment variable",
    ),
    _rule(
        "OpenAI API Key",
        r"sk-[a-zA-Z0-9]{48}",
        Severity.CRITICAL,
        "Rotate the key immediately and inject it via environment variable",
    ),
    _rule(
        "JWT Token",
        r"eyJ[A-Za-z0-9\-_]{10,}\.eyJ[A-Za-z0-9\-_]{10,}\.[A-Za-z0-9\-_.+/]{20,}",
        Severity.HIGH,
        "Invalidate the token and never commit issued tokens",
    ),
    _rule(
        "Password Assignment",
        r"(?:password|passwd|pwd)\s*[:=]\s*['\"]?"
        rf"(?!(?:{_PLACEHOLDER_PREFIXES})[A-Za-z0-9])"
        r"[A-Za-z0-9!@#$%^&*_\-]{8,}",
        Severity.MEDIUM,
        "Move the password to an environment variable or secrets manager",
        flags=re.IGNORECASE,
    ),
    _rule(
        "API Key Assignment",
        r"(?:api[_-]?key|apikey|api[_-]?secret)\s*[:=]\s*['\"]?"
        r"(?!your_|example|placeholder)"
        r"[A-Za-z0-9_\-]{16,}",
        Severity.MEDIUM,
        "Move the API key to an environment variable or secrets manager",
        flags=re.IGNORECASE,
    ),
    _rule(
        "Generic Token Assignment",
        r"(?:access[_-]?token|auth[_-]?token)\s*[:=]\s*['\"]?[A-Za-z0-9_\-]{20,}",
        Severity.MEDIUM,
        "Move the token to an environment variable or secrets manager",
        flags=re.IGNORECASE,
    ),
)


def get_rule(name: str) -> HookRule | None:
    """Look up a catalog rule by name."""
    for rule in RULE_CATALOG:
        if rule.name == name:
            return rule
    return None
