"""Second-pass false-positive filter backed by an LLM provider.

The filter fails open: whatever goes wrong, the caller gets its findings
back untouched. Only an explicit "not real" verdict removes a finding.
"""

from __future__ import annotations

import json
import re
from typing import Any

from gitsentinel.constants import DEFAULT_VERIFY_TIMEOUT_SECONDS
from gitsentinel.exceptions import VerificationError
from gitsentinel.llm.base import LLMProvider
from gitsentinel.logging import get_logger
from gitsentinel.security import Finding

logger = get_logger("security.verifier")

_JSON_ARRAY = re.compile(r"\[.*?\]", re.DOTALL)

PROMPT_HEADER = """The following potential secrets were found in source code by regular expressions.
Values are masked. For each item decide whether it looks like a real credential
or an example, placeholder or test value.

Findings:
"""

PROMPT_FOOTER = """
Respond with a JSON array only, no other text:
[{"index": 1, "isReal": true}]"""


def build_prompt(findings: list[Finding]) -> str:
    """Build one batched verdict request. Only masked material is included."""
    items = [
        f"{i}. [{f.rule_name}] file: {f.file_path}:{f.line_number}\n   code: {f.line_excerpt}"
        for i, f in enumerate(findings, start=1)
    ]
    return PROMPT_HEADER + "\n".join(items) + "\n" + PROMPT_FOOTER


def parse_verdicts(text: str) -> dict[int, bool]:
    """Parse ``[{"index": n, "isReal": bool}]`` out of a model response.

    Raises:
        VerificationError: If no well-formed array is present
    """
    match = _JSON_ARRAY.search(text)
    if not match:
        raise VerificationError("No JSON array in verification response", details={"response": text[:200]})
    try:
        items: Any = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise VerificationError("Malformed verification response", details={"error": str(e)}) from e
    if not isinstance(items, list):
        raise VerificationError("Verification response is not a list")

    verdicts: dict[int, bool] = {}
    for item in items:
        if not isinstance(item, dict):
            continue
        index = item.get("index")
        is_real = item.get("isReal")
        if isinstance(index, int) and isinstance(is_real, bool):
            verdicts.setdefault(index, is_real)
    return verdicts


class FindingVerifier:
    """Drop findings an LLM judges to be placeholders."""

    def __init__(
        self,
        provider: LLMProvider | None = None,
        timeout: int = DEFAULT_VERIFY_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize verifier.

        Args:
            provider: LLM client handle; None makes the verifier a pass-through
            timeout: Hard limit in seconds for the verification call
        """
        self.provider = provider
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return self.provider is not None

    def verify(self, findings: list[Finding]) -> list[Finding]:
        """Filter findings. Returns the input unchanged on any error."""
        if self.provider is None or not findings:
            return findings

        try:
            verdicts = self._request_verdicts(findings)
        except Exception as e:  # noqa: BLE001 -- intentional: verification fails open
            logger.warning(f"Finding verification failed, keeping all {len(findings)} findings: {e}")
            return findings

        kept = [f for i, f in enumerate(findings, start=1) if verdicts.get(i, True)]
        dropped = len(findings) - len(kept)
        if dropped:
            logger.info(f"Verification dismissed {dropped} of {len(findings)} findings as placeholders")
        return kept

    def _request_verdicts(self, findings: list[Finding]) -> dict[int, bool]:
        assert self.provider is not None
        response = self.provider.invoke(build_prompt(findings), timeout=self.timeout)
        if not response.success:
            raise VerificationError(
                "Verification call failed",
                details={"exit_code": response.exit_code, "stderr": response.stderr[:200]},
            )
        return parse_verdicts(response.stdout)
