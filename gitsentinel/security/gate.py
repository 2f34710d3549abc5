"""Pre-push gate: decide whether a push may proceed.

Only a verified finding blocks. Range, content and verification failures
all degrade toward allowing the push.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from gitsentinel.config import ScanConfig
from gitsentinel.constants import BYPASS_TRUTHY_VALUES
from gitsentinel.exceptions import GitError
from gitsentinel.git import ContentFetcher, GitRunner, RangeResolver, RefUpdate
from gitsentinel.logging import get_logger
from gitsentinel.security import ScanResult
from gitsentinel.security.matcher import scan_content
from gitsentinel.security.path_filter import PathFilter
from gitsentinel.security.report import render_block_report
from gitsentinel.security.verifier import FindingVerifier

logger = get_logger("security.gate")


def parse_ref_updates(lines: Iterable[str]) -> list[RefUpdate]:
    """Parse pre-push stdin lines. Lines with fewer than four fields are ignored."""
    updates: list[RefUpdate] = []
    for line in lines:
        parts = line.split()
        if len(parts) < 4:
            if parts:
                logger.debug(f"Ignoring malformed pre-push line: {line.strip()!r}")
            continue
        local_ref, local_sha, remote_ref, remote_sha = parts[:4]
        updates.append(RefUpdate(local_ref, local_sha, remote_ref, remote_sha))
    return updates


def bypass_requested(env: Mapping[str, str], var: str) -> bool:
    """Check the escape hatch variable for a truthy value."""
    return env.get(var, "").strip().lower() in BYPASS_TRUTHY_VALUES


@dataclass
class GateDecision:
    """Outcome of one push attempt."""

    allow: bool
    report: str | None = None
    result: ScanResult = field(default_factory=ScanResult)
    bypassed: bool = False

    @property
    def exit_code(self) -> int:
        return 0 if self.allow else 1


class PushGate:
    """Scan everything a push would publish and decide allow or block."""

    def __init__(
        self,
        git: GitRunner,
        config: ScanConfig | None = None,
        verifier: FindingVerifier | None = None,
        path_filter: PathFilter | None = None,
    ) -> None:
        """Initialize gate.

        Args:
            git: Runner for the repository being pushed
            config: Scan settings; defaults apply when None
            verifier: Optional second-pass filter; pass-through when None
            path_filter: Path exemptions; built from config extras when None
        """
        self.config = config or ScanConfig()
        self.resolver = RangeResolver(git)
        self.fetcher = ContentFetcher(git, max_file_bytes=self.config.max_file_bytes)
        self.verifier = verifier or FindingVerifier()
        self.path_filter = path_filter or PathFilter.with_extras(
            self.config.extra_skip_filenames, self.config.extra_skip_dirs
        )

    def decide(self, ref_updates: Iterable[RefUpdate], env: Mapping[str, str]) -> GateDecision:
        """Decide a push attempt.

        Args:
            ref_updates: Parsed pre-push protocol lines
            env: Environment of the hook process, checked for the escape hatch

        Returns:
            GateDecision, with a rendered report when blocking
        """
        if bypass_requested(env, self.config.bypass_env_var):
            logger.warning(f"Secret scan skipped ({self.config.bypass_env_var} is set)")
            return GateDecision(allow=True, bypassed=True)

        result = self.collect(ref_updates)
        raw_count = len(result.findings)
        result.findings = self.verifier.verify(result.findings)

        if result.clean:
            if raw_count:
                logger.info(f"All {raw_count} candidate findings dismissed by verification")
            return GateDecision(allow=True, result=result)

        logger.error(f"Push blocked: {len(result.findings)} secret finding(s) {result.summary()}")
        return GateDecision(
            allow=False,
            report=render_block_report(result.findings, self.config.bypass_env_var),
            result=result,
        )

    def collect(self, ref_updates: Iterable[RefUpdate]) -> ScanResult:
        """Gather unverified findings across all ref updates."""
        result = ScanResult()
        seen: set[tuple[str, str]] = set()

        for update in ref_updates:
            try:
                commit_range = self.resolver.resolve(update.local_sha, update.remote_sha)
            except GitError as e:
                logger.warning(f"Cannot resolve range for {update.local_ref}: {e}", extra={"ref": update.local_ref})
                continue
            if commit_range is None:
                logger.debug(f"Skipping deleted ref {update.remote_ref}")
                continue

            result.refs_scanned += 1
            for path in self.fetcher.changed_files(commit_range):
                if self.path_filter.should_skip(path):
                    continue
                key = (commit_range.head, path)
                if key in seen:
                    continue
                seen.add(key)

                content = self.fetcher.file_at(commit_range.head, path)
                if content is None:
                    continue
                result.files_scanned += 1
                result.findings.extend(
                    scan_content(content, path, max_per_line=self.config.max_findings_per_line)
                )

        return result
