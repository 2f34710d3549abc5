"""Commit review reports for queued post-commit jobs."""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from gitsentinel.constants import DIFF_LINE_LIMIT
from gitsentinel.exceptions import AnalysisError, GitError
from gitsentinel.git import CommitInfo, GitRunner
from gitsentinel.llm.base import LLMProvider
from gitsentinel.logging import get_logger
from gitsentinel.queue.store import QueueJob

logger = get_logger("service.analysis")

REVIEW_PROMPT = """You are a senior software engineer. Analyze the git commit below and write
documentation and a code review for it.

## Project
- Name: {project}
- Commit: {short_sha}
- Message: {message}
- Author: {author} ({email})
- Date: {date}

## Changed files (diff --stat)
```
{stat}
```

## Changes (diff)
```diff
{diff}
```

---

Write the following sections exactly, each starting with "##":

## Intent
## Rationale
## Code Written
## Behavior
## Review: Error Handling
## Review: Performance
## Review: Code Quality
"""


def backoff_delay(attempt: int, base_seconds: float = 5.0, max_seconds: float = 60.0) -> float:
    """Exponential backoff with +/-10% jitter. ``attempt`` is 0-based."""
    delay = min(base_seconds * (2 ** (attempt + 1)), max_seconds)
    jitter = delay * 0.1
    return max(0.0, delay + random.uniform(-jitter, jitter))


def build_report(project: str, commit: CommitInfo, analysis: str, generated_at: datetime) -> str:
    """Markdown report: commit metadata table followed by the review text."""
    message = commit.message.splitlines()[0] if commit.message else ""
    return (
        f"# Commit Analysis (auto): {project}\n\n"
        f"> Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"> Created by the post-commit hook\n\n"
        "## Commit\n"
        "| Field | Value |\n"
        "|---|---|\n"
        f"| Hash | `{commit.short_sha}` |\n"
        f"| Message | {message} |\n"
        f"| Author | {commit.author} |\n"
        f"| Date | {commit.date} |\n\n"
        "---\n\n"
        f"{analysis.strip()}\n"
    )


class CommitAnalyzer:
    """Queue job handler: review the latest commit and write a Markdown report."""

    def __init__(
        self,
        provider: LLMProvider | None,
        reports_dir: str | Path,
        max_retries: int = 2,
        backoff_base_seconds: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.provider = provider
        self.reports_dir = Path(reports_dir)
        self.max_retries = max_retries
        self.backoff_base_seconds = backoff_base_seconds
        self._sleep = sleep
        self.last_report: Path | None = None

    def __call__(self, job: QueueJob) -> Path:
        return self.analyze(job.project_path)

    def analyze(self, project_path: str | Path) -> Path:
        """Write a report for the project's HEAD commit.

        Returns:
            Path of the written report

        Raises:
            AnalysisError: If no provider is configured, git fails, or every attempt fails
        """
        project_path = Path(project_path)
        project = project_path.name
        if self.provider is None:
            raise AnalysisError("No LLM provider configured", project_path=str(project_path))

        try:
            git = GitRunner(project_path)
            commit = git.latest_commit()
            stat, diff = git.commit_diff(DIFF_LINE_LIMIT)
        except GitError as e:
            raise AnalysisError(f"Cannot read commit: {e}", project_path=str(project_path)) from e

        prompt = REVIEW_PROMPT.format(
            project=project,
            short_sha=commit.short_sha,
            message=commit.message,
            author=commit.author,
            email=commit.email,
            date=commit.date,
            stat=stat.strip(),
            diff=diff.strip(),
        )
        analysis = self._generate(prompt, str(project_path))

        now = datetime.now()
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        report_path = self.reports_dir / f"{project}-{now.strftime('%Y-%m-%dT%H-%M-%S')}.md"
        report_path.write_text(build_report(project, commit, analysis, now), encoding="utf-8")
        self.last_report = report_path
        logger.info(f"Analysis written for {project} ({commit.short_sha}): {report_path}")
        return report_path

    def _generate(self, prompt: str, project_path: str) -> str:
        assert self.provider is not None
        last_error = ""
        for attempt in range(self.max_retries + 1):
            response = self.provider.invoke(prompt)
            if response.success and response.stdout.strip():
                return response.stdout
            last_error = response.stderr or "empty response"
            if attempt < self.max_retries:
                delay = backoff_delay(attempt, self.backoff_base_seconds)
                logger.warning(f"Analysis attempt {attempt + 1} failed ({last_error}), retrying in {delay:.1f}s")
                self._sleep(delay)

        raise AnalysisError(
            f"Analysis failed after {self.max_retries + 1} attempts",
            project_path=project_path,
            details={"error": last_error},
        )
