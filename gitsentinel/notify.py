"""Post-commit notifier.

Runs detached from ``git commit``. Tells the companion service about the
commit, or leaves a queue record when the service cannot be reached. Nothing
here raises to the caller; every failure is logged and folded into the result.
"""

from __future__ import annotations

import json
import os
import re
import urllib.error
import urllib.request
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from gitsentinel.config import SentinelConfig
from gitsentinel.constants import HEALTH_ENDPOINT, NOTIFY_ENDPOINT, HookType
from gitsentinel.logging import get_logger
from gitsentinel.queue.store import enqueue

logger = get_logger("notify")

# Git for Windows hands hooks MSYS paths such as /c/work/repo
_MSYS_DRIVE = re.compile(r"^/([a-zA-Z])/")


class NotifyOutcome(Enum):
    NOTIFIED = "notified"
    QUEUED = "queued"
    FAILED = "failed"


@dataclass
class NotifyResult:
    """What happened to one post-commit event."""

    outcome: NotifyOutcome
    project_path: str
    queue_file: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome != NotifyOutcome.FAILED


def normalize_project_path(raw: str, windows: bool | None = None) -> str:
    """Convert an MSYS drive path to a native one on Windows. Other paths pass through."""
    if windows is None:
        windows = os.name == "nt"
    if not windows:
        return raw
    return _MSYS_DRIVE.sub(lambda m: f"{m.group(1).upper()}:/", raw)


def probe_server(base_url: str, timeout: float) -> bool:
    """Liveness probe. Any error or non-200 status means not running."""
    try:
        with urllib.request.urlopen(f"{base_url}{HEALTH_ENDPOINT}", timeout=timeout) as response:
            return response.status == 200
    except (urllib.error.URLError, TimeoutError, OSError, ValueError) as e:
        logger.debug(f"Companion service not reachable at {base_url}: {e}")
        return False


def notify_server(base_url: str, project_path: str, timeout: float) -> bool:
    """POST the commit event. Returns True on HTTP 200."""
    body = json.dumps({"projectPath": project_path}).encode("utf-8")
    req = urllib.request.Request(
        f"{base_url}{NOTIFY_ENDPOINT}",
        data=body,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return response.status == 200
    except (urllib.error.URLError, TimeoutError, OSError, ValueError) as e:
        logger.debug(f"Notify call failed: {e}")
        return False


def run_post_commit(project_path: str, config: SentinelConfig | None = None) -> NotifyResult:
    """Deliver one post-commit event. Never raises, never retries.

    Args:
        project_path: Repository the commit was made in
        config: Loaded configuration; defaults when None

    Returns:
        NotifyResult describing whether the event was delivered or queued
    """
    config = config or SentinelConfig()
    project_path = normalize_project_path(project_path)
    server = config.server

    if probe_server(server.base_url, server.probe_timeout_seconds):
        if notify_server(server.base_url, project_path, server.notify_timeout_seconds):
            logger.info(f"Notified companion service of commit in {project_path}")
            return NotifyResult(NotifyOutcome.NOTIFIED, project_path)
        logger.warning("Companion service rejected or dropped the notification, queuing instead")

    queue_file = enqueue(project_path, HookType.POST_COMMIT.value, config.queue.dir_name)
    if queue_file is None:
        return NotifyResult(NotifyOutcome.FAILED, project_path, error="could not write queue record")
    return NotifyResult(NotifyOutcome.QUEUED, project_path, queue_file=queue_file)
