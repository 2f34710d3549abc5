"""Durable per-project job records for commits made while the service is down.

One JSON file per job under ``<project>/.gitsentinel-queue``. The file is the
job: it survives restarts and is deleted only after successful processing.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from gitsentinel.constants import QUEUE_DIR_NAME, HookType
from gitsentinel.logging import get_logger

logger = get_logger("queue.store")

QUEUE_DIR_MODE = 0o700
QUEUE_SUFFIX = ".json"


@dataclass(frozen=True)
class QueueJob:
    """A pending commit event."""

    project_path: str
    type: str
    saved_at: str
    queue_file: Path | None = None

    @property
    def label(self) -> str:
        return self.queue_file.name if self.queue_file else f"{self.type}:{Path(self.project_path).name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectPath": self.project_path,
            "type": self.type,
            "savedAt": self.saved_at,
            "queueFile": str(self.queue_file) if self.queue_file else None,
        }


def queue_dir(project_path: str | Path, dir_name: str = QUEUE_DIR_NAME) -> Path:
    return Path(project_path) / dir_name


def enqueue(
    project_path: str | Path,
    job_type: str = HookType.POST_COMMIT.value,
    dir_name: str = QUEUE_DIR_NAME,
) -> Path | None:
    """Persist one job record. Never raises.

    Args:
        project_path: Project the commit happened in
        job_type: Hook type that produced the job
        dir_name: Queue directory name inside the project

    Returns:
        Path of the written record, or None if it could not be written
    """
    try:
        directory = queue_dir(project_path, dir_name)
        directory.mkdir(mode=QUEUE_DIR_MODE, parents=True, exist_ok=True)
        os.chmod(directory, QUEUE_DIR_MODE)

        now = datetime.now(UTC)
        stamp = now.strftime("%Y%m%dT%H%M%S-%f")
        path = directory / f"{job_type}-{stamp}{QUEUE_SUFFIX}"
        counter = 1
        while path.exists():
            path = directory / f"{job_type}-{stamp}-{counter}{QUEUE_SUFFIX}"
            counter += 1

        record = {
            "projectPath": str(Path(project_path).resolve()),
            "type": job_type,
            "savedAt": now.isoformat(),
        }
        path.write_text(json.dumps(record), encoding="utf-8")
        logger.info(f"Queued {job_type} job at {path}")
        return path
    except Exception as e:  # noqa: BLE001 -- intentional: queuing is best-effort and must never break a commit
        logger.warning(f"Could not queue {job_type} job for {project_path}: {e}")
        return None


def _load_job(path: Path) -> QueueJob | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Skipping unreadable queue record {path}: {e}")
        return None
    if not isinstance(data, dict) or not isinstance(data.get("projectPath"), str):
        logger.warning(f"Skipping malformed queue record {path}")
        return None
    return QueueJob(
        project_path=data["projectPath"],
        type=str(data.get("type", HookType.POST_COMMIT.value)),
        saved_at=str(data.get("savedAt", "")),
        queue_file=path,
    )


def _jobs_in(project_path: Path, dir_name: str) -> list[QueueJob]:
    directory = queue_dir(project_path, dir_name)
    if not directory.is_dir():
        return []
    jobs = []
    for path in sorted(directory.glob(f"*{QUEUE_SUFFIX}")):
        job = _load_job(path)
        if job is not None:
            jobs.append(job)
    return jobs


def drain_pending(root: str | Path, dir_name: str = QUEUE_DIR_NAME) -> list[QueueJob]:
    """Collect pending jobs for the root and each immediate subdirectory.

    Corrupt records are skipped. Jobs come back oldest first.
    """
    root = Path(root)
    jobs = _jobs_in(root, dir_name)
    try:
        children = sorted(p for p in root.iterdir() if p.is_dir() and p.name != dir_name)
    except OSError as e:
        logger.warning(f"Cannot list {root}: {e}")
        children = []

    for child in children:
        jobs.extend(_jobs_in(child, dir_name))

    jobs.sort(key=lambda j: (j.saved_at, j.label))
    if jobs:
        logger.info(f"Found {len(jobs)} pending queue job(s) under {root}")
    return jobs


def complete(job: QueueJob) -> None:
    """Delete a processed job's record. In-memory jobs have none."""
    if job.queue_file is None:
        return
    try:
        job.queue_file.unlink()
    except FileNotFoundError:
        logger.debug(f"Queue record already removed: {job.queue_file}")
