"""Single-flight background worker for queued analysis jobs."""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Callable
from typing import Any

from gitsentinel.constants import DEFAULT_INTER_JOB_DELAY_SECONDS, AnalysisState
from gitsentinel.logging import get_logger
from gitsentinel.queue.store import QueueJob, complete

logger = get_logger("queue.worker")

JobHandler = Callable[[QueueJob], Any]


class QueueWorker:
    """Process jobs one at a time on a dedicated daemon thread.

    Jobs come off a FIFO; a single consumer thread is what guarantees that no
    two analyses run concurrently. A job's record is deleted only when the
    handler returns without raising.
    """

    def __init__(self, handler: JobHandler, delay: float = DEFAULT_INTER_JOB_DELAY_SECONDS) -> None:
        """Initialize worker.

        Args:
            handler: Called with each job; raising leaves the record on disk
            delay: Pause in seconds between consecutive jobs
        """
        self._handler = handler
        self._delay = delay
        self._jobs: queue.Queue[QueueJob | None] = queue.Queue()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._state = AnalysisState.IDLE
        self._current: QueueJob | None = None
        self.processed = 0
        self.failed = 0
        self.last_result: Any = None

    @property
    def state(self) -> AnalysisState:
        with self._lock:
            return self._state

    @property
    def busy(self) -> bool:
        return self.state == AnalysisState.ANALYZING

    @property
    def pending(self) -> int:
        return self._jobs.qsize()

    @property
    def current(self) -> QueueJob | None:
        with self._lock:
            return self._current

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            logger.warning("Queue worker already running")
            return
        with self._lock:
            self._state = AnalysisState.IDLE
        self._thread = threading.Thread(target=self._run, name="gitsentinel-queue", daemon=True)
        self._thread.start()
        logger.info("Queue worker started")

    def submit(self, job: QueueJob) -> None:
        self._jobs.put(job)
        logger.debug(f"Submitted job {job.label} ({self.pending} pending)")

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop after the job in progress. Jobs still queued stay on disk."""
        if self._thread is None:
            return
        self._jobs.put(None)
        self._thread.join(timeout)
        self._thread = None
        with self._lock:
            self._state = AnalysisState.STOPPED
        logger.info("Queue worker stopped")

    def join(self, timeout: float = 10.0) -> bool:
        """Wait until every submitted job has been handled. Returns False on timeout."""
        deadline = time.monotonic() + timeout
        while self._jobs.unfinished_tasks:
            if time.monotonic() >= deadline:
                return False
            time.sleep(0.01)
        return True

    def _run(self) -> None:
        while True:
            job = self._jobs.get()
            try:
                if job is None:
                    return
                self._process(job)
                if self._delay and not self._jobs.empty():
                    time.sleep(self._delay)
            finally:
                self._jobs.task_done()

    def _process(self, job: QueueJob) -> None:
        with self._lock:
            self._state = AnalysisState.ANALYZING
            self._current = job
        logger.info(
            f"Processing {job.type} job for {job.project_path}", extra={"job": job.label, "project": job.project_path}
        )
        try:
            self.last_result = self._handler(job)
        except Exception as e:  # noqa: BLE001 -- intentional: one failing job must not kill the worker
            self.failed += 1
            logger.warning(f"Job {job.label} failed, record kept for retry: {e}", extra={"job": job.label})
        else:
            complete(job)
            self.processed += 1
            logger.info(f"Completed job {job.label}", extra={"job": job.label})
        finally:
            with self._lock:
                self._state = AnalysisState.IDLE
                self._current = None
