"""Offline job queue for post-commit events."""

from gitsentinel.queue.store import QueueJob, complete, drain_pending, enqueue, queue_dir
from gitsentinel.queue.worker import QueueWorker

__all__ = ["QueueJob", "QueueWorker", "complete", "drain_pending", "enqueue", "queue_dir"]
