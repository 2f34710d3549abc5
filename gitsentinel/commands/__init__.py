"""GITSENTINEL CLI commands."""

from gitsentinel.commands.health import health
from gitsentinel.commands.hook_cmd import hook_group
from gitsentinel.commands.notify_cmd import notify_group
from gitsentinel.commands.queue_cmd import queue_group
from gitsentinel.commands.scan_cmd import scan_group
from gitsentinel.commands.serve_cmd import serve

__all__ = [
    "health",
    "hook_group",
    "notify_group",
    "queue_group",
    "scan_group",
    "serve",
]
