"""GITSENTINEL logging with colored console output and optional JSON files."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "gitsentinel"

# Per-record attributes copied into JSON output
_EXTRA_FIELDS = ("job", "project", "ref")

# Process-wide context set by hook entry points
_hook_context: dict[str, Any] = {}


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured log files."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "ts": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        if _hook_context:
            log_data.update(_hook_context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for human-readable stderr output."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors.

        Args:
            record: Log record to format

        Returns:
            Colored log string
        """
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.now().strftime("%H:%M:%S")
        context_parts = []
        if "hook" in _hook_context:
            context_parts.append(str(_hook_context["hook"]))
        if hasattr(record, "job"):
            context_parts.append(str(record.job))

        context = f"[{':'.join(context_parts)}]" if context_parts else ""

        return f"{color}{timestamp} {record.levelname:8s}{self.RESET} {context} {record.getMessage()}"


def set_hook_context(hook: str | None = None, project: str | None = None, **kwargs: Any) -> None:
    """Set context for all subsequent log messages.

    Args:
        hook: Git hook being served, e.g. ``pre-push``
        project: Repository path the hook runs in
        **kwargs: Additional context fields
    """
    global _hook_context
    _hook_context = {}

    if hook is not None:
        _hook_context["hook"] = hook
    if project is not None:
        _hook_context["project"] = project
    _hook_context.update(kwargs)


def clear_hook_context() -> None:
    """Clear all hook context."""
    global _hook_context
    _hook_context = {}


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the gitsentinel namespace.

    Args:
        name: Logger name (typically module area)

    Returns:
        Logger instance
    """
    if name.startswith(f"{ROOT_LOGGER_NAME}.") or name == ROOT_LOGGER_NAME:
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: str = "info",
    log_dir: str | Path | None = None,
    json_output: bool = True,
    console_output: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """Set up logging configuration.

    Args:
        level: Log level (debug, info, warn, error)
        log_dir: Directory for JSON log files
        json_output: Whether to output JSON logs to file
        console_output: Whether to output to stderr
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """
    if level.lower() == "warn":
        level = "warning"
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(log_level)

    # Clear existing handlers
    root_logger.handlers = []

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(ConsoleFormatter())
        root_logger.addHandler(console_handler)

    if log_dir and json_output:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path / "gitsentinel.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(JsonFormatter())
        root_logger.addHandler(file_handler)

    # Prevent propagation to root logger
    root_logger.propagate = False


# Initialize default logging on import
setup_logging(console_output=True, json_output=False)
