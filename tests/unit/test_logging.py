"""Unit tests for GITSENTINEL logging module."""

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from gitsentinel.logging import (
    ConsoleFormatter,
    JsonFormatter,
    clear_hook_context,
    get_logger,
    set_hook_context,
    setup_logging,
)


def _record(msg: str = "Test message", level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="gitsentinel.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    yield
    clear_hook_context()
    setup_logging(console_output=True, json_output=False)


class TestJsonFormatter:
    """Tests for JSON log formatter."""

    def test_format_basic_message(self) -> None:
        """Test formatting basic log message."""
        data = json.loads(JsonFormatter().format(_record()))

        assert data["message"] == "Test message"
        assert data["level"] == "info"
        assert data["logger"] == "gitsentinel.test"
        assert data["ts"].endswith("Z")

    def test_format_with_extra_fields(self) -> None:
        """Test known record fields are copied, unknown ones are not."""
        data = json.loads(JsonFormatter().format(_record(job="post-commit-1.json", ref="refs/heads/main", other=1)))

        assert data["job"] == "post-commit-1.json"
        assert data["ref"] == "refs/heads/main"
        assert "other" not in data

    def test_format_with_hook_context(self) -> None:
        """Test the hook context is merged into every record."""
        set_hook_context(hook="pre-push", project="/work/app")

        data = json.loads(JsonFormatter().format(_record()))

        assert data["hook"] == "pre-push"
        assert data["project"] == "/work/app"

    def test_clear_hook_context(self) -> None:
        """Test clearing removes the context from later records."""
        set_hook_context(hook="pre-push")
        clear_hook_context()

        assert "hook" not in json.loads(JsonFormatter().format(_record()))


class TestConsoleFormatter:
    """Tests for console log formatter."""

    def test_format_with_hook_context(self) -> None:
        """Test the hook name prefixes the message."""
        set_hook_context(hook="post-commit")
        result = ConsoleFormatter().format(_record(level=logging.WARNING))

        assert "WARNING" in result
        assert "[post-commit] Test message" in result
        assert "\033[33m" in result

    def test_format_with_job(self) -> None:
        """Test a record naming a job adds it after the hook."""
        set_hook_context(hook="pre-push")
        result = ConsoleFormatter().format(_record(job="scan-1.json"))

        assert "[pre-push:scan-1.json] Test message" in result

    def test_format_without_context(self) -> None:
        """Test no context prefix appears without any context."""
        assert ConsoleFormatter().format(_record()).endswith("\033[0m  Test message")


class TestGetLogger:
    """Tests for get_logger."""

    def test_namespaced(self) -> None:
        """Test loggers live under the gitsentinel namespace."""
        assert get_logger("notify").name == "gitsentinel.notify"
        assert get_logger("gitsentinel.queue").name == "gitsentinel.queue"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_file_output(self, tmp_path: Path) -> None:
        """Test a log directory gets a JSON log file."""
        setup_logging(level="debug", log_dir=tmp_path, json_output=True, console_output=False)
        get_logger("test").info("written to file")
        for handler in logging.getLogger("gitsentinel").handlers:
            handler.flush()

        lines = (tmp_path / "gitsentinel.log").read_text().splitlines()
        assert json.loads(lines[-1])["message"] == "written to file"

    def test_warn_alias(self) -> None:
        """Test 'warn' maps to WARNING."""
        setup_logging(level="warn", console_output=False, json_output=False)
        assert logging.getLogger("gitsentinel").level == logging.WARNING
