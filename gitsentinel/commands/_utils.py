"""Shared utilities for GITSENTINEL CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path

from gitsentinel.config import SentinelConfig
from gitsentinel.exceptions import ConfigurationError
from gitsentinel.logging import get_logger, setup_logging

logger = get_logger("commands")


def _load_config_or_default(project_path: str | Path) -> SentinelConfig:
    """Load a project's configuration, falling back to defaults.

    Hook entry points must not fail on a broken config file.
    """
    try:
        return SentinelConfig.for_project(project_path)
    except ConfigurationError as e:
        logger.warning(f"Using default configuration: {e}")
        return SentinelConfig()


def _configure_logging(config: SentinelConfig) -> None:
    directory = config.logging.directory
    setup_logging(
        level=config.logging.level,
        log_dir=directory,
        json_output=directory is not None,
        console_output=True,
    )


def _quiet_logging() -> None:
    """Silence log output for machine-readable command output."""
    logging.getLogger("gitsentinel").setLevel(logging.CRITICAL + 1)
