"""Pytest configuration and fixtures for GITSENTINEL tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from gitsentinel.config import SentinelConfig
from tests.helpers.git_helpers import init_repo


@pytest.fixture
def tmp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository with one commit.

    Yields:
        Path to the temporary repository
    """
    orig_dir = os.getcwd()
    repo = init_repo(tmp_path / "repo")
    os.chdir(repo)

    yield repo

    os.chdir(orig_dir)


@pytest.fixture
def default_config() -> SentinelConfig:
    """Configuration with verification disabled and no LLM.

    Returns:
        SentinelConfig instance
    """
    return SentinelConfig.from_dict({"scan": {"verify": False}})
