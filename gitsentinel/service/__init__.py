"""Companion service: receives post-commit events and writes commit reviews."""

from gitsentinel.service.analysis import CommitAnalyzer
from gitsentinel.service.app import create_app

__all__ = ["CommitAnalyzer", "create_app"]
