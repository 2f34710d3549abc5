"""GITSENTINEL git operations package."""

from gitsentinel.git.base import GitRunner
from gitsentinel.git.content import ContentFetcher, RangeResolver
from gitsentinel.git.types import CommitInfo, CommitRange, RefUpdate

__all__ = [
    "CommitInfo",
    "CommitRange",
    "ContentFetcher",
    "GitRunner",
    "RangeResolver",
    "RefUpdate",
]
