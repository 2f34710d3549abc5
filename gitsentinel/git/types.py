"""Shared data types for GITSENTINEL git operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommitInfo:
    """Parsed commit information."""

    sha: str
    message: str
    author: str
    email: str
    date: str

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class CommitRange:
    """Commits being pushed for one ref update: ``base..head``.

    ``base`` is the remote tip, or the empty tree for a new branch.
    """

    base: str
    head: str
    new_branch: bool = False

    def __str__(self) -> str:
        return f"{self.base}..{self.head}"


@dataclass(frozen=True)
class RefUpdate:
    """One line of the pre-push protocol."""

    local_ref: str
    local_sha: str
    remote_ref: str
    remote_sha: str
