"""Commit range resolution and historical file content for the pre-push gate.

Every failure here degrades to an empty or ``None`` result: a broken
repository state must never turn into a blocked push.
"""

from __future__ import annotations

from gitsentinel.constants import DEFAULT_MAX_FILE_BYTES, is_zero_sha
from gitsentinel.exceptions import GitError
from gitsentinel.git.base import GitRunner
from gitsentinel.git.types import CommitRange
from gitsentinel.logging import get_logger

logger = get_logger("git.content")


class RangeResolver:
    """Map a ref update's (local, remote) shas to the range that must be scanned."""

    def __init__(self, git: GitRunner) -> None:
        self._git = git
        self._empty_tree: str | None = None

    def empty_tree(self) -> str:
        if self._empty_tree is None:
            self._empty_tree = self._git.empty_tree()
        return self._empty_tree

    def resolve(self, local_sha: str, remote_sha: str) -> CommitRange | None:
        """Resolve the commit range for one ref update.

        Args:
            local_sha: Sha being pushed
            remote_sha: Sha currently on the remote

        Returns:
            The range to scan, or None when the ref is being deleted

        Raises:
            GitError: If the empty tree cannot be computed
        """
        if is_zero_sha(local_sha):
            return None
        if is_zero_sha(remote_sha):
            return CommitRange(base=self.empty_tree(), head=local_sha, new_branch=True)
        return CommitRange(base=remote_sha, head=local_sha)


class ContentFetcher:
    """Read changed paths and file content at a commit, with a size ceiling."""

    def __init__(self, git: GitRunner, max_file_bytes: int = DEFAULT_MAX_FILE_BYTES) -> None:
        self._git = git
        self.max_file_bytes = max_file_bytes

    def changed_files(self, commit_range: CommitRange) -> list[str]:
        """List repository-relative paths changed in the range.

        Returns an empty list when git cannot compute the diff.
        """
        try:
            return self._git.diff_names(commit_range.base, commit_range.head)
        except GitError as e:
            logger.warning(f"Cannot list changes for {commit_range}: {e}")
            return []

    def file_at(self, sha: str, path: str) -> str | None:
        """Get the text of ``path`` at commit ``sha``.

        Returns:
            File content, or None if the file is missing, too large or binary
        """
        spec = f"{sha}:{path}"
        try:
            size = self._git.blob_size(spec)
            if size > self.max_file_bytes:
                logger.debug(f"Skipping {path}: {size} bytes exceeds limit")
                return None
            raw = self._git.read_blob(spec)
        except (GitError, ValueError) as e:
            logger.debug(f"Cannot read {spec}: {e}")
            return None

        if b"\x00" in raw:
            return None
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
