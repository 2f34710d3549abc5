"""GitRunner base class -- low-level git command execution."""

import os
import subprocess
from pathlib import Path

from gitsentinel.exceptions import GitError
from gitsentinel.git.types import CommitInfo
from gitsentinel.logging import get_logger

logger = get_logger("git.base")

_LOG_FIELD_SEP = "\x1f"


class GitRunner:
    """Low-level git command runner with repository validation.

    Provides the subprocess execution layer plus the read-only queries the
    hooks need: object lookups, blob reads, commit metadata and diffs.
    """

    def __init__(self, repo_path: str | Path = ".") -> None:
        """Initialize git runner.

        Args:
            repo_path: Path to the git repository

        Raises:
            GitError: If the path is not a git repository
        """
        self.repo_path = Path(repo_path).resolve()
        self._validate_repo()

    def _validate_repo(self) -> None:
        """Validate that repo_path is a git repository (or worktree)."""
        if not (self.repo_path / ".git").exists():
            raise GitError(
                f"Not a git repository: {self.repo_path}",
                details={"path": str(self.repo_path)},
            )

    def _run(
        self,
        *args: str,
        check: bool = True,
        capture: bool = True,
        timeout: int = 60,
        input: str | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command.

        Args:
            *args: Git command arguments
            check: Whether to raise on non-zero exit
            capture: Whether to capture output
            timeout: Timeout in seconds
            input: Text fed to the command's stdin

        Returns:
            Completed process result

        Raises:
            GitError: If the command fails (when check=True) or times out
        """
        cmd = ["git", "-C", str(self.repo_path), *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            return subprocess.run(
                cmd,
                capture_output=capture,
                text=True,
                check=check,
                timeout=timeout,
                input=input,
            )
        except subprocess.TimeoutExpired as e:
            raise GitError(
                f"Git command timed out after {timeout}s: {' '.join(args)}",
                command=" ".join(cmd),
                exit_code=-1,
            ) from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"Git command failed: {e.stderr.strip() if e.stderr else str(e)}",
                command=" ".join(cmd),
                exit_code=e.returncode,
            ) from e
        except UnicodeDecodeError as e:
            raise GitError(f"Git output is not valid UTF-8: {' '.join(args)}", command=" ".join(cmd)) from e

    def empty_tree(self) -> str:
        """Get the object name of the empty tree for this repository.

        Asks git to hash an empty tree so the result matches the
        repository's object format (SHA-1 or SHA-256).
        """
        result = self._run("hash-object", "-t", "tree", "--stdin", input="")
        return result.stdout.strip()

    def blob_size(self, spec: str) -> int:
        """Get the size in bytes of the object named by ``spec`` (e.g. ``sha:path``)."""
        result = self._run("cat-file", "-s", spec)
        return int(result.stdout.strip())

    def _run_raw(self, *args: str, timeout: int = 30) -> bytes:
        """Run a git command and return its stdout undecoded.

        Raises:
            GitError: If the command fails or times out
        """
        cmd = ["git", "-C", str(self.repo_path), *args]
        try:
            result = subprocess.run(cmd, capture_output=True, check=True, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise GitError(
                f"Git command timed out after {timeout}s: {' '.join(args)}",
                command=" ".join(cmd),
                exit_code=-1,
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else str(e)
            raise GitError(f"Git command failed: {stderr}", command=" ".join(cmd), exit_code=e.returncode) from e
        return result.stdout

    def read_blob(self, spec: str, timeout: int = 30) -> bytes:
        """Read raw object content for ``spec``.

        Raises:
            GitError: If the object cannot be read
        """
        return self._run_raw("cat-file", "-p", spec, timeout=timeout)

    def diff_names(self, base: str, head: str) -> list[str]:
        """List paths that differ between two tree-ish objects, deletions excluded.

        Names are decoded with ``os.fsdecode`` so paths that are not valid
        UTF-8 survive the round trip back into git arguments.
        """
        raw = self._run_raw("diff", "--name-only", "-z", "--no-renames", "--diff-filter=d", base, head, timeout=60)
        return [os.fsdecode(name) for name in raw.split(b"\x00") if name]

    def current_commit(self) -> str:
        """Get the current commit SHA."""
        result = self._run("rev-parse", "HEAD")
        return result.stdout.strip()

    def commit_count(self) -> int:
        """Count commits reachable from HEAD."""
        result = self._run("rev-list", "--count", "HEAD")
        return int(result.stdout.strip())

    def latest_commit(self) -> CommitInfo:
        """Get metadata for the commit at HEAD.

        Raises:
            GitError: If the repository has no commits
        """
        fmt = _LOG_FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"])
        result = self._run("log", "-1", f"--format={fmt}", check=False)
        if result.returncode != 0 or not result.stdout.strip():
            raise GitError("Repository has no commits", details={"path": str(self.repo_path)})

        sha, author, email, date, message = result.stdout.split(_LOG_FIELD_SEP, 4)
        return CommitInfo(
            sha=sha.strip(),
            message=message.strip(),
            author=author,
            email=email,
            date=date,
        )

    def commit_diff(self, max_lines: int) -> tuple[str, str]:
        """Get (stat, diff) for HEAD against its parent, diff capped at ``max_lines``."""
        if self.commit_count() > 1:
            stat = self._run("diff", "--stat", "HEAD~1", "HEAD").stdout
            diff = self._run("diff", "HEAD~1", "HEAD").stdout
        else:
            stat = self._run("show", "--stat", "--format=", "HEAD").stdout
            diff = self._run("show", "--format=", "HEAD").stdout

        lines = diff.split("\n")
        if len(lines) > max_lines:
            diff = "\n".join(lines[:max_lines]) + "\n... (diff truncated)"
        return stat, diff
