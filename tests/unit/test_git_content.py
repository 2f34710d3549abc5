"""Tests for commit range resolution and historical content reads."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gitsentinel.exceptions import GitError
from gitsentinel.git import CommitRange, ContentFetcher, GitRunner, RangeResolver
from tests.helpers.git_helpers import commit_file, run_git

ZERO_SHA = "0" * 40


class TestRangeResolver:
    """Tests for RangeResolver.resolve."""

    def test_deletion_is_skipped(self, tmp_repo: Path) -> None:
        """Test an all-zero local sha means nothing to scan."""
        resolver = RangeResolver(GitRunner(tmp_repo))
        head = run_git("rev-parse", "HEAD", cwd=tmp_repo)

        assert resolver.resolve(ZERO_SHA, head) is None

    def test_sha256_zero_is_skipped(self, tmp_repo: Path) -> None:
        """Test the zero sha check is length-agnostic."""
        resolver = RangeResolver(GitRunner(tmp_repo))
        assert resolver.resolve("0" * 64, "a" * 64) is None

    def test_new_branch_starts_at_empty_tree(self, tmp_repo: Path) -> None:
        """Test a new branch scans from the repository's empty tree."""
        git = GitRunner(tmp_repo)
        resolver = RangeResolver(git)
        head = run_git("rev-parse", "HEAD", cwd=tmp_repo)

        commit_range = resolver.resolve(head, ZERO_SHA)

        assert commit_range is not None
        assert commit_range.new_branch
        assert commit_range.head == head
        assert commit_range.base == git.empty_tree()
        assert run_git("cat-file", "-t", commit_range.base, cwd=tmp_repo) == "tree"

    def test_update_uses_remote_sha(self, tmp_repo: Path) -> None:
        """Test an update covers remote..local only."""
        resolver = RangeResolver(GitRunner(tmp_repo))
        base = run_git("rev-parse", "HEAD", cwd=tmp_repo)
        head = commit_file(tmp_repo, "src/app.py", "print('hi')\n")

        commit_range = resolver.resolve(head, base)

        assert commit_range == CommitRange(base=base, head=head)
        assert str(commit_range) == f"{base}..{head}"

    def test_empty_tree_cached(self) -> None:
        """Test the empty tree is computed once."""
        git = MagicMock()
        git.empty_tree.return_value = "4b825dc"
        resolver = RangeResolver(git)

        resolver.resolve("a" * 40, ZERO_SHA)
        resolver.resolve("b" * 40, ZERO_SHA)

        git.empty_tree.assert_called_once()

    def test_empty_tree_failure_propagates(self) -> None:
        """Test a failing empty-tree lookup surfaces as GitError for the caller to handle."""
        git = MagicMock()
        git.empty_tree.side_effect = GitError("broken")

        with pytest.raises(GitError):
            RangeResolver(git).resolve("a" * 40, ZERO_SHA)


class TestContentFetcher:
    """Tests for ContentFetcher."""

    def test_changed_files_for_new_branch(self, tmp_repo: Path) -> None:
        """Test a new-branch range lists every file in the tree."""
        git = GitRunner(tmp_repo)
        head = commit_file(tmp_repo, "src/app.py", "x = 1\n")
        commit_range = RangeResolver(git).resolve(head, ZERO_SHA)

        files = ContentFetcher(git).changed_files(commit_range)

        assert sorted(files) == ["README.md", "src/app.py"]

    def test_changed_files_excludes_deletions(self, tmp_repo: Path) -> None:
        """Test deleted paths are not listed."""
        git = GitRunner(tmp_repo)
        base = commit_file(tmp_repo, "old.txt", "old\n")
        (tmp_repo / "old.txt").unlink()
        head = commit_file(tmp_repo, "new.txt", "new\n")

        files = ContentFetcher(git).changed_files(CommitRange(base=base, head=head))

        assert files == ["new.txt"]

    def test_changed_files_with_spaces(self, tmp_repo: Path) -> None:
        """Test filenames with spaces come back unquoted."""
        git = GitRunner(tmp_repo)
        base = run_git("rev-parse", "HEAD", cwd=tmp_repo)
        head = commit_file(tmp_repo, "dir with space/my file.txt", "x\n")

        files = ContentFetcher(git).changed_files(CommitRange(base=base, head=head))

        assert files == ["dir with space/my file.txt"]

    def test_changed_files_bad_range_is_empty(self, tmp_repo: Path) -> None:
        """Test an unknown sha degrades to an empty list."""
        fetcher = ContentFetcher(GitRunner(tmp_repo))
        assert fetcher.changed_files(CommitRange(base="f" * 40, head="e" * 40)) == []

    def test_file_at_reads_historical_content(self, tmp_repo: Path) -> None:
        """Test content is read from the commit, not the working tree."""
        git = GitRunner(tmp_repo)
        first = commit_file(tmp_repo, "conf.txt", "v1\n")
        commit_file(tmp_repo, "conf.txt", "v2\n")

        assert ContentFetcher(git).file_at(first, "conf.txt") == "v1\n"

    def test_file_at_missing_is_none(self, tmp_repo: Path) -> None:
        """Test a path absent at the commit returns None."""
        fetcher = ContentFetcher(GitRunner(tmp_repo))
        assert fetcher.file_at("HEAD", "nope.txt") is None

    def test_file_at_binary_is_none(self, tmp_repo: Path) -> None:
        """Test blobs containing NUL bytes are treated as binary."""
        head = commit_file(tmp_repo, "blob.bin", b"abc\x00def")
        assert ContentFetcher(GitRunner(tmp_repo)).file_at(head, "blob.bin") is None

    def test_file_at_invalid_utf8_is_none(self, tmp_repo: Path) -> None:
        """Test undecodable content is treated as binary."""
        head = commit_file(tmp_repo, "latin.txt", b"caf\xe9\n")
        assert ContentFetcher(GitRunner(tmp_repo)).file_at(head, "latin.txt") is None

    def test_file_at_over_limit_is_none(self, tmp_repo: Path) -> None:
        """Test files above the size ceiling are not read."""
        head = commit_file(tmp_repo, "big.txt", "x" * 5000)
        fetcher = ContentFetcher(GitRunner(tmp_repo), max_file_bytes=1024)

        assert fetcher.file_at(head, "big.txt") is None

    def test_file_at_size_checked_before_read(self) -> None:
        """Test an oversized blob is never read."""
        git = MagicMock()
        git.blob_size.return_value = 10_000
        fetcher = ContentFetcher(git, max_file_bytes=1024)

        assert fetcher.file_at("abc", "big.txt") is None
        git.read_blob.assert_not_called()
