"""Tests for the durable offline job queue."""

import json
import stat
from pathlib import Path
from unittest.mock import patch

from gitsentinel.constants import QUEUE_DIR_NAME
from gitsentinel.queue import QueueJob, complete, drain_pending, enqueue, queue_dir


class TestEnqueue:
    """Tests for enqueue."""

    def test_writes_one_record(self, tmp_path: Path) -> None:
        """Test a single JSON record is written in a private directory."""
        project = tmp_path / "proj"
        project.mkdir()

        path = enqueue(project)

        assert path is not None
        assert path.parent == project / QUEUE_DIR_NAME
        assert path.name.startswith("post-commit-")
        assert path.suffix == ".json"
        assert list((project / QUEUE_DIR_NAME).iterdir()) == [path]

        record = json.loads(path.read_text())
        assert record["projectPath"] == str(project.resolve())
        assert record["type"] == "post-commit"
        assert record["savedAt"]

        mode = stat.S_IMODE((project / QUEUE_DIR_NAME).stat().st_mode)
        assert mode == 0o700

    def test_rapid_enqueues_do_not_collide(self, tmp_path: Path) -> None:
        """Test jobs written in quick succession get distinct files."""
        paths = {enqueue(tmp_path) for _ in range(5)}
        assert len(paths) == 5
        assert None not in paths

    def test_failure_returns_none(self, tmp_path: Path) -> None:
        """Test write errors are swallowed."""
        with patch("pathlib.Path.write_text", side_effect=OSError("disk full")):
            assert enqueue(tmp_path) is None

    def test_unusable_project_returns_none(self, tmp_path: Path) -> None:
        """Test a project path that is a file does not raise."""
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")
        assert enqueue(not_a_dir) is None

    def test_custom_dir_name(self, tmp_path: Path) -> None:
        """Test the queue directory name is configurable."""
        path = enqueue(tmp_path, dir_name=".q")
        assert path is not None
        assert path.parent == queue_dir(tmp_path, ".q")


class TestDrainPending:
    """Tests for drain_pending."""

    def test_finds_jobs_in_subdirectories(self, tmp_path: Path) -> None:
        """Test jobs are collected from immediate subdirectories of the root."""
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        first = enqueue(tmp_path / "a")
        second = enqueue(tmp_path / "b")

        jobs = drain_pending(tmp_path)

        assert [j.queue_file for j in jobs] == [first, second]
        assert jobs[0].project_path == str((tmp_path / "a").resolve())
        assert jobs[0].type == "post-commit"

    def test_includes_root_itself(self, tmp_path: Path) -> None:
        """Test the root's own queue is drained."""
        path = enqueue(tmp_path)
        assert [j.queue_file for j in drain_pending(tmp_path)] == [path]

    def test_ignores_deeper_levels(self, tmp_path: Path) -> None:
        """Test grandchildren are not searched."""
        enqueue(tmp_path / "a" / "nested")
        assert drain_pending(tmp_path) == []

    def test_corrupt_records_skipped(self, tmp_path: Path) -> None:
        """Test unreadable or malformed records do not stop the drain."""
        project = tmp_path / "p"
        project.mkdir()
        good = enqueue(project)
        qdir = project / QUEUE_DIR_NAME
        (qdir / "post-commit-bad.json").write_text("{not json")
        (qdir / "post-commit-list.json").write_text("[1, 2]")
        (qdir / "notes.txt").write_text("ignored")

        jobs = drain_pending(tmp_path)

        assert [j.queue_file for j in jobs] == [good]

    def test_missing_root(self, tmp_path: Path) -> None:
        """Test a missing root yields no jobs."""
        assert drain_pending(tmp_path / "missing") == []

    def test_drain_does_not_delete(self, tmp_path: Path) -> None:
        """Test draining leaves records in place until completion."""
        path = enqueue(tmp_path)
        drain_pending(tmp_path)
        assert path is not None and path.exists()


class TestComplete:
    """Tests for complete."""

    def test_enqueue_drain_complete(self, tmp_path: Path) -> None:
        """Test the full durable lifecycle of one job."""
        project = tmp_path / "proj"
        project.mkdir()
        path = enqueue(project)

        jobs = drain_pending(tmp_path)
        assert len(jobs) == 1
        assert jobs[0].queue_file == path

        complete(jobs[0])

        assert path is not None and not path.exists()
        assert drain_pending(tmp_path) == []

    def test_complete_twice_is_safe(self, tmp_path: Path) -> None:
        """Test completing an already removed job is harmless."""
        enqueue(tmp_path)
        job = drain_pending(tmp_path)[0]
        complete(job)
        complete(job)

    def test_in_memory_job(self) -> None:
        """Test jobs without a record complete as a no-op."""
        job = QueueJob(project_path="/tmp/x", type="post-commit", saved_at="now")
        complete(job)
        assert job.label == "post-commit:x"
        assert job.to_dict()["queueFile"] is None
