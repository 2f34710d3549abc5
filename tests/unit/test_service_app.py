"""Tests for the companion service HTTP surface."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from gitsentinel import __version__
from gitsentinel.config import SentinelConfig
from gitsentinel.queue import QueueJob, enqueue
from gitsentinel.service import create_app
from tests.helpers.git_helpers import init_repo


class RecordingHandler:
    """Job handler double that records jobs and can be told to fail."""

    def __init__(self, fail: bool = False) -> None:
        self.jobs: list[QueueJob] = []
        self.fail = fail

    def __call__(self, job: QueueJob) -> str:
        self.jobs.append(job)
        if self.fail:
            raise RuntimeError("analysis failed")
        return "ok"


@pytest.fixture
def config() -> SentinelConfig:
    return SentinelConfig.from_dict({"queue": {"inter_job_delay_seconds": 0}})


@pytest.fixture
def project(tmp_path: Path) -> Path:
    return init_repo(tmp_path / "proj")


class TestHealth:
    """Tests for the liveness probe."""

    def test_health(self, tmp_path: Path, config: SentinelConfig) -> None:
        """Test the probe answers 200 with the version."""
        with TestClient(create_app(config, root=tmp_path, handler=RecordingHandler())) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestPostCommitNotify:
    """Tests for POST /hooks/post-commit-notify."""

    def test_notify_runs_job(self, tmp_path: Path, project: Path, config: SentinelConfig) -> None:
        """Test a notification becomes one handled job for that project."""
        handler = RecordingHandler()
        app = create_app(config, root=tmp_path, handler=handler)

        with TestClient(app) as client:
            response = client.post("/hooks/post-commit-notify", json={"projectPath": str(project)})
            assert app.state.worker.join(timeout=5)

        assert response.status_code == 200
        assert response.json()["queued"] is True
        assert [job.project_path for job in handler.jobs] == [str(project.resolve())]
        assert handler.jobs[0].queue_file is None

    def test_relative_path_resolved_against_root(self, tmp_path: Path, project: Path, config: SentinelConfig) -> None:
        """Test a bare project name is taken relative to the root."""
        handler = RecordingHandler()
        app = create_app(config, root=tmp_path, handler=handler)

        with TestClient(app) as client:
            assert client.post("/hooks/post-commit-notify", json={"projectPath": "proj"}).status_code == 200
            assert app.state.worker.join(timeout=5)

        assert handler.jobs[0].project_path == str(project.resolve())

    @pytest.mark.parametrize("path", ["", "   ", "missing", "/etc", "proj/../../outside"])
    def test_rejected_paths(self, tmp_path: Path, project: Path, config: SentinelConfig, path: str) -> None:
        """Test empty, missing and out-of-root paths are rejected."""
        handler = RecordingHandler()
        with TestClient(create_app(config, root=tmp_path, handler=handler)) as client:
            response = client.post("/hooks/post-commit-notify", json={"projectPath": path})

        assert response.status_code == 400
        assert handler.jobs == []

    def test_nested_path_rejected(self, tmp_path: Path, project: Path, config: SentinelConfig) -> None:
        """Test only the root and its immediate subdirectories are served."""
        (project / "sub").mkdir()
        with TestClient(create_app(config, root=tmp_path, handler=RecordingHandler())) as client:
            response = client.post("/hooks/post-commit-notify", json={"projectPath": str(project / "sub")})

        assert response.status_code == 400


class TestStartupDrain:
    """Tests for draining offline queue records at startup."""

    def test_pending_records_processed_and_deleted(
        self, tmp_path: Path, project: Path, config: SentinelConfig
    ) -> None:
        """Test records left while the service was down are handled then removed."""
        first = enqueue(project)
        second = enqueue(project)
        handler = RecordingHandler()
        app = create_app(config, root=tmp_path, handler=handler)

        with TestClient(app):
            assert app.state.worker.join(timeout=5)

        assert [job.queue_file for job in handler.jobs] == [first, second]
        assert not first.exists()
        assert not second.exists()

    def test_failed_records_kept(self, tmp_path: Path, project: Path, config: SentinelConfig) -> None:
        """Test a failing job leaves its record for the next start."""
        record = enqueue(project)
        app = create_app(config, root=tmp_path, handler=RecordingHandler(fail=True))

        with TestClient(app) as client:
            assert app.state.worker.join(timeout=5)
            state = client.get("/analysis/state").json()

        assert record.exists()
        assert state["failed"] == 1
        assert state["processed"] == 0


class TestHookEndpoints:
    """Tests for hook management over HTTP."""

    def test_install_status_remove(self, tmp_path: Path, project: Path, config: SentinelConfig) -> None:
        """Test the hook lifecycle through the API."""
        with TestClient(create_app(config, root=tmp_path, handler=RecordingHandler())) as client:
            before = client.get("/hooks/status", params={"projectPath": "proj"}).json()
            installed = client.post("/hooks/install", json={"projectPath": "proj", "postCommit": False}).json()
            removed = client.post("/hooks/remove", json={"projectPath": "proj"}).json()

        assert before["hooks"] == {"post-commit": False, "pre-push": False}
        assert installed["installed"] == ["pre-push"]
        assert installed["hooks"] == {"post-commit": False, "pre-push": True}
        assert removed["removed"] == ["pre-push"]
        assert removed["hooks"]["pre-push"] is False

    def test_install_outside_repository(self, tmp_path: Path, config: SentinelConfig) -> None:
        """Test installing into a plain directory is a 400."""
        (tmp_path / "plain").mkdir()
        with TestClient(create_app(config, root=tmp_path, handler=RecordingHandler())) as client:
            response = client.post("/hooks/install", json={"projectPath": "plain"})

        assert response.status_code == 400
        assert "Not a git repository" in response.json()["detail"]


class TestAnalysisState:
    """Tests for GET /analysis/state."""

    def test_idle_state(self, tmp_path: Path, config: SentinelConfig) -> None:
        """Test the state of an idle worker."""
        with TestClient(create_app(config, root=tmp_path, handler=RecordingHandler())) as client:
            state = client.get("/analysis/state").json()

        assert state == {
            "status": "idle",
            "projectPath": None,
            "pending": 0,
            "processed": 0,
            "failed": 0,
            "lastReport": None,
        }

    def test_reports_dir_under_root(self, tmp_path: Path, config: SentinelConfig) -> None:
        """Test a relative reports directory is placed under the root."""
        app = create_app(config, root=tmp_path)
        assert app.state.analyzer.reports_dir == tmp_path.resolve() / "reports"
