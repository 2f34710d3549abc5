"""FastAPI application factory for the GITSENTINEL companion service."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from gitsentinel import __version__
from gitsentinel.config import SentinelConfig
from gitsentinel.constants import HEALTH_ENDPOINT, NOTIFY_ENDPOINT, HookType
from gitsentinel.exceptions import HookInstallError
from gitsentinel.hooks import hook_status, install_hooks, remove_hooks
from gitsentinel.llm.base import LLMProvider
from gitsentinel.logging import get_logger
from gitsentinel.queue import QueueJob, QueueWorker, drain_pending
from gitsentinel.queue.worker import JobHandler
from gitsentinel.service.analysis import CommitAnalyzer

logger = get_logger("service.app")


class NotifyRequest(BaseModel):
    projectPath: str = Field(default="")  # noqa: N815 -- wire field name


class HookRequest(BaseModel):
    projectPath: str = Field(default="")  # noqa: N815 -- wire field name
    postCommit: bool = True  # noqa: N815
    prePush: bool = True  # noqa: N815


def resolve_project(root: Path, project_path: str) -> Path:
    """Resolve a project path against the root.

    Only the root itself or one of its immediate subdirectories is accepted.

    Raises:
        HTTPException: 400 when the path is empty or outside the root
    """
    if not project_path.strip():
        raise HTTPException(status_code=400, detail="projectPath is required")
    candidate = Path(project_path)
    if not candidate.is_absolute():
        candidate = root / candidate
    resolved = candidate.resolve()
    if resolved != root and resolved.parent != root:
        raise HTTPException(status_code=400, detail=f"Project is outside {root}: {project_path}")
    if not resolved.is_dir():
        raise HTTPException(status_code=400, detail=f"Project not found: {project_path}")
    return resolved


def create_app(
    config: SentinelConfig | None = None,
    root: str | Path = ".",
    provider: LLMProvider | None = None,
    handler: JobHandler | None = None,
) -> FastAPI:
    """Build the companion service.

    Args:
        config: Loaded configuration; defaults when None
        root: Directory holding the projects this service serves
        provider: LLM client handle for commit analysis
        handler: Job handler override; a CommitAnalyzer by default

    Returns:
        FastAPI application whose lifespan owns the queue worker
    """
    config = config or SentinelConfig()
    root_path = Path(root).resolve()
    reports_dir = Path(config.reports_dir)
    if not reports_dir.is_absolute():
        reports_dir = root_path / reports_dir

    analyzer = CommitAnalyzer(provider, reports_dir, max_retries=config.llm.max_retries)
    worker = QueueWorker(handler or analyzer, delay=config.queue.inter_job_delay_seconds)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        worker.start()
        for job in drain_pending(root_path, config.queue.dir_name):
            worker.submit(job)
        logger.info(f"Companion service ready for {root_path}")
        yield
        worker.stop()

    app = FastAPI(title="GITSENTINEL companion service", version=__version__, lifespan=lifespan)
    app.state.worker = worker
    app.state.analyzer = analyzer
    app.state.root = root_path

    @app.get(HEALTH_ENDPOINT)
    async def health() -> dict[str, Any]:
        return {"status": "ok", "version": __version__}

    @app.post(NOTIFY_ENDPOINT)
    async def post_commit_notify(request: NotifyRequest) -> dict[str, Any]:
        """POST /hooks/post-commit-notify -- queue analysis of the latest commit."""
        project = resolve_project(root_path, request.projectPath)
        worker.submit(
            QueueJob(
                project_path=str(project),
                type=HookType.POST_COMMIT.value,
                saved_at=datetime.now(UTC).isoformat(),
            )
        )
        return {"queued": True, "pending": worker.pending}

    @app.get("/hooks/status")
    async def status(project_path: str = Query(alias="projectPath")) -> dict[str, Any]:
        project = resolve_project(root_path, project_path)
        return {"projectPath": str(project), "hooks": hook_status(project)}

    @app.post("/hooks/install")
    async def install(request: HookRequest) -> dict[str, Any]:
        project = resolve_project(root_path, request.projectPath)
        try:
            installed = install_hooks(project, post_commit=request.postCommit, pre_push=request.prePush)
        except HookInstallError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"installed": installed, "hooks": hook_status(project)}

    @app.post("/hooks/remove")
    async def remove(request: HookRequest) -> dict[str, Any]:
        project = resolve_project(root_path, request.projectPath)
        try:
            removed = remove_hooks(project)
        except HookInstallError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {"removed": removed, "hooks": hook_status(project)}

    @app.get("/analysis/state")
    async def analysis_state() -> dict[str, Any]:
        current = worker.current
        last_report = analyzer.last_report
        return {
            "status": worker.state.value,
            "projectPath": current.project_path if current else None,
            "pending": worker.pending,
            "processed": worker.processed,
            "failed": worker.failed,
            "lastReport": last_report.name if last_report else None,
        }

    return app
