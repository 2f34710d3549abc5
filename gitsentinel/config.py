"""GITSENTINEL configuration management using Pydantic."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field, ValidationError

from gitsentinel.constants import (
    BYPASS_ENV_VAR,
    CONFIG_DIR,
    CONFIG_FILE,
    DEFAULT_HOST,
    DEFAULT_INTER_JOB_DELAY_SECONDS,
    DEFAULT_MAX_FILE_BYTES,
    DEFAULT_MAX_FINDINGS_PER_LINE,
    DEFAULT_NOTIFY_TIMEOUT_SECONDS,
    DEFAULT_PORT,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    DEFAULT_VERIFY_TIMEOUT_SECONDS,
    DEV_ROOT_ENV_VAR,
    LLM_PROVIDER_ENV_VAR,
    PORT_ENV_VAR,
    QUEUE_DIR_NAME,
    REPORTS_DIR,
)
from gitsentinel.exceptions import ConfigurationError


class ServerConfig(BaseModel):
    """Companion service location and client timeouts."""

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    probe_timeout_seconds: float = Field(default=DEFAULT_PROBE_TIMEOUT_SECONDS, gt=0, le=10)
    notify_timeout_seconds: float = Field(default=DEFAULT_NOTIFY_TIMEOUT_SECONDS, gt=0, le=30)

    @property
    def base_url(self) -> str:
        """Base URL of the companion service."""
        return f"http://{self.host}:{self.port}"


class ScanConfig(BaseModel):
    """Pre-push secret scan settings."""

    max_file_bytes: int = Field(default=DEFAULT_MAX_FILE_BYTES, ge=1024)
    max_findings_per_line: int = Field(default=DEFAULT_MAX_FINDINGS_PER_LINE, ge=1, le=50)
    bypass_env_var: str = BYPASS_ENV_VAR
    verify: bool = True
    verify_timeout_seconds: int = Field(default=DEFAULT_VERIFY_TIMEOUT_SECONDS, ge=1, le=300)
    extra_skip_dirs: list[str] = Field(default_factory=list)
    extra_skip_filenames: list[str] = Field(default_factory=list)


class QueueConfig(BaseModel):
    """Offline job queue settings."""

    dir_name: str = QUEUE_DIR_NAME
    inter_job_delay_seconds: float = Field(default=DEFAULT_INTER_JOB_DELAY_SECONDS, ge=0, le=60)


class LLMConfig(BaseModel):
    """External reasoning collaborator settings."""

    provider: str = Field(default="none", pattern="^(none|ollama|claude)$")
    model: str | None = None
    hosts: list[str] = Field(default_factory=lambda: ["http://localhost:11434"])
    timeout_seconds: int = Field(default=120, ge=1, le=3600)
    max_retries: int = Field(default=2, ge=0, le=10)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="info", pattern="^(debug|info|warn|error)$")
    directory: str | None = None


class SentinelConfig(BaseModel):
    """Complete GITSENTINEL configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    queue: QueueConfig = Field(default_factory=QueueConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    reports_dir: str = REPORTS_DIR

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> SentinelConfig:
        """Load configuration from YAML file and environment overrides.

        Args:
            config_path: Path to config file. Defaults to .gitsentinel/config.yaml
            env: Environment mapping. Defaults to os.environ

        Returns:
            SentinelConfig instance

        Raises:
            ConfigurationError: If the file or values are invalid
        """
        config_path = Path(CONFIG_DIR) / CONFIG_FILE if config_path is None else Path(config_path)
        env = os.environ if env is None else env

        data: dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(
                    f"Cannot read config file {config_path}",
                    details={"error": str(e)},
                ) from e
            if not isinstance(data, dict):
                raise ConfigurationError(
                    f"Config file {config_path} must contain a mapping",
                    details={"type": type(data).__name__},
                )

        _apply_env_overrides(data, env)
        return cls.from_dict(data)

    @classmethod
    def for_project(cls, project_path: str | Path, env: Mapping[str, str] | None = None) -> SentinelConfig:
        """Load the configuration stored in a project's .gitsentinel directory."""
        return cls.load(Path(project_path) / CONFIG_DIR / CONFIG_FILE, env=env)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SentinelConfig:
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            SentinelConfig instance

        Raises:
            ConfigurationError: If validation fails
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError("Invalid configuration", details={"errors": e.errors()}) from e

    def save(self, config_path: str | Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Defaults to .gitsentinel/config.yaml
        """
        config_path = Path(CONFIG_DIR) / CONFIG_FILE if config_path is None else Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()


def _apply_env_overrides(data: dict[str, Any], env: Mapping[str, str]) -> None:
    port = env.get(PORT_ENV_VAR, "").strip()
    if port:
        try:
            data.setdefault("server", {})["port"] = int(port)
        except ValueError as e:
            raise ConfigurationError(f"{PORT_ENV_VAR} must be an integer", details={"value": port}) from e

    provider = env.get(LLM_PROVIDER_ENV_VAR, "").strip()
    if provider:
        data.setdefault("llm", {})["provider"] = provider


def resolve_dev_root(env: Mapping[str, str] | None = None, cwd: str | Path | None = None) -> Path:
    """Resolve the companion service root directory.

    Uses DEV_ROOT when set, otherwise the current directory.

    Args:
        env: Environment mapping. Defaults to os.environ
        cwd: Fallback directory. Defaults to Path.cwd()

    Returns:
        Resolved directory path

    Raises:
        ConfigurationError: If the directory does not exist
    """
    env = os.environ if env is None else env
    from_env = env.get(DEV_ROOT_ENV_VAR, "").strip()
    source = DEV_ROOT_ENV_VAR if from_env else "cwd"
    root = Path(from_env) if from_env else Path(cwd) if cwd is not None else Path.cwd()

    if not root.exists():
        raise ConfigurationError(f"{source} path not found: {root}")
    if not root.is_dir():
        raise ConfigurationError(f"{source} path is not a directory: {root}")
    return root.resolve()
