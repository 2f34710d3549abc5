"""GITSENTINEL exception hierarchy."""

from typing import Any


class SentinelError(Exception):
    """Base exception for all GITSENTINEL errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(SentinelError):
    """Error in GITSENTINEL configuration."""

    pass


class GitError(SentinelError):
    """Error in git operations."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.command = command
        self.exit_code = exit_code


class HookInstallError(SentinelError):
    """Installing or removing a hook failed."""

    def __init__(
        self,
        message: str,
        hook_type: str | None = None,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.hook_type = hook_type
        self.path = path


class HookScriptError(HookInstallError):
    """Hook script has a malformed marker region."""

    pass


class VerificationError(SentinelError):
    """Second-pass finding verification failed."""

    pass


class AnalysisError(SentinelError):
    """Commit analysis could not produce a report."""

    def __init__(
        self, message: str, project_path: str | None = None, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details)
        self.project_path = project_path
