"""GITSENTINEL constants and enumerations."""

from enum import Enum


class HookType(Enum):
    """Git hooks managed by GITSENTINEL."""

    POST_COMMIT = "post-commit"
    PRE_PUSH = "pre-push"


class Severity(Enum):
    """Secret finding severity."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


class AnalysisState(Enum):
    """Background analysis worker state."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    STOPPED = "stopped"


# Hook script markers (whole lines)
HOOK_MARKER_START = "# === gitsentinel START ==="
HOOK_MARKER_END = "# === gitsentinel END ==="
DEFAULT_SHEBANG = "#!/bin/sh"

# Environment
BYPASS_ENV_VAR = "SKIP_SECRET_SCAN"
BYPASS_TRUTHY_VALUES = frozenset({"1", "true", "yes"})
PORT_ENV_VAR = "PORT"
DEV_ROOT_ENV_VAR = "DEV_ROOT"
LLM_PROVIDER_ENV_VAR = "GITSENTINEL_LLM_PROVIDER"

# Directories and files
CONFIG_DIR = ".gitsentinel"
CONFIG_FILE = "config.yaml"
QUEUE_DIR_NAME = ".gitsentinel-queue"
REPORTS_DIR = "reports"

# Companion service
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 50324
HEALTH_ENDPOINT = "/health"
NOTIFY_ENDPOINT = "/hooks/post-commit-notify"
DEFAULT_PROBE_TIMEOUT_SECONDS = 0.5
DEFAULT_NOTIFY_TIMEOUT_SECONDS = 2.0

# Scanning
DEFAULT_MAX_FILE_BYTES = 1024 * 1024
DEFAULT_MAX_FINDINGS_PER_LINE = 3
DEFAULT_VERIFY_TIMEOUT_SECONDS = 20
EXCERPT_MAX_CHARS = 120

# Queue processing
DEFAULT_INTER_JOB_DELAY_SECONDS = 1.0

# Commit analysis
DIFF_LINE_LIMIT = 300


def is_zero_sha(sha: str) -> bool:
    """Check whether a sha is the all-zeros placeholder used by git.

    Works for both SHA-1 (40) and SHA-256 (64) object names.
    """
    return bool(sha) and set(sha) == {"0"}
