"""GITSENTINEL - Git hooks for commit analysis and push-time secret scanning.

Notifies a companion analysis service after every commit and blocks pushes
that would leak credentials.
"""

__version__ = "0.4.0"
__author__ = "GITSENTINEL Team"

from gitsentinel.constants import HookType, Severity
from gitsentinel.exceptions import SentinelError
from gitsentinel.security import Finding, ScanResult

__all__ = [
    "__version__",
    "HookType",
    "Severity",
    "SentinelError",
    "Finding",
    "ScanResult",
]
