"""Path-shape exemptions for the secret scan.

Exclusion never looks at content: a path is skipped when its basename is a
known filename, its name ends with a skipped suffix, or any directory
segment is a skipped directory.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

SKIP_FILENAMES: frozenset[str] = frozenset(
    {
        ".gitignore",
        ".env.example",
        ".env.sample",
        ".env.template",
        ".env.test",
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        "poetry.lock",
        "Pipfile.lock",
        "uv.lock",
        "CHANGELOG.md",
        "README.md",
        "LICENSE",
    }
)

# Matched against the end of the basename, so multi-dot suffixes work
SKIP_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".min.js",
        ".map",
        ".svg",
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".ico",
        ".pdf",
        ".woff",
        ".woff2",
        ".ttf",
        ".eot",
        ".zip",
        ".gz",
    }
)

SKIP_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        ".next",
        "out",
        "coverage",
        "__pycache__",
        ".venv",
        "vendor",
    }
)

_SEPARATORS = re.compile(r"[/\\]")


@dataclass(frozen=True)
class PathFilter:
    """Decides whether a repository-relative path is exempt from scanning."""

    filenames: frozenset[str] = field(default=SKIP_FILENAMES)
    extensions: frozenset[str] = field(default=SKIP_EXTENSIONS)
    dirs: frozenset[str] = field(default=SKIP_DIRS)

    @classmethod
    def with_extras(
        cls,
        extra_filenames: Iterable[str] = (),
        extra_dirs: Iterable[str] = (),
    ) -> PathFilter:
        """Build a filter with configured additions to the default sets."""
        return cls(
            filenames=SKIP_FILENAMES | frozenset(extra_filenames),
            dirs=SKIP_DIRS | frozenset(extra_dirs),
        )

    def should_skip(self, path: str) -> bool:
        parts = [p for p in _SEPARATORS.split(path) if p]
        if not parts:
            return True

        basename = parts[-1]
        if basename in self.filenames:
            return True

        lowered = basename.lower()
        if any(lowered.endswith(ext) for ext in self.extensions):
            return True

        return any(part in self.dirs for part in parts)


DEFAULT_PATH_FILTER = PathFilter()


def should_skip(path: str) -> bool:
    """Check a path against the default exclusion sets."""
    return DEFAULT_PATH_FILTER.should_skip(path)
