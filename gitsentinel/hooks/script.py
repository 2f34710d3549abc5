"""Marker-region parsing and serialization for git hook scripts.

A hook script is split into ``prefix``, an optional marked ``block`` and
``suffix``. Everything outside the block belongs to the user and is carried
through untouched.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from gitsentinel.constants import DEFAULT_SHEBANG, HOOK_MARKER_END, HOOK_MARKER_START, HookType
from gitsentinel.exceptions import HookScriptError


def _is_marker(line: str, marker: str) -> bool:
    return line.rstrip("\r\n").strip() == marker


@dataclass(frozen=True)
class HookScript:
    """Parsed hook script content."""

    prefix: str
    block: str | None = None
    suffix: str = ""

    @classmethod
    def parse(cls, content: str, hook_type: str | None = None) -> HookScript:
        """Split script content around the marker region.

        Args:
            content: Full script text
            hook_type: Used only for error context

        Returns:
            HookScript; ``block`` is None when no marker region exists

        Raises:
            HookScriptError: If the markers are unbalanced or out of order
        """
        lines = content.splitlines(keepends=True)
        start = next((i for i, line in enumerate(lines) if _is_marker(line, HOOK_MARKER_START)), None)
        end = next((i for i, line in enumerate(lines) if _is_marker(line, HOOK_MARKER_END)), None)

        if start is None and end is None:
            return cls(prefix=content)
        if start is None or end is None:
            raise HookScriptError(
                "Hook script has an incomplete marker region",
                hook_type=hook_type,
                details={"start_found": start is not None, "end_found": end is not None},
            )
        if end < start:
            raise HookScriptError(
                "Hook script end marker precedes start marker",
                hook_type=hook_type,
                details={"start_line": start + 1, "end_line": end + 1},
            )

        return cls(
            prefix="".join(lines[:start]),
            block="".join(lines[start : end + 1]),
            suffix="".join(lines[end + 1 :]),
        )

    @property
    def has_block(self) -> bool:
        return self.block is not None

    def render(self) -> str:
        return self.prefix + (self.block or "") + self.suffix

    def without_block(self) -> HookScript:
        """Drop the marker region and the separator written before it.

        A blank line before the block means the user content ended with a
        newline. A single newline means it did not, so that newline goes too.
        """
        if self.block is None:
            return self
        prefix = self.prefix
        if prefix.endswith("\n\n") or (prefix.endswith("\n") and not self.suffix):
            prefix = prefix[:-1]
        suffix = self.suffix[1:] if self.suffix.startswith("\n") else self.suffix
        return HookScript(prefix=prefix + suffix)

    def is_effectively_empty(self) -> bool:
        """True when nothing but whitespace or a bare shebang remains."""
        remaining = self.render().strip()
        return not remaining or remaining == DEFAULT_SHEBANG

    def with_block(self, block: str) -> HookScript:
        """Return a script with ``block`` appended after the user's content.

        Any existing marker region is replaced. A default shebang is added
        when the user content lacks one.
        """
        base = self.without_block()
        if base.is_effectively_empty():
            content = DEFAULT_SHEBANG + "\n"
        else:
            content = base.render()
            if not content.startswith("#!"):
                content = f"{DEFAULT_SHEBANG}\n{content}"
        return HookScript(prefix=content + "\n", block=block)


def python_command() -> str:
    """Absolute interpreter path in POSIX form, quoted for sh."""
    path = Path(sys.executable).as_posix().replace('"', '\\"')
    return f'"{path}"'


def build_hook_block(hook_type: HookType, python: str | None = None) -> str:
    """Compose the marked invocation block for a hook type.

    post-commit runs detached so the commit returns immediately. pre-push
    runs in the foreground and propagates a non-zero exit code to git.
    """
    python = python or python_command()
    if hook_type == HookType.POST_COMMIT:
        body = [f'{python} -m gitsentinel.cli notify post-commit "$(pwd)" >/dev/null 2>&1 &']
    elif hook_type == HookType.PRE_PUSH:
        body = [
            f'{python} -m gitsentinel.cli scan pre-push "$(pwd)"',
            "_gs_result=$?",
            "if [ $_gs_result -ne 0 ]; then exit $_gs_result; fi",
        ]
    else:
        raise ValueError(f"Unsupported hook type: {hook_type}")

    return "\n".join([HOOK_MARKER_START, *body, HOOK_MARKER_END]) + "\n"
