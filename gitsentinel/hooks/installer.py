"""Install, remove and query GITSENTINEL hooks in a repository.

These are operator-initiated operations, so filesystem problems are raised
as HookInstallError instead of being swallowed.
"""

from __future__ import annotations

from pathlib import Path

from gitsentinel.constants import HOOK_MARKER_START, HookType
from gitsentinel.exceptions import HookInstallError
from gitsentinel.hooks.script import HookScript, build_hook_block
from gitsentinel.logging import get_logger

logger = get_logger("hooks.installer")

HOOK_MODE = 0o755


def hooks_dir(project_path: str | Path) -> Path:
    """Locate ``.git/hooks`` for a project.

    Raises:
        HookInstallError: If the project is not a git repository
    """
    path = Path(project_path) / ".git" / "hooks"
    if not path.is_dir():
        raise HookInstallError(f"Not a git repository (no .git/hooks): {project_path}", path=str(path))
    return path


def _read(path: Path, hook_type: HookType) -> str | None:
    if not path.exists():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise HookInstallError(
            f"Cannot read {hook_type.value} hook", hook_type=hook_type.value, path=str(path), details={"error": str(e)}
        ) from e


def install_hook(project_path: str | Path, hook_type: HookType, python: str | None = None) -> Path:
    """Install or refresh one hook. Re-installing replaces the existing block.

    Args:
        project_path: Repository root
        hook_type: Hook to install
        python: Interpreter command for the hook block; current interpreter by default

    Returns:
        Path of the hook file
    """
    path = hooks_dir(project_path) / hook_type.value
    existing = _read(path, hook_type)
    script = HookScript.parse(existing or "", hook_type.value)
    updated = script.with_block(build_hook_block(hook_type, python))

    try:
        path.write_text(updated.render(), encoding="utf-8")
        path.chmod(HOOK_MODE)
    except OSError as e:
        raise HookInstallError(
            f"Cannot write {hook_type.value} hook", hook_type=hook_type.value, path=str(path), details={"error": str(e)}
        ) from e

    action = "Refreshed" if script.has_block else "Installed"
    logger.info(f"{action} {hook_type.value} hook at {path}")
    return path


def remove_hook(project_path: str | Path, hook_type: HookType) -> bool:
    """Remove this system's block from one hook.

    The file is deleted when nothing but a shebang would remain.

    Returns:
        True if a block was removed
    """
    path = hooks_dir(project_path) / hook_type.value
    existing = _read(path, hook_type)
    if existing is None:
        return False

    script = HookScript.parse(existing, hook_type.value)
    if not script.has_block:
        return False

    remaining = script.without_block()
    try:
        if remaining.is_effectively_empty():
            path.unlink()
            logger.info(f"Removed {hook_type.value} hook file {path}")
        else:
            path.write_text(remaining.render(), encoding="utf-8")
            logger.info(f"Removed gitsentinel block from {path}")
    except OSError as e:
        raise HookInstallError(
            f"Cannot update {hook_type.value} hook", hook_type=hook_type.value, path=str(path), details={"error": str(e)}
        ) from e
    return True


def is_installed(project_path: str | Path, hook_type: HookType) -> bool:
    """Cheap textual check for the start marker. Missing file or repo means False."""
    path = Path(project_path) / ".git" / "hooks" / hook_type.value
    try:
        return HOOK_MARKER_START in path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False


def install_hooks(
    project_path: str | Path,
    post_commit: bool = True,
    pre_push: bool = True,
    python: str | None = None,
) -> list[str]:
    """Install the selected hooks. Returns installed hook names."""
    selected = [t for t, wanted in ((HookType.POST_COMMIT, post_commit), (HookType.PRE_PUSH, pre_push)) if wanted]
    for hook_type in selected:
        install_hook(project_path, hook_type, python)
    return [t.value for t in selected]


def remove_hooks(project_path: str | Path) -> list[str]:
    """Remove every managed hook. Returns names of hooks that had a block."""
    return [t.value for t in HookType if remove_hook(project_path, t)]


def hook_status(project_path: str | Path) -> dict[str, bool]:
    """Installed state per hook type, keyed by hook name."""
    return {t.value: is_installed(project_path, t) for t in HookType}
