"""Git hook deployment for GITSENTINEL."""

from gitsentinel.hooks.installer import (
    hook_status,
    install_hook,
    install_hooks,
    is_installed,
    remove_hook,
    remove_hooks,
)
from gitsentinel.hooks.script import HookScript, build_hook_block

__all__ = [
    "HookScript",
    "build_hook_block",
    "hook_status",
    "install_hook",
    "install_hooks",
    "is_installed",
    "remove_hook",
    "remove_hooks",
]
