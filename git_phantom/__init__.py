"""
git-phantom - Disposable git worktrees, created and cleaned up by name
"""

from .__version__ import __version__
from .core import (
    WorktreeManager,
    attach_worktree_core,
    create_worktree,
    delete_worktree,
    list_worktrees,
    resolve_worktree_name_or_branch,
    where_worktree,
)
from .context import Context, create_context

__all__ = [
    "WorktreeManager",
    "Context",
    "create_context",
    "create_worktree",
    "attach_worktree_core",
    "delete_worktree",
    "list_worktrees",
    "resolve_worktree_name_or_branch",
    "where_worktree",
    "__version__",
]
