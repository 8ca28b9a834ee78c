"""Git-related services for git-phantom."""

from .operations import GitOperations, describe_git_error
from .worktrees import WorktreeStateReader, parse_worktree_porcelain, count_changed_files

__all__ = [
    "GitOperations",
    "WorktreeStateReader",
    "describe_git_error",
    "parse_worktree_porcelain",
    "count_changed_files",
]
