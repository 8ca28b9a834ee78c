"""Filesystem locations of phantom worktrees."""

import os
from typing import Optional

from git_phantom.constants import PHANTOM_DIR_PARTS


def get_worktrees_directory(git_root: str, base_path: Optional[str] = None) -> str:
    """Return the directory that holds phantom worktrees.

    An absolute ``base_path`` is used as-is, a relative one is resolved against
    the git root, and without one the default ``<git_root>/.git/phantom/worktrees``
    layout applies.
    """
    if base_path:
        if os.path.isabs(base_path):
            return base_path
        return os.path.normpath(os.path.join(git_root, base_path))
    return os.path.join(git_root, *PHANTOM_DIR_PARTS)


def get_worktree_path(git_root: str, name: str, base_path: Optional[str] = None) -> str:
    return os.path.join(get_worktrees_directory(git_root, base_path), name)


def get_worktree_path_from_directory(worktrees_directory: str, name: str) -> str:
    return os.path.join(worktrees_directory, name)


def is_within_directory(path: str, directory: str) -> bool:
    """True if ``path`` sits strictly below ``directory``."""
    path = os.path.normpath(os.path.abspath(path))
    directory = os.path.normpath(os.path.abspath(directory))
    return path != directory and path.startswith(directory + os.sep)
