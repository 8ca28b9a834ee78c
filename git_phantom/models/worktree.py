"""Worktree data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class WorktreeOrigin(Enum):
    """Where a listed worktree came from."""
    PHANTOM = "phantom"  # Lives under the configured worktrees directory
    NATIVE = "native"  # Any other git worktree, including the main checkout


@dataclass(frozen=True)
class WorktreeRecord:
    """A worktree as observed from ``git worktree list --porcelain``."""

    name: str
    path: str
    branch: str  # Branch name, or short commit hash when detached
    is_clean: bool
    origin: WorktreeOrigin

    def __str__(self) -> str:
        """String representation of worktree."""
        status = "" if self.is_clean else " [dirty]"
        return f"{self.name} ({self.branch}) @ {self.path}{status}"


@dataclass(frozen=True)
class GitWorktreeEntry:
    """One raw block from the porcelain listing, before naming and status."""

    path: str
    head: str
    branch: Optional[str]  # None when detached
    is_detached: bool = False
    is_bare: bool = False


@dataclass
class ListWorktreesSuccess:
    """Payload of a successful listing."""

    worktrees: List[WorktreeRecord] = field(default_factory=list)
    message: Optional[str] = None


@dataclass
class CreateOptions:
    """Options for creating a new worktree."""

    branch: Optional[str] = None  # Defaults to the worktree name
    base: Optional[str] = None  # Defaults to HEAD
    copy_files: Optional[List[str]] = None


@dataclass
class DeleteOptions:
    """Options for deleting a worktree."""

    force: bool = False
    delete_branch: bool = True


@dataclass
class CreateWorktreeSuccess:
    """Payload of a successful create (or attach)."""

    message: str
    path: str
    copied_files: Optional[List[str]] = None
    skipped_files: Optional[List[str]] = None
    copy_errors: List[str] = field(default_factory=list)
    executed_commands: List[str] = field(default_factory=list)

    @property
    def copy_error(self) -> Optional[str]:
        """All copy failures joined into a single warning, or None."""
        return "; ".join(self.copy_errors) if self.copy_errors else None


@dataclass
class DeleteWorktreeSuccess:
    """Payload of a successful delete."""

    message: str
    has_uncommitted_changes: bool = False
    changed_files: Optional[int] = None
    branch_deleted: bool = False


@dataclass(frozen=True)
class WorktreeStatus:
    """Dirty state of a worktree."""

    has_uncommitted_changes: bool
    changed_files: int
