"""Worktree state reader for git-phantom."""

import logging
import os
from typing import List, Optional

from git_phantom.constants import SHORT_HASH_LENGTH
from git_phantom.exceptions import GitOperationError, WorktreeError
from git_phantom.models.result import Err, Ok, Result
from git_phantom.models.worktree import (
    GitWorktreeEntry,
    ListWorktreesSuccess,
    WorktreeOrigin,
    WorktreeRecord,
    WorktreeStatus,
)
from git_phantom.paths import is_within_directory
from git_phantom.services.git.operations import GitOperations
from git_phantom.logging_config import get_logger


def parse_worktree_porcelain(output: str) -> List[GitWorktreeEntry]:
    """Parse ``git worktree list --porcelain`` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or a bare "detached" line)
        (blank line between worktrees)
    """
    entries: List[GitWorktreeEntry] = []
    current: dict = {}

    def flush():
        if current.get("path"):
            entries.append(
                GitWorktreeEntry(
                    path=current["path"],
                    head=current.get("HEAD", ""),
                    branch=current.get("branch"),
                    is_detached=current.get("detached", False),
                    is_bare=current.get("bare", False),
                )
            )

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if not line.strip():
            # Empty line marks end of worktree entry
            flush()
            current = {}
            continue

        key, _, value = line.partition(" ")
        if key == "worktree":
            # Tolerate a missing blank separator
            flush()
            current = {"path": value}
        elif key == "HEAD":
            current["HEAD"] = value
        elif key == "branch":
            if value.startswith("refs/heads/"):
                value = value[len("refs/heads/"):]
            current["branch"] = value
        elif key == "detached":
            current["detached"] = True
        elif key == "bare":
            current["bare"] = True

    # Handle last entry if no trailing blank line
    flush()
    return entries


def count_changed_files(status_output: str) -> int:
    """Number of entries in ``git status --porcelain`` output."""
    return len([line for line in status_output.split("\n") if line.strip()])


class WorktreeStateReader:
    """Derives WorktreeRecords from git's own worktree bookkeeping.

    Nothing is cached: each call re-reads git state.
    """

    def __init__(self, git_ops: GitOperations, worktrees_directory: str,
                 logger: Optional[logging.Logger] = None):
        self.git_ops = git_ops
        self.worktrees_directory = worktrees_directory
        self.logger = logger or get_logger(__name__)

    def get_worktree_status(self, worktree_path: str) -> WorktreeStatus:
        """Dirty state of a worktree.

        Best effort: if git status cannot run the worktree is reported clean.
        """
        try:
            output = self.git_ops.status_porcelain(worktree_path)
        except GitOperationError as e:
            self.logger.debug(f"Could not check worktree status for {worktree_path}: {e}")
            return WorktreeStatus(has_uncommitted_changes=False, changed_files=0)

        changed = count_changed_files(output)
        return WorktreeStatus(has_uncommitted_changes=changed > 0, changed_files=changed)

    def _to_record(self, entry: GitWorktreeEntry) -> WorktreeRecord:
        if entry.is_detached or not entry.branch:
            branch = entry.head[:SHORT_HASH_LENGTH]
        else:
            branch = entry.branch

        real_path = os.path.realpath(entry.path)
        real_root = os.path.realpath(self.worktrees_directory)
        if is_within_directory(real_path, real_root):
            name = os.path.relpath(real_path, real_root).replace(os.sep, "/")
            origin = WorktreeOrigin.PHANTOM
        else:
            name = branch
            origin = WorktreeOrigin.NATIVE

        status = self.get_worktree_status(entry.path)
        return WorktreeRecord(
            name=name,
            path=entry.path,
            branch=branch,
            is_clean=not status.has_uncommitted_changes,
            origin=origin,
        )

    def list(self, exclude_default: bool = False) -> Result[ListWorktreesSuccess, WorktreeError]:
        """List every worktree git knows about.

        Args:
            exclude_default: Leave out the main repository checkout

        Returns:
            Ok(ListWorktreesSuccess) or Err(WorktreeError) when git itself fails
        """
        try:
            output = self.git_ops.list_worktrees_porcelain()
        except GitOperationError as e:
            return Err(WorktreeError(f"Failed to list worktrees: {e.detail or e}"))

        entries = [entry for entry in parse_worktree_porcelain(output) if not entry.is_bare]
        if not entries:
            return Ok(ListWorktreesSuccess(worktrees=[], message="No worktrees found"))

        if exclude_default:
            git_root = os.path.realpath(self.git_ops.git_root)
            filtered = [e for e in entries if os.path.realpath(e.path) != git_root]
            if not filtered:
                return Ok(ListWorktreesSuccess(worktrees=[], message="No sub worktrees found"))
            entries = filtered

        records = [self._to_record(entry) for entry in entries]
        self.logger.debug(f"Found {len(records)} worktrees")
        for record in records:
            self.logger.debug(f"  {record}")
        return Ok(ListWorktreesSuccess(worktrees=records))

    def find_by_name(self, name: str) -> Optional[WorktreeRecord]:
        """Return the worktree named ``name``, or None (listing failures included)."""
        result = self.list()
        if result.is_err:
            self.logger.debug(f"Listing failed while looking up '{name}': {result.error}")
            return None
        return next((wt for wt in result.value.worktrees if wt.name == name), None)
