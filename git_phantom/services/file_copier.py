"""Copies resolved files from the main checkout into a new worktree."""

import logging
import os
import shutil
from typing import List, Optional

from git_phantom.exceptions import GitPhantomError, WorktreeError
from git_phantom.models.provisioning import CopyFilesSuccess
from git_phantom.models.result import Err, Ok, Result
from git_phantom.services.glob_resolver import GlobResolver
from git_phantom.logging_config import get_logger


class FileCopier:
    """Copies files matched by patterns, preserving their relative layout."""

    def __init__(self, glob_resolver: Optional[GlobResolver] = None,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(__name__)
        self.glob_resolver = glob_resolver or GlobResolver(logger=self.logger)

    def copy_files(self, source_root: str, target_root: str,
                   patterns: List[str]) -> Result[CopyFilesSuccess, GitPhantomError]:
        """Copy every file matched by ``patterns`` from source_root to target_root.

        Missing files and directories are skipped, not errors. Only an
        unexpected I/O failure aborts the copy.
        """
        resolution = self.glob_resolver.resolve(source_root, patterns)
        if resolution.is_err:
            return Err(resolution.error)

        outcome = CopyFilesSuccess()
        for relative_path in resolution.value.resolved_files:
            source_path = os.path.join(source_root, relative_path)
            target_path = os.path.join(target_root, relative_path)

            if not os.path.exists(source_path) or os.path.isdir(source_path):
                outcome.skipped_files.append(relative_path)
                continue

            try:
                os.makedirs(os.path.dirname(target_path), exist_ok=True)
                shutil.copy2(source_path, target_path)
            except OSError as e:
                return Err(WorktreeError(f"Failed to copy {relative_path}: {e}"))

            outcome.copied_files.append(relative_path)
            self.logger.debug(f"Copied {relative_path}")

        return Ok(outcome)


def copy_files(source_root: str, target_root: str, patterns: List[str],
               logger: Optional[logging.Logger] = None) -> Result[CopyFilesSuccess, GitPhantomError]:
    """Copy files matching ``patterns`` from ``source_root`` into ``target_root``."""
    return FileCopier(logger=logger).copy_files(source_root, target_root, patterns)
