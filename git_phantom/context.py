"""Per-invocation context: repository root, worktrees root and config."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from git_phantom.config import PhantomConfig, load_config
from git_phantom.constants import WORKTREES_DIRECTORY_ENV
from git_phantom.paths import get_worktrees_directory
from git_phantom.logging_config import get_logger


@dataclass
class Context:
    """Everything a lifecycle operation needs to know about the repository."""

    git_root: str
    worktrees_directory: str
    config: Optional[PhantomConfig] = None


def create_context(git_root: str, logger: Optional[logging.Logger] = None) -> Context:
    """Build the context for ``git_root``.

    The ``PHANTOM_WORKTREES_DIRECTORY`` environment variable wins over
    ``worktreesDirectory`` from the config file. An invalid config file is
    reported and ignored.
    """
    logger = logger or get_logger(__name__)

    config_result = load_config(git_root)
    if config_result.is_err:
        logger.warning(f"Warning: {config_result.error.message}")
        config = None
    else:
        config = config_result.value

    base_path = os.environ.get(WORKTREES_DIRECTORY_ENV) or (config.worktrees_directory if config else None)
    worktrees_directory = get_worktrees_directory(git_root, base_path)
    logger.debug(f"Using worktrees directory {worktrees_directory}")

    return Context(git_root=git_root, worktrees_directory=worktrees_directory, config=config)
