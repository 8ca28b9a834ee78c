"""Random, human-readable worktree names."""

import logging
import os
import random
from typing import Callable, Iterable, Optional

from git_phantom.constants import ADJECTIVES, MAX_NAME_GENERATION_ATTEMPTS, NOUNS, VERBS
from git_phantom.exceptions import NameGenerationError
from git_phantom.models.result import Err, Ok, Result
from git_phantom.paths import get_worktree_path_from_directory
from git_phantom.services.git.operations import GitOperations
from git_phantom.logging_config import get_logger


def generate_random_name(rng: Optional[random.Random] = None) -> str:
    """Generate random adjective-noun-verb name for worktree."""
    rng = rng or random
    return f"{rng.choice(ADJECTIVES)}-{rng.choice(NOUNS)}-{rng.choice(VERBS)}"


class NameGenerator:
    """Proposes names until one collides with neither a worktree nor a branch."""

    def __init__(self, git_ops: GitOperations, worktrees_directory: str,
                 candidate_factory: Callable[[], str] = generate_random_name,
                 max_attempts: int = MAX_NAME_GENERATION_ATTEMPTS,
                 logger: Optional[logging.Logger] = None):
        self.git_ops = git_ops
        self.worktrees_directory = worktrees_directory
        self.candidate_factory = candidate_factory
        self.max_attempts = max_attempts
        self.logger = logger or get_logger(__name__)

    def existing_names(self) -> set[str]:
        """Snapshot of the entries currently in the worktrees directory."""
        try:
            return set(os.listdir(self.worktrees_directory))
        except FileNotFoundError:
            return set()

    def _collides(self, candidate: str, existing: set[str]) -> bool:
        if candidate in existing:
            return True

        if os.path.exists(get_worktree_path_from_directory(self.worktrees_directory, candidate)):
            return True

        branch_check = self.git_ops.branch_exists(candidate)
        if branch_check.is_err:
            # The name is still usable; git add will complain if it is not
            self.logger.debug(f"Branch check for '{candidate}' failed: {branch_check.error}")
            return False
        return branch_check.value

    def generate(self, existing_names: Optional[Iterable[str]] = None) -> Result[str, NameGenerationError]:
        """Return a name free of worktree and branch collisions.

        Args:
            existing_names: Names already taken; defaults to a listing of the
                worktrees directory

        Returns:
            Ok(name), or Err(NameGenerationError) after max_attempts collisions
        """
        existing = set(existing_names) if existing_names is not None else self.existing_names()

        for attempt in range(1, self.max_attempts + 1):
            candidate = self.candidate_factory()
            if self._collides(candidate, existing):
                self.logger.debug(f"Name '{candidate}' is taken (attempt {attempt}/{self.max_attempts})")
                continue
            return Ok(candidate)

        return Err(NameGenerationError(
            "Failed to generate a unique worktree name after maximum retries"
        ))


def generate_unique_name(git_root: str, worktrees_directory: str,
                         existing_names: Optional[Iterable[str]] = None,
                         logger: Optional[logging.Logger] = None) -> Result[str, NameGenerationError]:
    """Generate a worktree name unused by any worktree directory or branch."""
    generator = NameGenerator(GitOperations(git_root), worktrees_directory, logger=logger)
    return generator.generate(existing_names)
