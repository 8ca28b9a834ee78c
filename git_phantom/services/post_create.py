"""Post-create (and pre-delete) hooks: file provisioning and shell commands."""

import logging
import os
from typing import Callable, List, Optional, Tuple

from git_phantom.constants import DEFAULT_SHELL
from git_phantom.exceptions import (
    ErrorKind,
    GitPhantomError,
    PostCreateCommandError,
    WorktreeNotFoundError,
)
from git_phantom.models.provisioning import PostCreateOutcome, PostCreateResult, ProvisioningOutcome
from git_phantom.models.result import Err, Ok, Result
from git_phantom.paths import get_worktree_path_from_directory
from git_phantom.services.file_copier import FileCopier
from git_phantom.services.process import spawn_process
from git_phantom.logging_config import get_logger

Spawner = Callable[[List[str], str], Result[int, GitPhantomError]]

# Labels for copy lists, used to tag copy failures with their origin
SOURCE_OPTION = "option"
SOURCE_CONFIG = "config"


def get_user_shell() -> str:
    return os.environ.get("SHELL") or DEFAULT_SHELL


def _default_spawner(command: List[str], cwd: str) -> Result[int, GitPhantomError]:
    return spawn_process(command, cwd=cwd)


class PostCreateRunner:
    """Runs hook commands inside a worktree, strictly in order."""

    def __init__(self, spawner: Optional[Spawner] = None,
                 file_copier: Optional[FileCopier] = None,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(__name__)
        self.spawner = spawner or _default_spawner
        self.file_copier = file_copier or FileCopier(logger=self.logger)

    def execute_commands(self, git_root: str, worktrees_directory: str, worktree_name: str,
                         commands: List[str], hook: str = "post-create"
                         ) -> Result[PostCreateOutcome, GitPhantomError]:
        """Execute ``commands`` via ``$SHELL -c`` in the worktree directory.

        Stops at the first failure; later commands are never attempted.
        """
        worktree_path = get_worktree_path_from_directory(worktrees_directory, worktree_name)
        if not os.path.isdir(worktree_path):
            return Err(WorktreeNotFoundError(worktree_name))

        shell = get_user_shell()
        outcome = PostCreateOutcome()

        for command in commands:
            self.logger.info(f"Executing: {command}")
            result = self.spawner([shell, "-c", command], worktree_path)

            if result.is_err:
                error = result.error
                if error.kind is ErrorKind.PROCESS_EXECUTION:
                    return Err(PostCreateCommandError(
                        f"{hook.capitalize()} command failed with exit code {error.exit_code}: {command}",
                        command=command,
                        exit_code=error.exit_code,
                    ))
                return Err(PostCreateCommandError(
                    f"Failed to execute {hook} command \"{command}\": {error.message}",
                    command=command,
                ))

            outcome.executed_commands.append(command)

        return Ok(outcome)

    def copy_into_worktree(self, git_root: str, worktrees_directory: str, worktree_name: str,
                           copy_lists: List[Tuple[str, List[str]]]) -> ProvisioningOutcome:
        """Copy each (source label, patterns) list from the git root into the worktree.

        Failures never raise; each one is kept, tagged with its source.
        """
        worktree_path = get_worktree_path_from_directory(worktrees_directory, worktree_name)
        outcome = ProvisioningOutcome()

        for source, patterns in copy_lists:
            if not patterns:
                continue
            result = self.file_copier.copy_files(git_root, worktree_path, patterns)
            if result.is_err:
                outcome.copy_errors.append(f"{source}: {result.error.message}")
                continue
            for file in result.value.copied_files:
                if file not in outcome.copied_files:
                    outcome.copied_files.append(file)
            for file in result.value.skipped_files:
                if file not in outcome.skipped_files:
                    outcome.skipped_files.append(file)

        for error in outcome.copy_errors:
            self.logger.warning(f"Warning: Failed to copy some files: {error}")
        return outcome

    def run(self, git_root: str, worktrees_directory: str, worktree_name: str,
            copy_files: Optional[List[str]] = None,
            commands: Optional[List[str]] = None) -> Result[PostCreateResult, GitPhantomError]:
        """Copy configured files, then run configured commands.

        Copy failures are reported on the result; a command failure aborts.
        """
        result = PostCreateResult()

        if copy_files:
            result.provisioning = self.copy_into_worktree(
                git_root, worktrees_directory, worktree_name, [(SOURCE_CONFIG, copy_files)]
            )

        if commands:
            self.logger.info("Running post-create commands...")
            commands_result = self.execute_commands(git_root, worktrees_directory, worktree_name, commands)
            if commands_result.is_err:
                return Err(commands_result.error)
            result.executed_commands = commands_result.value.executed_commands

        return Ok(result)


def execute_post_create_commands(git_root: str, worktrees_directory: str, worktree_name: str,
                                 commands: List[str],
                                 logger: Optional[logging.Logger] = None
                                 ) -> Result[PostCreateOutcome, GitPhantomError]:
    """Run ``commands`` in the named worktree, stopping at the first failure."""
    runner = PostCreateRunner(logger=logger)
    return runner.execute_commands(git_root, worktrees_directory, worktree_name, commands)


def run_post_create(git_root: str, worktrees_directory: str, worktree_name: str,
                    copy_files: Optional[List[str]] = None,
                    commands: Optional[List[str]] = None,
                    logger: Optional[logging.Logger] = None) -> Result[PostCreateResult, GitPhantomError]:
    runner = PostCreateRunner(logger=logger)
    return runner.run(git_root, worktrees_directory, worktree_name, copy_files, commands)
