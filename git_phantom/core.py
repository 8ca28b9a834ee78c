"""Core functionality for git-phantom: the worktree lifecycle."""

import logging
import os
from typing import List, Optional

from git_phantom.constants import DEFAULT_BASE
from git_phantom.exceptions import (
    BranchNotFoundError,
    GitOperationError,
    GitPhantomError,
    UncommittedChangesError,
    WorktreeAlreadyExistsError,
    WorktreeError,
    WorktreeNotFoundError,
)
from git_phantom.models.provisioning import ProvisioningOutcome
from git_phantom.models.result import Err, Ok, Result
from git_phantom.models.worktree import (
    CreateOptions,
    CreateWorktreeSuccess,
    DeleteOptions,
    DeleteWorktreeSuccess,
    ListWorktreesSuccess,
    WorktreeRecord,
)
from git_phantom.paths import get_worktree_path_from_directory
from git_phantom.services.git import GitOperations, WorktreeStateReader
from git_phantom.services.name_generator import NameGenerator
from git_phantom.services.post_create import SOURCE_CONFIG, SOURCE_OPTION, PostCreateRunner
from git_phantom.services.validation_service import validate_worktree_name
from git_phantom.logging_config import get_logger


class WorktreeManager:
    """Creates, attaches, deletes and looks up phantom worktrees.

    All repository mutation goes through git; this class only owns naming,
    discovery and provisioning. Nothing is cached between calls.
    """

    def __init__(self, git_root: str, worktrees_directory: str,
                 logger: Optional[logging.Logger] = None,
                 git_ops: Optional[GitOperations] = None,
                 post_create_runner: Optional[PostCreateRunner] = None):
        """Initialize the manager.

        Args:
            git_root: Path to the main repository checkout
            worktrees_directory: Directory phantom worktrees live in
            logger: Receives progress messages and warnings
            git_ops: Git executor (injectable for tests)
            post_create_runner: Hook runner (injectable for tests)
        """
        self.git_root = git_root
        self.worktrees_directory = worktrees_directory
        self.logger = logger or get_logger(__name__)
        self.git_ops = git_ops or GitOperations(git_root)
        self.state_reader = WorktreeStateReader(self.git_ops, worktrees_directory, logger=self.logger)
        self.post_create_runner = post_create_runner or PostCreateRunner(logger=self.logger)

    def _worktree_path(self, name: str) -> str:
        return get_worktree_path_from_directory(self.worktrees_directory, name)

    # -- lookups ---------------------------------------------------------

    def list_worktrees(self, exclude_default: bool = False) -> Result[ListWorktreesSuccess, WorktreeError]:
        return self.state_reader.list(exclude_default=exclude_default)

    def validate_worktree_exists(self, name: str) -> Result[str, WorktreeNotFoundError]:
        """Return the path of the worktree named ``name``."""
        worktree = self.state_reader.find_by_name(name)
        if worktree is None:
            return Err(WorktreeNotFoundError(name))
        return Ok(worktree.path)

    def validate_worktree_does_not_exist(self, name: str) -> Result[str, WorktreeAlreadyExistsError]:
        """Return the path a new worktree named ``name`` would get."""
        if self.state_reader.find_by_name(name) is not None:
            return Err(WorktreeAlreadyExistsError(name))
        return Ok(self._worktree_path(name))

    def resolve_worktree_name_or_branch(self, name_or_branch: str) -> Result[WorktreeRecord, WorktreeNotFoundError]:
        """Find a worktree by name first, then by checked-out branch."""
        listing = self.list_worktrees()
        if listing.is_err:
            self.logger.debug(f"Listing failed while resolving '{name_or_branch}': {listing.error}")
            return Err(WorktreeNotFoundError(name_or_branch))

        worktrees = listing.value.worktrees
        worktree = next((wt for wt in worktrees if wt.name == name_or_branch), None)
        if worktree is None:
            worktree = next((wt for wt in worktrees if wt.branch == name_or_branch), None)
        if worktree is None:
            return Err(WorktreeNotFoundError(name_or_branch))
        return Ok(worktree)

    def where_worktree(self, name: str) -> Result[str, WorktreeNotFoundError]:
        return self.validate_worktree_exists(name)

    def generate_unique_name(self) -> Result[str, GitPhantomError]:
        generator = NameGenerator(self.git_ops, self.worktrees_directory, logger=self.logger)
        return generator.generate()

    # -- create / attach -------------------------------------------------

    def _provision(self, name: str, option_copy_files: Optional[List[str]],
                   config_copy_files: Optional[List[str]]) -> ProvisioningOutcome:
        copy_lists = []
        if option_copy_files:
            copy_lists.append((SOURCE_OPTION, option_copy_files))
        if config_copy_files:
            copy_lists.append((SOURCE_CONFIG, config_copy_files))
        return self.post_create_runner.copy_into_worktree(
            self.git_root, self.worktrees_directory, name, copy_lists
        )

    def _run_commands(self, name: str, commands: Optional[List[str]]) -> Result[List[str], GitPhantomError]:
        if not commands:
            return Ok([])
        self.logger.info("Running post-create commands...")
        result = self.post_create_runner.execute_commands(
            self.git_root, self.worktrees_directory, name, commands
        )
        if result.is_err:
            return Err(result.error)
        return Ok(result.value.executed_commands)

    def create_worktree(self, name: str, options: Optional[CreateOptions] = None,
                        post_create_copy_files: Optional[List[str]] = None,
                        post_create_commands: Optional[List[str]] = None
                        ) -> Result[CreateWorktreeSuccess, GitPhantomError]:
        """Create a worktree on a new branch and run the post-create hook.

        Copy failures are attached to the success result as warnings; a
        failing post-create command fails the whole call.
        """
        options = options or CreateOptions()

        validation = validate_worktree_name(name)
        if validation.is_err:
            return Err(validation.error)

        branch = options.branch or name
        base = options.base or DEFAULT_BASE
        worktree_path = self._worktree_path(name)

        os.makedirs(self.worktrees_directory, exist_ok=True)

        existing = self.validate_worktree_does_not_exist(name)
        if existing.is_err:
            return Err(existing.error)

        try:
            self.git_ops.add_worktree(worktree_path, branch, base)
        except GitOperationError as e:
            return Err(WorktreeError(f"worktree add failed: {e.detail or e}"))
        self.logger.debug(f"Created worktree '{name}' on branch '{branch}' from '{base}'")

        success = CreateWorktreeSuccess(
            message=f"Created worktree '{name}' at {worktree_path}",
            path=worktree_path,
        )

        if options.copy_files or post_create_copy_files:
            provisioning = self._provision(name, options.copy_files, post_create_copy_files)
            success.copied_files = provisioning.copied_files
            success.skipped_files = provisioning.skipped_files
            success.copy_errors = provisioning.copy_errors

        commands = self._run_commands(name, post_create_commands)
        if commands.is_err:
            return Err(commands.error)
        success.executed_commands = commands.value

        return Ok(success)

    def attach_worktree(self, name: str,
                        post_create_copy_files: Optional[List[str]] = None,
                        post_create_commands: Optional[List[str]] = None
                        ) -> Result[CreateWorktreeSuccess, GitPhantomError]:
        """Create a worktree for an existing branch named ``name``."""
        validation = validate_worktree_name(name)
        if validation.is_err:
            return Err(validation.error)

        worktree_path = self._worktree_path(name)
        if os.path.exists(worktree_path):
            return Err(WorktreeAlreadyExistsError(name))

        branch_check = self.git_ops.branch_exists(name)
        if branch_check.is_err:
            return Err(branch_check.error)
        if not branch_check.value:
            return Err(BranchNotFoundError(name))

        try:
            self.git_ops.attach_worktree(worktree_path, name)
        except GitOperationError as e:
            return Err(e)

        success = CreateWorktreeSuccess(
            message=f"Attached worktree '{name}' at {worktree_path}",
            path=worktree_path,
        )

        if post_create_copy_files:
            provisioning = self._provision(name, None, post_create_copy_files)
            success.copied_files = provisioning.copied_files
            success.skipped_files = provisioning.skipped_files
            success.copy_errors = provisioning.copy_errors

        commands = self._run_commands(name, post_create_commands)
        if commands.is_err:
            return Err(commands.error)
        success.executed_commands = commands.value

        return Ok(success)

    # -- delete ----------------------------------------------------------

    def _remove_worktree(self, worktree_path: str) -> None:
        """Remove a worktree, retrying with --force if the plain removal fails."""
        try:
            self.git_ops.remove_worktree(worktree_path)
            return
        except GitOperationError as e:
            self.logger.debug(f"Plain removal of {worktree_path} failed, retrying with --force: {e}")

        try:
            self.git_ops.remove_worktree(worktree_path, force=True)
        except GitOperationError as e:
            raise GitOperationError("worktree remove", f"Failed to remove worktree: {e.detail}") from e

    def delete_worktree(self, name: str, options: Optional[DeleteOptions] = None,
                        pre_delete_commands: Optional[List[str]] = None
                        ) -> Result[DeleteWorktreeSuccess, GitPhantomError]:
        """Delete a worktree and, optionally, its branch.

        Either the worktree is removed or nothing is: every refusal happens
        before git is asked to remove anything. Branch deletion is best effort.
        """
        options = options or DeleteOptions()

        worktree = self.state_reader.find_by_name(name)
        if worktree is None:
            return Err(WorktreeNotFoundError(name))

        status = self.state_reader.get_worktree_status(worktree.path)
        if status.has_uncommitted_changes and not options.force:
            return Err(UncommittedChangesError(name, status.changed_files))

        if pre_delete_commands:
            self.logger.info("Running pre-delete commands...")
            hook = self.post_create_runner.execute_commands(
                self.git_root, self.worktrees_directory, name, pre_delete_commands, hook="pre-delete"
            )
            if hook.is_err:
                return Err(hook.error)

        try:
            self._remove_worktree(worktree.path)
        except GitOperationError as e:
            return Err(e)

        branch_name = worktree.branch
        branch_deleted = False
        if options.delete_branch:
            try:
                self.git_ops.delete_branch(branch_name)
                branch_deleted = True
                message = f"Deleted worktree '{name}' and its branch '{branch_name}'"
            except GitOperationError as e:
                self.logger.debug(f"Could not delete branch {branch_name}: {e}")
                message = (
                    f"Deleted worktree '{name}'\n"
                    f"Note: Branch '{branch_name}' could not be deleted: {e.detail or e}"
                )
        else:
            message = f"Deleted worktree '{name}'"

        if status.has_uncommitted_changes:
            message = (
                f"Warning: Worktree '{name}' had uncommitted changes "
                f"({status.changed_files} files)\n{message}"
            )

        return Ok(DeleteWorktreeSuccess(
            message=message,
            has_uncommitted_changes=status.has_uncommitted_changes,
            changed_files=status.changed_files if status.has_uncommitted_changes else None,
            branch_deleted=branch_deleted,
        ))

    def delete_worktrees(self, names: List[str], options: Optional[DeleteOptions] = None,
                         pre_delete_commands: Optional[List[str]] = None
                         ) -> List[Result[DeleteWorktreeSuccess, GitPhantomError]]:
        """Delete several worktrees in order, stopping at the first failure.

        Earlier deletions stay committed; later names are not attempted.
        """
        results: List[Result[DeleteWorktreeSuccess, GitPhantomError]] = []
        for name in names:
            result = self.delete_worktree(name, options, pre_delete_commands)
            results.append(result)
            if result.is_err:
                break
        return results


# Functional entry points for collaborators (CLI handlers, integrations)


def create_worktree(git_root: str, worktrees_directory: str, name: str,
                    options: Optional[CreateOptions] = None,
                    post_create_copy_files: Optional[List[str]] = None,
                    post_create_commands: Optional[List[str]] = None,
                    logger: Optional[logging.Logger] = None
                    ) -> Result[CreateWorktreeSuccess, GitPhantomError]:
    manager = WorktreeManager(git_root, worktrees_directory, logger=logger)
    return manager.create_worktree(name, options, post_create_copy_files, post_create_commands)


def attach_worktree_core(git_root: str, worktrees_directory: str, name: str,
                         post_create_copy_files: Optional[List[str]] = None,
                         post_create_commands: Optional[List[str]] = None,
                         logger: Optional[logging.Logger] = None
                         ) -> Result[CreateWorktreeSuccess, GitPhantomError]:
    manager = WorktreeManager(git_root, worktrees_directory, logger=logger)
    return manager.attach_worktree(name, post_create_copy_files, post_create_commands)


def delete_worktree(git_root: str, worktrees_directory: str, name: str,
                    options: Optional[DeleteOptions] = None,
                    pre_delete_commands: Optional[List[str]] = None,
                    logger: Optional[logging.Logger] = None
                    ) -> Result[DeleteWorktreeSuccess, GitPhantomError]:
    manager = WorktreeManager(git_root, worktrees_directory, logger=logger)
    return manager.delete_worktree(name, options, pre_delete_commands)


def list_worktrees(git_root: str, worktrees_directory: str, exclude_default: bool = False,
                   logger: Optional[logging.Logger] = None
                   ) -> Result[ListWorktreesSuccess, WorktreeError]:
    manager = WorktreeManager(git_root, worktrees_directory, logger=logger)
    return manager.list_worktrees(exclude_default=exclude_default)


def resolve_worktree_name_or_branch(git_root: str, worktrees_directory: str, name_or_branch: str,
                                    logger: Optional[logging.Logger] = None
                                    ) -> Result[WorktreeRecord, WorktreeNotFoundError]:
    manager = WorktreeManager(git_root, worktrees_directory, logger=logger)
    return manager.resolve_worktree_name_or_branch(name_or_branch)


def where_worktree(git_root: str, worktrees_directory: str, name: str,
                   logger: Optional[logging.Logger] = None) -> Result[str, WorktreeNotFoundError]:
    manager = WorktreeManager(git_root, worktrees_directory, logger=logger)
    return manager.where_worktree(name)
