"""Custom exceptions for git-phantom.

Every error carries a ``kind`` so callers can branch on ``error.kind``
instead of walking the class hierarchy.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Discriminator for every error git-phantom can return."""
    WORKTREE_NOT_FOUND = "worktree-not-found"
    WORKTREE_ALREADY_EXISTS = "worktree-already-exists"
    BRANCH_NOT_FOUND = "branch-not-found"
    WORKTREE = "worktree"
    UNCOMMITTED_CHANGES = "uncommitted-changes"
    GIT_OPERATION = "git-operation"
    GLOB_RESOLUTION = "glob-resolution"
    VALIDATION = "validation"
    CONFIG = "config"
    PROCESS_SPAWN = "process-spawn"
    PROCESS_SIGNAL = "process-signal"
    PROCESS_EXECUTION = "process-execution"
    NAME_GENERATION = "name-generation"


class ExitCode:
    """Process exit codes used by the CLI."""
    SUCCESS = 0
    GENERAL_ERROR = 1
    NOT_FOUND = 2
    VALIDATION_ERROR = 3


class GitPhantomError(Exception):
    """Base exception for all git-phantom errors."""

    kind: ErrorKind = ErrorKind.WORKTREE

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class WorktreeNotFoundError(GitPhantomError):
    """Raised when no worktree matches a name (or branch)."""

    kind = ErrorKind.WORKTREE_NOT_FOUND

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Worktree '{name}' not found")


class WorktreeAlreadyExistsError(GitPhantomError):
    """Raised when a worktree name or directory is already taken."""

    kind = ErrorKind.WORKTREE_ALREADY_EXISTS

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Worktree '{name}' already exists")


class BranchNotFoundError(GitPhantomError):
    """Raised when attaching to a branch that does not exist."""

    kind = ErrorKind.BRANCH_NOT_FOUND

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Branch '{branch}' not found")


class WorktreeError(GitPhantomError):
    """Generic lifecycle failure (uncommitted changes, hook failures, wrapped git errors)."""

    kind = ErrorKind.WORKTREE


class UncommittedChangesError(WorktreeError):
    """Raised when deleting a dirty worktree without force."""

    kind = ErrorKind.UNCOMMITTED_CHANGES

    def __init__(self, name: str, changed_files: int):
        self.name = name
        self.changed_files = changed_files
        super().__init__(
            f"Worktree '{name}' has uncommitted changes ({changed_files} files). "
            "Use --force to delete anyway."
        )


class PostCreateCommandError(WorktreeError):
    """A hook command could not be started or exited non-zero."""

    def __init__(self, message: str, command: str, exit_code: Optional[int] = None):
        self.command = command
        self.exit_code = exit_code
        super().__init__(message)


class GitOperationError(GitPhantomError):
    """Exception raised for errors in Git operations."""

    kind = ErrorKind.GIT_OPERATION

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.detail = message

        error_msg = f"Git operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ValidationError(GitPhantomError):
    """Raised when user input (worktree names, flags) is invalid."""

    kind = ErrorKind.VALIDATION


class GlobResolutionError(GitPhantomError):
    """Raised when a copy pattern cannot be expanded."""

    kind = ErrorKind.GLOB_RESOLUTION

    def __init__(self, pattern: str, message: str):
        self.pattern = pattern
        super().__init__(f"Failed to resolve pattern '{pattern}': {message}")


class ConfigValidationError(GitPhantomError):
    """Raised when phantom.config.json is malformed."""

    kind = ErrorKind.CONFIG

    def __init__(self, message: str):
        super().__init__(f"Invalid phantom.config.json: {message}")


class ProcessSpawnError(GitPhantomError):
    """The process could not be started at all."""

    kind = ErrorKind.PROCESS_SPAWN

    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(f"Error executing command '{command}': {message}")


class ProcessSignalError(GitPhantomError):
    """The process was terminated by a signal."""

    kind = ErrorKind.PROCESS_SIGNAL

    def __init__(self, signal_name: str):
        self.signal = signal_name
        super().__init__(f"Command terminated by signal: {signal_name}")


class ProcessExecutionError(GitPhantomError):
    """The process ran but exited non-zero."""

    kind = ErrorKind.PROCESS_EXECUTION

    def __init__(self, command: str, exit_code: int):
        self.command = command
        self.exit_code = exit_code
        super().__init__(f"Command '{command}' failed with exit code {exit_code}")


class NameGenerationError(GitPhantomError):
    """Raised when no unique worktree name could be generated."""

    kind = ErrorKind.NAME_GENERATION


_EXIT_CODES = {
    ErrorKind.WORKTREE_NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorKind.BRANCH_NOT_FOUND: ExitCode.NOT_FOUND,
    ErrorKind.VALIDATION: ExitCode.VALIDATION_ERROR,
    ErrorKind.WORKTREE_ALREADY_EXISTS: ExitCode.VALIDATION_ERROR,
    ErrorKind.CONFIG: ExitCode.VALIDATION_ERROR,
    ErrorKind.UNCOMMITTED_CHANGES: ExitCode.VALIDATION_ERROR,
}


def exit_code_for(error: GitPhantomError) -> int:
    """Map an error to the process exit code the CLI should use."""
    return _EXIT_CODES.get(error.kind, ExitCode.GENERAL_ERROR)
