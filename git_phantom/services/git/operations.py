"""Git command executor built on GitPython."""

import os
from typing import Optional

import git

from git_phantom.exceptions import GitOperationError
from git_phantom.models.result import Err, Ok, Result
from git_phantom.logging_config import get_logger

logger = get_logger(__name__)


def describe_git_error(error: git.exc.GitCommandError) -> str:
    """Return git's own error text, unwrapped from GitPython's formatting.

    GitPython stores stderr as ``"\\n  stderr: '<text>'"``; the wrapper is removed.
    """
    stderr = (error.stderr if hasattr(error, "stderr") else "") or ""
    stderr = stderr.strip()
    if stderr.startswith("stderr: '") and stderr.endswith("'"):
        stderr = stderr[len("stderr: '"):-1].strip()
    if stderr:
        return stderr

    status = error.status if hasattr(error, "status") else "unknown"
    return f"exit code {status}"


class GitOperations:
    """Runs the git commands the worktree lifecycle needs.

    Every failing git invocation surfaces as GitOperationError with git's
    stderr preserved verbatim.
    """

    def __init__(self, git_root: str):
        """Initialize the executor.

        Args:
            git_root: Path to the main repository working tree
        """
        self.git_root = git_root

    def _get_repo(self):
        """Get a fresh git.Repo instance for the main repository.

        GitPython repos are lightweight - they don't clone, just open the existing repo.

        Returns:
            git.Repo: A fresh repository instance
        """
        return git.Repo(self.git_root)

    def _run(self, operation: str, *args: str, cwd: Optional[str] = None) -> str:
        """Run ``git <args>`` in the main repository (or in ``cwd``)."""
        try:
            if cwd is None:
                with self._get_repo() as repo:
                    return repo.git.execute(["git", *args])
            return git.Git(cwd).execute(["git", *args])
        except git.exc.GitCommandError as e:
            message = describe_git_error(e)
            logger.debug(f"git {' '.join(args)} failed: {message}")
            raise GitOperationError(operation, message) from e
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise GitOperationError(operation, f"Not a git repository: {e}") from e

    def list_worktrees_porcelain(self) -> str:
        """Return raw ``git worktree list --porcelain`` output."""
        return self._run("worktree list", "worktree", "list", "--porcelain")

    def add_worktree(self, path: str, branch: str, base: str) -> None:
        """Create a worktree at ``path`` on a new branch started from ``base``."""
        self._run("worktree add", "worktree", "add", "-b", branch, path, base)
        logger.debug(f"Added worktree at {path} on new branch {branch} from {base}")

    def attach_worktree(self, path: str, branch: str) -> None:
        """Create a worktree at ``path`` checking out an existing branch."""
        self._run("worktree add", "worktree", "add", path, branch)
        logger.debug(f"Attached worktree at {path} to branch {branch}")

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove the worktree at ``path``."""
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(path)
        self._run("worktree remove", *args)
        logger.info(f"Removed worktree at {path}")

    def delete_branch(self, branch: str) -> None:
        """Force-delete a local branch."""
        self._run("branch delete", "branch", "-D", branch)
        logger.debug(f"Deleted branch {branch}")

    def branch_exists(self, branch: str) -> Result[bool, GitOperationError]:
        """Check whether a local branch exists."""
        try:
            output = self._run("branch exists", "branch", "--list", branch)
        except GitOperationError as e:
            return Err(GitOperationError("branch exists", f"Failed to check branch existence: {e.detail}"))
        return Ok(output.strip() != "")

    def status_porcelain(self, worktree_path: str) -> str:
        """Return ``git status --porcelain`` output for a worktree directory."""
        if not os.path.isdir(worktree_path):
            raise GitOperationError("status", f"Worktree path {worktree_path} does not exist")
        return self._run("status", "status", "--porcelain", cwd=worktree_path)

    @staticmethod
    def get_git_root(path: Optional[str] = None) -> str:
        """Find the main repository root for ``path``.

        Works from inside a secondary worktree too: the common git dir always
        belongs to the main checkout.
        """
        start = path or os.getcwd()
        try:
            repo = git.Repo(start, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise GitOperationError("find repository", f"Not a git repository: {start}") from e

        try:
            common_dir = os.path.abspath(repo.common_dir)
            if os.path.basename(common_dir) == ".git":
                return os.path.dirname(common_dir)
            if repo.working_tree_dir is None:
                raise GitOperationError("find repository", "Bare repositories are not supported")
            return str(repo.working_tree_dir)
        finally:
            repo.close()
