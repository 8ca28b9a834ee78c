"""Pytest fixtures for git-phantom tests"""
import os
import tempfile
from pathlib import Path
from unittest.mock import Mock
import pytest
import git

from git_phantom.models.result import Ok
from git_phantom.services.git import GitOperations


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve symlinked temp roots (macOS /var -> /private/var) so paths compare equal
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def git_root(git_repo):
    """Path of the main checkout as a string."""
    return str(git_repo.working_dir)


@pytest.fixture
def worktrees_dir(git_root):
    """Default phantom worktrees directory for the test repository."""
    return os.path.join(git_root, ".git", "phantom", "worktrees")


@pytest.fixture
def mock_git_ops():
    """Create a mock GitOperations with no branches and no worktrees."""
    git_ops = Mock(spec=GitOperations)
    git_ops.git_root = "/fake/repo"
    git_ops.branch_exists = Mock(return_value=Ok(False))
    git_ops.list_worktrees_porcelain = Mock(
        return_value="worktree /fake/repo\nHEAD abc1234def5678\nbranch refs/heads/main\n"
    )
    git_ops.status_porcelain = Mock(return_value="")
    return git_ops


@pytest.fixture
def fake_spawner():
    """A spawner that records commands and fails the ones named 'fail'."""
    from git_phantom.exceptions import ProcessExecutionError
    from git_phantom.models.result import Err

    calls = []

    def spawner(command, cwd):
        calls.append((command, cwd))
        if command[-1] == "fail":
            return Err(ProcessExecutionError(command[0], 1))
        return Ok(0)

    spawner.calls = calls
    return spawner
