"""Tests for the worktree lifecycle"""
import os
from unittest.mock import Mock

from git_phantom.core import (
    WorktreeManager,
    attach_worktree_core,
    create_worktree,
    delete_worktree,
    list_worktrees,
    resolve_worktree_name_or_branch,
    where_worktree,
)
from git_phantom.exceptions import ErrorKind, ExitCode, GitOperationError, exit_code_for
from git_phantom.models.result import Err
from git_phantom.models.worktree import CreateOptions, DeleteOptions


class TestCreateWorktree:
    """Test creating worktrees on new branches."""

    def test_create_success(self, git_repo, git_root, worktrees_dir):
        result = create_worktree(git_root, worktrees_dir, "feature", CreateOptions())

        expected_path = os.path.join(worktrees_dir, "feature")
        assert result.is_ok
        assert result.value.message == f"Created worktree 'feature' at {expected_path}"
        assert result.value.path == expected_path
        assert os.path.isdir(expected_path)
        assert "feature" in [h.name for h in git_repo.heads]

    def test_create_passes_branch_and_base_defaults(self, mock_git_ops, temp_dir):
        """Branch defaults to the name and base to HEAD."""
        worktrees_dir = str(temp_dir / "worktrees")
        manager = WorktreeManager("/fake/repo", worktrees_dir, git_ops=mock_git_ops)

        result = manager.create_worktree("feature")

        assert result.is_ok
        mock_git_ops.add_worktree.assert_called_once_with(
            os.path.join(worktrees_dir, "feature"), "feature", "HEAD"
        )
        assert os.path.isdir(worktrees_dir)

    def test_create_with_custom_branch_and_base(self, mock_git_ops, temp_dir):
        worktrees_dir = str(temp_dir / "worktrees")
        manager = WorktreeManager("/fake/repo", worktrees_dir, git_ops=mock_git_ops)

        manager.create_worktree("wt", CreateOptions(branch="feature/x", base="main"))

        mock_git_ops.add_worktree.assert_called_once_with(os.path.join(worktrees_dir, "wt"), "feature/x", "main")

    def test_invalid_name_never_reaches_git(self, mock_git_ops, temp_dir):
        manager = WorktreeManager("/fake/repo", str(temp_dir / "worktrees"), git_ops=mock_git_ops)

        result = manager.create_worktree("../escape")

        assert result.is_err
        assert result.error.kind is ErrorKind.VALIDATION
        assert exit_code_for(result.error) == ExitCode.VALIDATION_ERROR
        mock_git_ops.add_worktree.assert_not_called()

    def test_git_failure_is_wrapped(self, mock_git_ops, temp_dir):
        mock_git_ops.add_worktree.side_effect = GitOperationError("worktree add", "fatal: invalid reference: nope")
        manager = WorktreeManager("/fake/repo", str(temp_dir / "worktrees"), git_ops=mock_git_ops)

        result = manager.create_worktree("feature", CreateOptions(base="nope"))

        assert result.is_err
        assert result.error.kind is ErrorKind.WORKTREE
        assert result.error.message == "worktree add failed: fatal: invalid reference: nope"

    def test_bad_base_real_repo(self, git_root, worktrees_dir):
        result = create_worktree(git_root, worktrees_dir, "feature", CreateOptions(base="does-not-exist"))

        assert result.is_err
        assert result.error.message.startswith("worktree add failed:")

    def test_already_exists(self, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())

        result = create_worktree(git_root, worktrees_dir, "feature", CreateOptions(branch="other"))

        assert result.is_err
        assert result.error.kind is ErrorKind.WORKTREE_ALREADY_EXISTS
        assert result.error.message == "Worktree 'feature' already exists"

    def test_copy_files_from_option_and_config(self, git_root, worktrees_dir):
        with open(os.path.join(git_root, ".env"), "w") as f:
            f.write("SECRET=1\n")

        result = create_worktree(
            git_root, worktrees_dir, "feature",
            CreateOptions(copy_files=[".env"]),
            post_create_copy_files=["missing.local"],
        )

        assert result.is_ok
        assert result.value.copied_files == [".env"]
        assert result.value.skipped_files == ["missing.local"]
        assert result.value.copy_errors == []
        assert result.value.copy_error is None
        with open(os.path.join(worktrees_dir, "feature", ".env")) as f:
            assert f.read() == "SECRET=1\n"

    def test_post_create_commands(self, git_root, worktrees_dir):
        result = create_worktree(
            git_root, worktrees_dir, "feature", CreateOptions(),
            post_create_commands=["touch setup-done"],
        )

        assert result.is_ok
        assert result.value.executed_commands == ["touch setup-done"]
        assert os.path.exists(os.path.join(worktrees_dir, "feature", "setup-done"))

    def test_post_create_failure_keeps_worktree(self, git_root, worktrees_dir):
        """A failing command fails the call but the worktree stays."""
        result = create_worktree(
            git_root, worktrees_dir, "feature", CreateOptions(),
            post_create_commands=["exit 2", "touch never"],
        )

        assert result.is_err
        assert result.error.message == "Post-create command failed with exit code 2: exit 2"
        assert os.path.isdir(os.path.join(worktrees_dir, "feature"))
        assert not os.path.exists(os.path.join(worktrees_dir, "feature", "never"))


class TestAttachWorktree:
    """Test attaching worktrees to existing branches."""

    def test_attach_success(self, git_repo, git_root, worktrees_dir):
        git_repo.git.branch("existing")

        result = attach_worktree_core(git_root, worktrees_dir, "existing")

        expected_path = os.path.join(worktrees_dir, "existing")
        assert result.is_ok
        assert result.value.message == f"Attached worktree 'existing' at {expected_path}"
        assert os.path.isdir(expected_path)

    def test_attach_missing_branch(self, git_root, worktrees_dir):
        result = attach_worktree_core(git_root, worktrees_dir, "ghost")

        assert result.is_err
        assert result.error.kind is ErrorKind.BRANCH_NOT_FOUND
        assert exit_code_for(result.error) == ExitCode.NOT_FOUND

    def test_attach_existing_directory(self, git_repo, git_root, worktrees_dir):
        git_repo.git.branch("existing")
        os.makedirs(os.path.join(worktrees_dir, "existing"))

        result = attach_worktree_core(git_root, worktrees_dir, "existing")

        assert result.is_err
        assert result.error.kind is ErrorKind.WORKTREE_ALREADY_EXISTS

    def test_attach_branch_check_failure(self, mock_git_ops, temp_dir):
        failure = GitOperationError("branch exists", "Failed to check branch existence: boom")
        mock_git_ops.branch_exists = Mock(return_value=Err(failure))
        manager = WorktreeManager("/fake/repo", str(temp_dir), git_ops=mock_git_ops)

        result = manager.attach_worktree("feature")

        assert result.is_err
        assert result.error is failure
        mock_git_ops.attach_worktree.assert_not_called()

    def test_attach_runs_post_create(self, git_repo, git_root, worktrees_dir):
        git_repo.git.branch("existing")

        result = attach_worktree_core(
            git_root, worktrees_dir, "existing", post_create_commands=["touch ready"]
        )

        assert result.is_ok
        assert os.path.exists(os.path.join(worktrees_dir, "existing", "ready"))


class TestDeleteWorktree:
    """Test deleting worktrees."""

    def _dirty(self, worktrees_dir, name="feature"):
        for file_name in ["a.txt", "b.txt"]:
            with open(os.path.join(worktrees_dir, name, file_name), "w") as f:
                f.write("change\n")

    def test_delete_with_branch(self, git_repo, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())

        result = delete_worktree(git_root, worktrees_dir, "feature")

        assert result.is_ok
        assert result.value.message == "Deleted worktree 'feature' and its branch 'feature'"
        assert result.value.branch_deleted
        assert not os.path.exists(os.path.join(worktrees_dir, "feature"))
        assert "feature" not in [h.name for h in git_repo.heads]

    def test_delete_uses_worktree_branch(self, git_repo, git_root, worktrees_dir):
        """The branch deleted is the one checked out, not the worktree name."""
        create_worktree(git_root, worktrees_dir, "wt", CreateOptions(branch="feature/x"))

        result = delete_worktree(git_root, worktrees_dir, "wt")

        assert result.value.message == "Deleted worktree 'wt' and its branch 'feature/x'"
        assert "feature/x" not in [h.name for h in git_repo.heads]

    def test_keep_branch(self, git_repo, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())

        result = delete_worktree(git_root, worktrees_dir, "feature", DeleteOptions(delete_branch=False))

        assert result.value.message == "Deleted worktree 'feature'"
        assert "feature" in [h.name for h in git_repo.heads]

    def test_not_found(self, git_root, worktrees_dir):
        result = delete_worktree(git_root, worktrees_dir, "ghost")

        assert result.is_err
        assert result.error.message == "Worktree 'ghost' not found"
        assert exit_code_for(result.error) == ExitCode.NOT_FOUND

    def test_dirty_worktree_is_refused(self, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())
        self._dirty(worktrees_dir)

        result = delete_worktree(git_root, worktrees_dir, "feature")

        assert result.is_err
        assert result.error.message == (
            "Worktree 'feature' has uncommitted changes (2 files). Use --force to delete anyway."
        )
        assert result.error.kind is ErrorKind.UNCOMMITTED_CHANGES
        assert result.error.changed_files == 2
        assert exit_code_for(result.error) == ExitCode.VALIDATION_ERROR
        assert os.path.isdir(os.path.join(worktrees_dir, "feature"))

    def test_force_deletes_dirty_worktree(self, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())
        self._dirty(worktrees_dir)

        result = delete_worktree(git_root, worktrees_dir, "feature", DeleteOptions(force=True))

        assert result.is_ok
        assert result.value.message.startswith(
            "Warning: Worktree 'feature' had uncommitted changes (2 files)\n"
        )
        assert result.value.has_uncommitted_changes
        assert result.value.changed_files == 2
        assert not os.path.exists(os.path.join(worktrees_dir, "feature"))

    def test_branch_deletion_failure_is_a_note(self, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())
        manager = WorktreeManager(git_root, worktrees_dir)
        manager.git_ops.delete_branch = Mock(
            side_effect=GitOperationError("branch delete", "error: branch 'feature' not found")
        )

        result = manager.delete_worktree("feature")

        assert result.is_ok
        assert not result.value.branch_deleted
        assert result.value.message == (
            "Deleted worktree 'feature'\n"
            "Note: Branch 'feature' could not be deleted: error: branch 'feature' not found"
        )

    def test_removal_retries_with_force(self, mock_git_ops, temp_dir):
        worktrees_dir = str(temp_dir / "worktrees")
        mock_git_ops.list_worktrees_porcelain.return_value = (
            f"worktree {worktrees_dir}/feature\nHEAD 1234567890\nbranch refs/heads/feature\n"
        )
        mock_git_ops.remove_worktree.side_effect = [GitOperationError("worktree remove", "dirty"), None]
        manager = WorktreeManager("/fake/repo", worktrees_dir, git_ops=mock_git_ops)

        result = manager.delete_worktree("feature")

        assert result.is_ok
        assert mock_git_ops.remove_worktree.call_args_list[1].kwargs == {"force": True}

    def test_removal_failure(self, mock_git_ops, temp_dir):
        worktrees_dir = str(temp_dir / "worktrees")
        mock_git_ops.list_worktrees_porcelain.return_value = (
            f"worktree {worktrees_dir}/feature\nHEAD 1234567890\nbranch refs/heads/feature\n"
        )
        mock_git_ops.remove_worktree.side_effect = GitOperationError("worktree remove", "fatal: locked")
        manager = WorktreeManager("/fake/repo", worktrees_dir, git_ops=mock_git_ops)

        result = manager.delete_worktree("feature")

        assert result.is_err
        assert result.error.message == "Git operation 'worktree remove' failed: Failed to remove worktree: fatal: locked"
        assert mock_git_ops.remove_worktree.call_count == 2
        mock_git_ops.delete_branch.assert_not_called()

    def test_pre_delete_failure_aborts(self, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())

        result = delete_worktree(git_root, worktrees_dir, "feature", pre_delete_commands=["exit 1"])

        assert result.is_err
        assert result.error.message == "Pre-delete command failed with exit code 1: exit 1"
        assert os.path.isdir(os.path.join(worktrees_dir, "feature"))

    def test_pre_delete_runs_before_removal(self, git_root, worktrees_dir, temp_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())
        marker = temp_dir / "marker"

        result = delete_worktree(
            git_root, worktrees_dir, "feature", pre_delete_commands=[f"pwd > {marker}"]
        )

        assert result.is_ok
        assert marker.read_text().strip() == os.path.join(worktrees_dir, "feature")

    def test_batch_stops_at_first_failure(self, git_root, worktrees_dir):
        for name in ["a", "b"]:
            create_worktree(git_root, worktrees_dir, name, CreateOptions())
        manager = WorktreeManager(git_root, worktrees_dir)

        results = manager.delete_worktrees(["a", "ghost", "b"])

        assert len(results) == 2
        assert results[0].is_ok
        assert results[1].error.kind is ErrorKind.WORKTREE_NOT_FOUND
        assert os.path.isdir(os.path.join(worktrees_dir, "b"))


class TestLookups:
    """Test list, where and name-or-branch resolution."""

    def test_list_after_create(self, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())

        result = list_worktrees(git_root, worktrees_dir, exclude_default=True)

        assert [w.name for w in result.value.worktrees] == ["feature"]

    def test_where(self, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "feature", CreateOptions())

        result = where_worktree(git_root, worktrees_dir, "feature")

        assert result.is_ok
        assert os.path.realpath(result.value) == os.path.join(worktrees_dir, "feature")

    def test_where_not_found(self, git_root, worktrees_dir):
        result = where_worktree(git_root, worktrees_dir, "ghost")

        assert result.error.kind is ErrorKind.WORKTREE_NOT_FOUND

    def test_resolve_by_name_then_branch(self, git_root, worktrees_dir):
        create_worktree(git_root, worktrees_dir, "wt", CreateOptions(branch="feature/x"))

        by_name = resolve_worktree_name_or_branch(git_root, worktrees_dir, "wt")
        by_branch = resolve_worktree_name_or_branch(git_root, worktrees_dir, "feature/x")

        assert by_name.value.name == "wt"
        assert by_branch.value.name == "wt"

    def test_resolve_not_found(self, git_root, worktrees_dir):
        result = resolve_worktree_name_or_branch(git_root, worktrees_dir, "nothing")

        assert result.is_err
        assert result.error.message == "Worktree 'nothing' not found"
