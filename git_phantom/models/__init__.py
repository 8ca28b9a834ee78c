"""Data models for git-phantom."""

from .worktree import (
    WorktreeOrigin,
    WorktreeRecord,
    GitWorktreeEntry,
    ListWorktreesSuccess,
    CreateOptions,
    DeleteOptions,
    CreateWorktreeSuccess,
    DeleteWorktreeSuccess,
    WorktreeStatus,
)
from .provisioning import (
    ResolvedPattern,
    GlobResolutionResult,
    CopyFilesSuccess,
    ProvisioningOutcome,
    PostCreateOutcome,
    PostCreateResult,
)
from .result import Ok, Err, Result, is_ok, is_err

__all__ = [
    "WorktreeOrigin",
    "WorktreeRecord",
    "GitWorktreeEntry",
    "ListWorktreesSuccess",
    "CreateOptions",
    "DeleteOptions",
    "CreateWorktreeSuccess",
    "DeleteWorktreeSuccess",
    "WorktreeStatus",
    "ResolvedPattern",
    "GlobResolutionResult",
    "CopyFilesSuccess",
    "ProvisioningOutcome",
    "PostCreateOutcome",
    "PostCreateResult",
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
]
