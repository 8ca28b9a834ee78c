"""Services used by the worktree lifecycle."""

from .file_copier import FileCopier, copy_files
from .glob_resolver import GlobResolver, resolve_glob_patterns
from .name_generator import NameGenerator, generate_unique_name
from .post_create import PostCreateRunner, execute_post_create_commands, run_post_create
from .validation_service import validate_worktree_name

__all__ = [
    "FileCopier",
    "copy_files",
    "GlobResolver",
    "resolve_glob_patterns",
    "NameGenerator",
    "generate_unique_name",
    "PostCreateRunner",
    "execute_post_create_commands",
    "run_post_create",
    "validate_worktree_name",
]
