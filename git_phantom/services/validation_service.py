"""Worktree name validation."""

import re

from git_phantom.exceptions import ValidationError
from git_phantom.models.result import Err, Ok, Result

# Only allow alphanumeric, hyphen, underscore, dot, and slash
VALID_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\-_./]+$")


def validate_worktree_name(name: str) -> Result[None, ValidationError]:
    """Check a worktree name before anything touches git or the filesystem.

    Names become directories under the worktrees root, so anything that could
    escape it (``..``, absolute paths, ``.`` segments) is rejected.
    """
    if not name or not name.strip():
        return Err(ValidationError("Phantom name cannot be empty"))

    if not VALID_NAME_PATTERN.match(name):
        return Err(ValidationError(
            "Phantom name can only contain letters, numbers, hyphens, underscores, dots, and slashes"
        ))

    if ".." in name:
        return Err(ValidationError("Phantom name cannot contain consecutive dots"))

    if any(segment in ("", ".") for segment in name.split("/")):
        return Err(ValidationError("Phantom name cannot contain empty or '.' path segments"))

    return Ok(None)
