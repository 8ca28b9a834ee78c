"""Configuration handling for git-phantom"""

import json
import os
from dataclasses import dataclass, field
from typing import List, Optional

from git_phantom.constants import CONFIG_FILENAME
from git_phantom.exceptions import ConfigValidationError
from git_phantom.models.result import Err, Ok, Result
from git_phantom.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class PhantomConfig:
    """Repository configuration read from phantom.config.json, with validation."""

    # postCreate hook
    post_create_copy_files: List[str] = field(default_factory=list)
    post_create_commands: List[str] = field(default_factory=list)

    # preDelete hook
    pre_delete_commands: List[str] = field(default_factory=list)

    # Custom root for phantom worktrees (absolute, or relative to the git root)
    worktrees_directory: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_string_list("postCreate.copyFiles", self.post_create_copy_files)
        self._validate_string_list("postCreate.commands", self.post_create_commands)
        self._validate_string_list("preDelete.commands", self.pre_delete_commands)
        self._validate_worktrees_directory()

    @staticmethod
    def _validate_string_list(key: str, value) -> None:
        """Validate value is a list of strings."""
        if not isinstance(value, list):
            raise ConfigValidationError(f"{key}: Expected array, received {type(value).__name__}")
        for index, item in enumerate(value):
            if not isinstance(item, str):
                raise ConfigValidationError(
                    f"{key}.{index}: Expected string, received {type(item).__name__}"
                )

    def _validate_worktrees_directory(self):
        """Validate worktrees_directory is a non-empty string when set."""
        if self.worktrees_directory is None:
            return
        if not isinstance(self.worktrees_directory, str):
            raise ConfigValidationError(
                f"worktreesDirectory: Expected string, received {type(self.worktrees_directory).__name__}"
            )
        if not self.worktrees_directory.strip():
            raise ConfigValidationError("worktreesDirectory: cannot be empty")

    def to_dict(self) -> dict:
        """Convert config back to the phantom.config.json shape."""
        data: dict = {
            "postCreate": {
                "copyFiles": list(self.post_create_copy_files),
                "commands": list(self.post_create_commands),
            },
            "preDelete": {
                "commands": list(self.pre_delete_commands),
            },
        }
        if self.worktrees_directory is not None:
            data["worktreesDirectory"] = self.worktrees_directory
        return data

    @classmethod
    def from_dict(cls, config_dict) -> "PhantomConfig":
        """Create PhantomConfig from the parsed JSON document.

        Unknown keys are ignored so newer config files keep loading.
        """
        if not isinstance(config_dict, dict):
            raise ConfigValidationError(
                f"Expected object, received {type(config_dict).__name__}"
            )

        post_create = config_dict.get("postCreate") or {}
        pre_delete = config_dict.get("preDelete") or {}
        if not isinstance(post_create, dict):
            raise ConfigValidationError("postCreate: Expected object")
        if not isinstance(pre_delete, dict):
            raise ConfigValidationError("preDelete: Expected object")

        return cls(
            post_create_copy_files=post_create.get("copyFiles", []),
            post_create_commands=post_create.get("commands", []),
            pre_delete_commands=pre_delete.get("commands", []),
            worktrees_directory=config_dict.get("worktreesDirectory"),
        )


def load_config(git_root: str) -> Result[Optional[PhantomConfig], ConfigValidationError]:
    """Load phantom.config.json from the repository root.

    A missing file is not an error: it means there is nothing to provision.
    """
    config_path = os.path.join(git_root, CONFIG_FILENAME)
    if not os.path.exists(config_path):
        logger.debug(f"No {CONFIG_FILENAME} at {git_root}")
        return Ok(None)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        return Err(ConfigValidationError(f"Invalid JSON: {e}"))
    except OSError as e:
        return Err(ConfigValidationError(f"Could not read file: {e}"))

    try:
        config = PhantomConfig.from_dict(raw)
    except ConfigValidationError as e:
        return Err(e)

    logger.debug(f"Loaded config from {config_path}")
    return Ok(config)
