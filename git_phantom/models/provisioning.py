"""Data models for the post-create hook (file copy and commands)."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ResolvedPattern:
    """Files one input pattern expanded to."""

    pattern: str
    resolved_files: List[str]


@dataclass
class GlobResolutionResult:
    """Deduplicated files across all patterns plus a per-pattern breakdown."""

    resolved_files: List[str] = field(default_factory=list)
    patterns: List[ResolvedPattern] = field(default_factory=list)


@dataclass
class CopyFilesSuccess:
    """Outcome of a single copy run."""

    copied_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)


@dataclass
class ProvisioningOutcome:
    """Copy results gathered across every file list handed to a hook."""

    copied_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)
    copy_errors: List[str] = field(default_factory=list)

    @property
    def copy_error(self) -> Optional[str]:
        return "; ".join(self.copy_errors) if self.copy_errors else None


@dataclass
class PostCreateOutcome:
    """Commands that ran to completion, in order."""

    executed_commands: List[str] = field(default_factory=list)


@dataclass
class PostCreateResult:
    """Combined result of the copy step and the command step."""

    executed_commands: List[str] = field(default_factory=list)
    provisioning: ProvisioningOutcome = field(default_factory=ProvisioningOutcome)
