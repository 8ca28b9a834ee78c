"""Expansion of copy-file patterns into concrete relative file paths.

Rules on top of the stock glob module:

* A file that literally exists wins over glob interpretation, so
  ``file[1].txt`` is copied as-is.
* ``**/`` patterns walk the tree manually so dotfiles such as ``.env`` match,
  and never descend into ``.git`` (which holds the object store and the
  phantom worktrees themselves).
* ``{a,b}`` alternatives are expanded before globbing, which the stock module
  does not do.
"""

import glob
import logging
import os
import re
from typing import Dict, List, Optional

from git_phantom.constants import GIT_METADATA_DIR
from git_phantom.exceptions import GlobResolutionError
from git_phantom.models.provisioning import GlobResolutionResult, ResolvedPattern
from git_phantom.models.result import Err, Ok, Result
from git_phantom.logging_config import get_logger

GLOB_METACHARACTERS = re.compile(r"[*?\[\]{}]")
RECURSIVE_MARKER = "**/"


def is_glob_pattern(pattern: str) -> bool:
    """Check if a string contains glob pattern characters."""
    return bool(GLOB_METACHARACTERS.search(pattern))


def pattern_to_regex(pattern: str) -> "re.Pattern[str]":
    """Translate a basename pattern: ``*`` is any run, ``?`` one character, the rest literal."""
    escaped = re.escape(pattern)
    escaped = escaped.replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(f"^{escaped}$", re.DOTALL)


def matches_pattern(relative_path: str, pattern: str) -> bool:
    """Match the trailing segments of ``relative_path`` against ``pattern``.

    A plain basename pattern compares against the basename only; a pattern
    with ``/`` compares against as many trailing segments as it has.
    """
    depth = pattern.count("/") + 1
    segments = relative_path.replace(os.sep, "/").split("/")
    if len(segments) < depth:
        return False
    tail = "/".join(segments[-depth:])
    return bool(pattern_to_regex(pattern).match(tail))


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives, nested groups included.

    A group without a top-level comma, or with no closing brace, stays literal.
    """
    start = pattern.find("{")
    while start != -1:
        depth = 0
        alternatives: List[str] = []
        part_start = start + 1
        for index in range(start, len(pattern)):
            char = pattern[index]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    alternatives.append(pattern[part_start:index])
                    if len(alternatives) > 1:
                        head, tail = pattern[:start], pattern[index + 1:]
                        expanded: List[str] = []
                        for alternative in alternatives:
                            for candidate in expand_braces(head + alternative + tail):
                                if candidate not in expanded:
                                    expanded.append(candidate)
                        return expanded
                    break
            elif char == "," and depth == 1:
                alternatives.append(pattern[part_start:index])
                part_start = index + 1
        start = pattern.find("{", start + 1)
    return [pattern]


class GlobResolver:
    """Resolves copy-file patterns relative to a source directory."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(__name__)

    def _walk_files(self, directory: str, prefix: str = "") -> List[str]:
        """Recursively list files below ``directory``, skipping ``.git``."""
        files: List[str] = []
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            # Unreadable directories are skipped, not fatal
            self.logger.debug(f"Skipping unreadable directory {directory}: {e}")
            return files

        for entry in entries:
            if entry.name == GIT_METADATA_DIR:
                continue

            relative_path = f"{prefix}/{entry.name}" if prefix else entry.name
            if entry.is_dir(follow_symlinks=False):
                files.extend(self._walk_files(entry.path, relative_path))
            elif entry.is_file():
                files.append(relative_path)

        return files

    def _expand_recursive(self, source_root: str, pattern: str) -> List[str]:
        parts = pattern.split(RECURSIVE_MARKER)
        prefix = parts[0]  # e.g. "app/" or ""
        suffix = RECURSIVE_MARKER.join(parts[1:])  # e.g. ".env" or "*.local.yml"

        base_dir = os.path.join(source_root, prefix) if prefix else source_root
        matched = [f for f in self._walk_files(base_dir) if matches_pattern(f, suffix)]

        if prefix:
            return [os.path.join(prefix, f) for f in matched]
        return [f.replace("/", os.sep) for f in matched]

    def _expand_standard(self, source_root: str, pattern: str) -> List[str]:
        matches = glob.glob(pattern, root_dir=source_root, recursive=True)
        # Filter out directories, keeping only files
        return sorted(m for m in matches if os.path.isfile(os.path.join(source_root, m)))

    def _expand_alternatives(self, source_root: str, alternatives: List[str]) -> List[str]:
        # Brace alternatives behave like a glob: only files that exist are returned
        matched = set()
        for alternative in alternatives:
            if is_glob_pattern(alternative) or os.path.isfile(os.path.join(source_root, alternative)):
                matched.update(self.expand_pattern(source_root, alternative))
        return sorted(matched)

    def expand_pattern(self, source_root: str, pattern: str) -> List[str]:
        """Expand a single pattern to matching file paths."""
        # A literal file wins, even if its name contains glob syntax
        if os.path.isfile(os.path.join(source_root, pattern)):
            return [pattern]

        # Not a pattern and not there; the copier reports it as skipped
        if not is_glob_pattern(pattern):
            return [pattern]

        alternatives = expand_braces(pattern)
        if len(alternatives) > 1:
            return self._expand_alternatives(source_root, alternatives)

        if RECURSIVE_MARKER in pattern:
            return self._expand_recursive(source_root, pattern)

        return self._expand_standard(source_root, pattern)

    def resolve(self, source_root: str, patterns: List[str]) -> Result[GlobResolutionResult, GlobResolutionError]:
        """Resolve patterns to a deduplicated list of relative file paths.

        Args:
            source_root: Directory the patterns are relative to
            patterns: File paths or glob patterns

        Returns:
            Ok(GlobResolutionResult), or Err(GlobResolutionError) for unexpected
            filesystem failures. A pattern matching nothing is not an error.
        """
        all_files: Dict[str, None] = {}
        details: List[ResolvedPattern] = []

        for pattern in patterns:
            try:
                resolved = self.expand_pattern(source_root, pattern)
            except (OSError, re.error) as e:
                return Err(GlobResolutionError(pattern, str(e)))

            for file in resolved:
                all_files.setdefault(file, None)
            details.append(ResolvedPattern(pattern=pattern, resolved_files=resolved))
            self.logger.debug(f"Pattern '{pattern}' resolved to {len(resolved)} file(s)")

        return Ok(GlobResolutionResult(resolved_files=list(all_files), patterns=details))


def resolve_glob_patterns(source_root: str, patterns: List[str],
                          logger: Optional[logging.Logger] = None
                          ) -> Result[GlobResolutionResult, GlobResolutionError]:
    """Resolve ``patterns`` relative to ``source_root``."""
    return GlobResolver(logger=logger).resolve(source_root, patterns)
