"""
Exclusion filter.

Exclude patterns use the same three dialects as include patterns, but they are
tested against already-matched path strings rather than the filesystem:

- `**` patterns match the whole path relative to the root
- `base/...` patterns test the raw matched path with a string prefix check
  on `base`, then apply the pattern's filter
- plain globs match the file's base name
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from pathlib import Path, PurePath

import pathspec

from globcat.file_loader.errors import PatternSyntaxError
from globcat.file_loader.matchers import relative_to_root
from globcat.file_loader.patterns import (
    PatternStyle,
    classify_pattern,
    doublestar_match,
    glob_match,
    matches_prefix_filter,
    split_prefix_pattern,
    validate_glob,
)
from globcat.logging import get_logger

log = get_logger("exclude")

# Key used in `excluded_counts` for files dropped by the ignore spec.
IGNORE_SPEC_KEY = "<ignore files>"


class ExcludeFilter:
    """
    Removes matched files that hit any exclude pattern. Exclusion always wins,
    however many include patterns matched a file.
    """

    def __init__(
        self,
        patterns: Sequence[str],
        root: Path,
        ignore_spec: pathspec.PathSpec | None = None,
    ) -> None:
        self._patterns: list[str] = list(dict.fromkeys(patterns))
        self._root: Path = root
        self._ignore_spec: pathspec.PathSpec | None = ignore_spec
        self._valid_globs: dict[str, bool] = {}
        self.excluded_counts: dict[str, int] = {pattern: 0 for pattern in self._patterns}
        if ignore_spec is not None:
            self.excluded_counts[IGNORE_SPEC_KEY] = 0

    def apply(self, files: Iterable[str]) -> set[str]:
        """Return the files that match none of the exclude patterns."""
        files = set(files)
        if not self._patterns and self._ignore_spec is None:
            return files

        kept = {path for path in files if not self.is_excluded(path)}
        self._log_results(len(files) - len(kept))
        return kept

    def is_excluded(self, path: str) -> bool:
        rel_path = relative_to_root(path, self._root)
        for pattern in self._patterns:
            if self.matches(pattern, path, rel_path):
                self.excluded_counts[pattern] += 1
                return True
        if self._ignore_spec is not None and self._ignore_spec.match_file(
            PurePath(rel_path).as_posix()
        ):
            self.excluded_counts[IGNORE_SPEC_KEY] += 1
            return True
        return False

    def matches(self, pattern: str, path: str, rel_path: str) -> bool:
        """Test one exclude pattern against a matched path and its root-relative form."""
        style = classify_pattern(pattern)
        if style is PatternStyle.recursive_wildcard:
            return self._is_valid_glob(pattern) and doublestar_match(
                pattern, PurePath(rel_path).as_posix()
            )
        if style is PatternStyle.prefix_filter:
            base_path, filter_ = split_prefix_pattern(pattern)
            return path.startswith(base_path) and matches_prefix_filter(path, filter_)
        if not self._is_valid_glob(pattern):
            return False
        return glob_match(pattern, os.path.basename(path))

    def _is_valid_glob(self, pattern: str) -> bool:
        if pattern not in self._valid_globs:
            try:
                validate_glob(pattern)
                self._valid_globs[pattern] = True
            except PatternSyntaxError as e:
                log.warning("error matching exclude pattern %s: %s", pattern, e)
                self._valid_globs[pattern] = False
        return self._valid_globs[pattern]

    def _log_results(self, total_excluded: int) -> None:
        if total_excluded == 0:
            return
        log.debug("excluded %d files in total", total_excluded)
        for pattern, count in self.excluded_counts.items():
            if count > 0:
                log.debug("pattern %s excluded %d files", pattern, count)
