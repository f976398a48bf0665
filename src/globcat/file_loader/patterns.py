"""
Pattern classification and parsing.

Three pattern dialects are understood, for both include and exclude lists:

- `recursive_wildcard`: contains `**` (e.g. `src/**/*.py`)
- `prefix_filter`: contains `/...`, optionally followed by a filter
  (e.g. `pkg/...`, `pkg/.../*.go`, `cmd/...main*`)
- `plain_glob`: anything else, single-level glob (e.g. `*.go`, `docs`)
"""

from __future__ import annotations

import os
from enum import Enum
from fnmatch import fnmatchcase

from wcmatch import glob as wcglob

from globcat.file_loader.errors import PatternSyntaxError

RECURSIVE_WILDCARD_TOKEN = "**"
PREFIX_FILTER_MARKER = "/..."

# `**` crosses directories, `{a,b}` alternates, wildcards match dotfiles.
DOUBLESTAR_FLAGS = wcglob.GLOBSTAR | wcglob.BRACE | wcglob.DOTGLOB


class PatternStyle(Enum):
    """Syntactic dialect of a file pattern."""

    recursive_wildcard = "recursive_wildcard"
    prefix_filter = "prefix_filter"
    plain_glob = "plain_glob"


def classify_pattern(pattern: str) -> PatternStyle:
    """
    Classify a raw pattern. The `**` check runs first, so a pattern containing
    both `**` and `/...` is a recursive wildcard.
    """
    if RECURSIVE_WILDCARD_TOKEN in pattern:
        return PatternStyle.recursive_wildcard
    if PREFIX_FILTER_MARKER in pattern:
        return PatternStyle.prefix_filter
    return PatternStyle.plain_glob


def split_prefix_pattern(pattern: str) -> tuple[str, str]:
    """
    Split a prefix-filter pattern like `pkg/...` or `cmd/.../*.go` into
    `(base_path, filter)`. Only the first `/...` is significant, and one leading
    `/` is dropped from the filter.
    """
    base_path, _, rest = pattern.partition(PREFIX_FILTER_MARKER)
    if rest.startswith("/"):
        rest = rest[1:]
    return base_path, rest


def matches_prefix_filter(path: str, filter_: str) -> bool:
    """
    Apply a prefix-pattern filter to a path. An empty filter matches everything,
    `*.<ext>` is a plain suffix test on the whole path, anything else is a glob
    on the base name.
    """
    if not filter_:
        return True
    if filter_.startswith("*."):
        return path.endswith(filter_[1:])
    return glob_match(filter_, os.path.basename(path))


def glob_match(pattern: str, name: str) -> bool:
    """Case-sensitive single-level glob match. Malformed patterns never match."""
    try:
        validate_glob(pattern)
    except PatternSyntaxError:
        return False
    return fnmatchcase(name, pattern)


def doublestar_match(pattern: str, path: str) -> bool:
    """Match a whole slash-separated path against a `**` pattern."""
    return wcglob.globmatch(path, pattern, flags=DOUBLESTAR_FLAGS)


def validate_glob(pattern: str) -> None:
    """
    Raise `PatternSyntaxError` if the pattern contains a malformed bracket
    expression: unterminated, empty, or with a reversed character range.
    """
    i = 0
    n = len(pattern)
    while i < n:
        if pattern[i] != "[":
            i += 1
            continue
        i += 1
        if i < n and pattern[i] in "^!":
            i += 1
        count = 0
        while True:
            if i >= n:
                raise PatternSyntaxError(pattern, "unterminated character class")
            if pattern[i] == "]":
                if count == 0:
                    raise PatternSyntaxError(pattern, "empty character class")
                break
            lo = pattern[i]
            i += 1
            count += 1
            if i + 1 < n and pattern[i] == "-" and pattern[i + 1] != "]":
                hi = pattern[i + 1]
                i += 2
                if hi < lo:
                    raise PatternSyntaxError(pattern, f"invalid character range {lo}-{hi}")
        i += 1
