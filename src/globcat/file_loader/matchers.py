"""
Style matchers: one function per pattern dialect.

Each matcher resolves a single include pattern relative to `root` and returns
a new set of matched file path strings. Relative patterns yield root-relative
paths; absolute patterns yield absolute paths.
"""

from __future__ import annotations

import glob
import os
import stat
from pathlib import Path

from wcmatch import glob as wcglob

from globcat.file_loader.errors import FileLoadError, PatternSyntaxError
from globcat.file_loader.patterns import (
    DOUBLESTAR_FLAGS,
    matches_prefix_filter,
    split_prefix_pattern,
    validate_glob,
)
from globcat.file_loader.types import FileLoaderConfig
from globcat.file_loader.walker import WalkError, iter_files
from globcat.logging import get_logger

log = get_logger("matchers")


def match_recursive_wildcard(pattern: str, root: Path, config: FileLoaderConfig) -> set[str]:
    """
    Resolve a `**` pattern with recursive semantics: `**` crosses any number of
    directory levels, including none, and `{a,b}` alternation is expanded. A
    `**` inside a path component (`src/**.py`) matches like `*`. Directories
    are dropped from the result.
    """
    validate_glob(pattern)
    try:
        matches = wcglob.glob(pattern, flags=DOUBLESTAR_FLAGS, root_dir=str(root))
    except ValueError as e:
        raise PatternSyntaxError(pattern, str(e)) from e

    if not matches:
        log.warning("no files matched pattern: %s", pattern)
        return set()

    found: set[str] = set()
    for match in matches:
        path_str = str(Path(match))
        try:
            info = (root / match).stat()
        except OSError as e:
            raise FileLoadError(f"failed to stat file {path_str}: {e}") from e
        if stat.S_ISDIR(info.st_mode):
            continue
        if config.exceeds_max_size(info.st_size):
            _warn_too_large(path_str, info.st_size)
            continue
        found.add(path_str)

    _log_count(found, pattern, "no files matched after doublestar pattern: %s")
    return found


def match_prefix_filter(pattern: str, root: Path, config: FileLoaderConfig) -> set[str]:
    """
    Resolve a `base/...` pattern by walking `base` recursively and keeping the
    files accepted by the pattern's filter. A missing base directory is not an
    error.
    """
    base_path, filter_ = split_prefix_pattern(pattern)
    base_dir = root / base_path
    if not base_path or not base_dir.is_dir():
        log.warning("invalid base directory for pattern %s: %s", pattern, base_path or "(empty)")
        return set()

    found: set[str] = set()
    try:
        for path in iter_files(base_dir):
            path_str = str(Path(base_path) / path.relative_to(base_dir))
            if not matches_prefix_filter(path_str, filter_):
                continue
            if _too_large(path, path_str, config):
                continue
            found.add(path_str)
    except WalkError as e:
        log.warning("failed to walk directory for pattern %s: %s", pattern, e)

    _log_count(found, pattern, "no files matched pattern: %s")
    return found


def match_plain_glob(pattern: str, root: Path, config: FileLoaderConfig) -> set[str]:
    """
    Resolve a single-level glob. Matched files are kept as-is; matched
    directories are walked recursively and contribute every file below them.
    """
    validate_glob(pattern)
    matches = sorted(glob.glob(pattern, root_dir=root, include_hidden=True))
    if not matches:
        log.warning("no files matched pattern: %s", pattern)
        return set()

    found: set[str] = set()
    for match in matches:
        path = root / match
        try:
            info = path.stat()
        except OSError as e:
            raise FileLoadError(f"failed to stat file {match}: {e}") from e

        if stat.S_ISDIR(info.st_mode):
            try:
                for child in iter_files(path):
                    child_str = str(Path(match) / child.relative_to(path))
                    if not _too_large(child, child_str, config):
                        found.add(child_str)
            except WalkError as e:
                log.warning("failed to walk directory %s: %s", match, e)
            continue

        if config.exceeds_max_size(info.st_size):
            _warn_too_large(match, info.st_size)
            continue
        found.add(match)

    _log_count(found, pattern, "no files matched after directory traversal: %s")
    return found


def _too_large(path: Path, path_str: str, config: FileLoaderConfig) -> bool:
    """Size check for walked entries; unreadable entries are skipped too."""
    if config.max_file_size <= 0:
        return False
    try:
        size = path.stat().st_size
    except OSError as e:
        log.debug("skipping unreadable file %s: %s", path_str, e)
        return True
    if size > config.max_file_size:
        _warn_too_large(path_str, size)
        return True
    return False


def _warn_too_large(path_str: str, size: int) -> None:
    log.warning("file %s exceeds size limit (%d bytes), skipping", path_str, size)


def _log_count(found: set[str], pattern: str, empty_message: str) -> None:
    if found:
        log.debug("matched %d files for pattern: %s", len(found), pattern)
    else:
        log.warning(empty_message, pattern)


def relative_to_root(path_str: str, root: Path) -> str:
    """
    Express a matched path relative to `root` for display and exclusion.
    Relative paths are already root-relative and are returned verbatim.
    """
    path = Path(path_str)
    if not path.is_absolute():
        return path_str
    try:
        return os.path.relpath(path, root)
    except ValueError:
        return path_str
