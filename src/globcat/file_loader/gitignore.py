"""Gitignore and tool-specific ignore file handling using pathspec."""

from __future__ import annotations

from pathlib import Path

import pathspec

from globcat.logging import get_logger

log = get_logger("gitignore")

MAX_IGNORE_FILE_SIZE = 1024 * 1024


def _read_ignore_file(path: Path) -> list[str] | None:
    """
    Read pattern lines from an ignore file, dropping blanks and comments.
    Returns `None` if the file is missing, unreadable, not UTF-8, or larger
    than `MAX_IGNORE_FILE_SIZE`.
    """
    try:
        if path.stat().st_size > MAX_IGNORE_FILE_SIZE:
            log.warning("%s exceeds %d bytes, ignoring", path, MAX_IGNORE_FILE_SIZE)
            return None
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.debug("error reading %s: %s", path, e)
        return None
    lines = text.splitlines()
    return [line for line in lines if line.strip() and not line.strip().startswith("#")]


def load_gitignore(directory: Path) -> list[str]:
    """Return the patterns of `.gitignore` in the given directory, if any."""
    lines = _read_ignore_file(directory / ".gitignore") or []
    if lines:
        log.debug("loaded %d patterns from .gitignore", len(lines))
    return lines


def load_tool_ignore(tool_name: str, start_dir: Path) -> list[str]:
    """
    Walk up from `start_dir` looking for `.{tool_name}ignore` (e.g., `.globcatignore`)
    and return the patterns of the first one found.
    """
    ignore_name = f".{tool_name}ignore"
    current = start_dir.resolve()
    while True:
        candidate = current / ignore_name
        if candidate.is_file():
            return _read_ignore_file(candidate) or []
        parent = current.parent
        if parent == current:
            break
        current = parent
    return []


def load_ignore_spec(
    root: Path, tool_name: str = "globcat", respect_gitignore: bool = True
) -> pathspec.PathSpec | None:
    """
    Compile the root `.gitignore` (when `respect_gitignore`) and the nearest
    tool ignore file into one `PathSpec`, or `None` if neither has patterns.
    Only the top-level `.gitignore` is read; nested ones are not.
    """
    lines: list[str] = []
    if respect_gitignore:
        lines.extend(load_gitignore(root))
    lines.extend(load_tool_ignore(tool_name, root))
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)
