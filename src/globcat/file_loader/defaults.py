"""
Default exclude patterns and limits for file loading.

The exclude patterns use the `**` dialect, so they are matched against
root-relative paths like any other recursive-wildcard exclude.
"""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_MAX_FILE_SIZE: int = 64 * 1024

# Directories and files that should almost never end up in an aggregated document.
DEFAULT_EXCLUDES: list[str] = [
    # Version control
    "**/.git/**",
    "**/.svn/**",
    "**/.hg/**",
    "**/.bzr/**",
    # Build outputs and dependencies
    "**/vendor/**",
    "**/node_modules/**",
    "**/.venv/**",
    "**/venv/**",
    "**/__pycache__/**",
    "**/*.pyc",
    "**/target/**",
    "**/dist/**",
    "**/build/**",
    "**/.gradle/**",
    # IDE/Editor
    "**/.idea/**",
    "**/.vscode/**",
    "**/.vs/**",
    # Logs and OS metadata
    "**/logs/**",
    "**/*.log",
    "**/.DS_Store",
    "**/Thumbs.db",
]


def prepare_exclude_patterns(patterns: Sequence[str], use_defaults: bool = True) -> list[str]:
    """
    Combine user exclude patterns with `DEFAULT_EXCLUDES`. User patterns come
    first; duplicates are dropped, keeping the first occurrence.
    """
    combined = list(patterns) + (DEFAULT_EXCLUDES if use_defaults else [])
    return list(dict.fromkeys(combined))
