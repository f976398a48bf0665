"""Configuration types for file loading."""

from __future__ import annotations

from dataclasses import dataclass

import pathspec

from globcat.file_loader.defaults import DEFAULT_MAX_FILE_SIZE


@dataclass
class FileLoaderConfig:
    """
    Configuration for pattern resolution and content loading.

    `max_file_size=0` disables the size limit. `default_excludes` appends
    `DEFAULT_EXCLUDES` to the caller's exclude patterns. `ignore_spec`, when set,
    is a compiled gitignore-style spec applied during exclusion in addition to
    the exclude patterns.
    """

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    default_excludes: bool = False
    ignore_spec: pathspec.PathSpec | None = None

    def exceeds_max_size(self, size: int) -> bool:
        return self.max_file_size > 0 and size > self.max_file_size
