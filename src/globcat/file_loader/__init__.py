"""
Pattern resolution and content aggregation.

Resolves include patterns in three dialects (`**` globs, `dir/...` prefix
patterns, plain globs), removes files matched by exclude patterns, and renders
the result as one document with a comment header before each file.

Usage::

    from globcat.file_loader import FileLoader, FileLoaderConfig

    loader = FileLoader(FileLoaderConfig(max_file_size=0))
    text = loader.load(["pkg/.../*.go", "README.md"], ["**/*_test.go"])
"""

from globcat.file_loader.defaults import (
    DEFAULT_EXCLUDES,
    DEFAULT_MAX_FILE_SIZE,
    prepare_exclude_patterns,
)
from globcat.file_loader.errors import (
    FileLoadError,
    FileTooLargeError,
    NoFilesMatchedError,
    PatternSyntaxError,
)
from globcat.file_loader.gitignore import load_ignore_spec
from globcat.file_loader.loader import FileLoader, load_content
from globcat.file_loader.patterns import PatternStyle, classify_pattern
from globcat.file_loader.types import FileLoaderConfig

__all__ = [
    "DEFAULT_EXCLUDES",
    "DEFAULT_MAX_FILE_SIZE",
    "FileLoadError",
    "FileLoader",
    "FileLoaderConfig",
    "FileTooLargeError",
    "NoFilesMatchedError",
    "PatternStyle",
    "PatternSyntaxError",
    "classify_pattern",
    "load_content",
    "load_ignore_spec",
    "prepare_exclude_patterns",
]
