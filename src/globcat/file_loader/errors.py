"""Exceptions raised while resolving patterns and loading file content."""

from __future__ import annotations


class FileLoadError(Exception):
    """Base class for fatal file resolution and loading errors."""


class PatternSyntaxError(FileLoadError, ValueError):
    """An include pattern has malformed glob syntax."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"failed to glob pattern {pattern}: {reason}")
        self.pattern = pattern
        self.reason = reason


class NoFilesMatchedError(FileLoadError):
    """None of the include patterns matched a file."""

    def __init__(self) -> None:
        super().__init__(
            "no files matched the provided patterns. Try a different pattern such as "
            '"./.../*.go" or "./**/*.go" for recursive matching'
        )


class FileTooLargeError(FileLoadError):
    """An explicitly named file was skipped because it exceeds the size limit."""

    def __init__(self, path: str, limit: int, size: int) -> None:
        super().__init__(
            f"file '{path}' exceeds the size limit of {limit} bytes (file size: {size} bytes). "
            "Use --max-file-size to increase the limit"
        )
        self.path = path
        self.limit = limit
        self.size = size
