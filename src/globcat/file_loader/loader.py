"""
FileLoader: main entry point for pattern resolution and content aggregation.

Resolves include patterns into one deduplicated set of files, removes the
files matched by exclude patterns, and renders the survivors into a single
document, each file prefixed by a comment header naming it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from globcat.file_loader.defaults import prepare_exclude_patterns
from globcat.file_loader.errors import FileLoadError, FileTooLargeError, NoFilesMatchedError
from globcat.file_loader.exclude import ExcludeFilter
from globcat.file_loader.headers import file_header
from globcat.file_loader.matchers import (
    match_plain_glob,
    match_prefix_filter,
    match_recursive_wildcard,
    relative_to_root,
)
from globcat.file_loader.patterns import PatternStyle, classify_pattern
from globcat.file_loader.types import FileLoaderConfig
from globcat.logging import get_logger

log = get_logger("loader")

Matcher = Callable[[str, Path, FileLoaderConfig], set[str]]

_MATCHERS: dict[PatternStyle, Matcher] = {
    PatternStyle.recursive_wildcard: match_recursive_wildcard,
    PatternStyle.prefix_filter: match_prefix_filter,
    PatternStyle.plain_glob: match_plain_glob,
}

BLOCK_SEPARATOR = "\n\n"


class FileLoader:
    """
    Resolves include/exclude patterns against the directory tree at `root`.

    `root` defaults to the current working directory at construction time;
    every relative pattern and every displayed path is relative to it.
    """

    def __init__(self, config: FileLoaderConfig | None = None, root: Path | None = None) -> None:
        self._config: FileLoaderConfig = config or FileLoaderConfig()
        if root is None:
            try:
                root = Path.cwd()
            except OSError as e:
                raise FileLoadError(f"failed to get current working directory: {e}") from e
        self._root: Path = root

    @property
    def root(self) -> Path:
        return self._root

    def collect(self, patterns: Sequence[str], *, report_oversized: bool = True) -> set[str]:
        """
        Union the matches of every include pattern, in order. Raises
        `NoFilesMatchedError` if nothing matched at all, or `FileTooLargeError`
        when `report_oversized` is set and a literal file path was skipped only
        for its size.
        """
        matched: set[str] = set()
        for pattern in patterns:
            matcher = _MATCHERS[classify_pattern(pattern)]
            matched |= matcher(pattern, self._root, self._config)

        if not matched:
            if report_oversized:
                self._check_oversized(patterns)
            raise NoFilesMatchedError()
        return matched

    def resolve(self, patterns: Sequence[str], excludes: Sequence[str] = ()) -> list[str]:
        """Return the sorted list of files matched by `patterns` and not by `excludes`."""
        if not patterns:
            return []
        matched = self.collect(patterns, report_oversized=not excludes)
        exclude_filter = ExcludeFilter(
            prepare_exclude_patterns(excludes, self._config.default_excludes),
            self._root,
            self._config.ignore_spec,
        )
        kept = exclude_filter.apply(matched)
        if not kept:
            log.warning("all %d matched files were excluded", len(matched))
        return sorted(kept)

    def load(self, patterns: Sequence[str], excludes: Sequence[str] = ()) -> str:
        """Resolve the patterns and render the matched files into one document."""
        return self.format(self.resolve(patterns, excludes))

    def format(self, files: Sequence[str]) -> str:
        """
        Render files in the given order: a header line, the file's content,
        then a blank line. Any read failure aborts the whole document.
        """
        blocks: list[str] = []
        for path_str in files:
            try:
                content = (self._root / path_str).read_bytes()
            except OSError as e:
                raise FileLoadError(f"failed to read file {path_str}: {e}") from e
            display = relative_to_root(path_str, self._root)
            blocks.append(file_header(display))
            blocks.append(content.decode("utf-8", errors="surrogateescape"))
            blocks.append(BLOCK_SEPARATOR)
        return "".join(blocks)

    def _check_oversized(self, patterns: Sequence[str]) -> None:
        """Report a literal file path that was skipped only for its size."""
        if self._config.max_file_size <= 0:
            return
        for pattern in patterns:
            path = self._root / pattern
            try:
                if not path.is_file():
                    continue
                size = path.stat().st_size
            except OSError:
                continue
            if size > self._config.max_file_size:
                raise FileTooLargeError(pattern, self._config.max_file_size, size)


def load_content(
    patterns: Sequence[str],
    excludes: Sequence[str] = (),
    *,
    config: FileLoaderConfig | None = None,
    root: Path | None = None,
) -> str:
    """
    Convenience wrapper: resolve `patterns` minus `excludes` under `root` and
    return the aggregated document. An empty pattern list yields `""`.
    """
    return FileLoader(config, root).load(patterns, excludes)

