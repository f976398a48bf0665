"""Lazy recursive directory traversal."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from globcat.logging import get_logger

log = get_logger("walker")


class WalkError(OSError):
    """The root of a directory walk could not be opened."""


def iter_files(top: Path) -> Iterator[Path]:
    """
    Return an iterator over every file below `top`, at any depth.

    The root is opened eagerly, so an unreadable `top` raises `WalkError` here
    rather than on first iteration. Entries that fail later (permissions,
    files vanishing mid-walk) are skipped. Symlinked directories are not
    followed. Each call returns a fresh iterator.
    """
    try:
        with os.scandir(top):
            pass
    except OSError as e:
        raise WalkError(e.errno, f"cannot open directory {top}: {e.strerror}", str(top)) from e
    return _walk(top)


def _walk(top: Path) -> Iterator[Path]:
    for dirpath, _dirnames, filenames in os.walk(top, onerror=_skip_entry):
        current = Path(dirpath)
        for filename in filenames:
            yield current / filename


def _skip_entry(error: OSError) -> None:
    log.debug("skipping unreadable entry %s: %s", error.filename, error.strerror)
