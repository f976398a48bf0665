from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _reset_globcat_logger() -> Iterator[None]:
    """Undo `configure_logging()` so `caplog` sees records in every test."""
    yield
    logger = logging.getLogger("globcat")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def testdata(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Build a small `testdata/` tree under `tmp_path` and chdir into `tmp_path`.

    testdata/
      Makefile
      test1.go
      test2.txt
      nested/
        readme.txt
        test3.go
    """
    data = tmp_path / "testdata"
    nested = data / "nested"
    nested.mkdir(parents=True)
    (data / "test1.go").write_text("package testdata\n\nfunc One() int { return 1 }\n")
    (data / "test2.txt").write_text("plain text notes\n")
    (data / "Makefile").write_text("all:\n\tgo build ./...\n")
    (nested / "test3.go").write_text("package nested\n")
    (nested / "readme.txt").write_text("nested notes\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path
