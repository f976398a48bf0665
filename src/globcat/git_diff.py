"""
Git diff provider.

Writes `git diff` output to a temporary file so it can be included like any
other file. The loader sees only the file path; cleanup is the caller's job.
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
import tempfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from globcat.logging import get_logger

log = get_logger("git_diff")

# Branch names are restricted to characters that are safe to pass to git.
_BRANCH_NAME_RE = re.compile(r"^[\w./-]+$")

Runner = Callable[[Sequence[str]], subprocess.CompletedProcess[bytes]]


class GitDiffError(RuntimeError):
    """Git is unavailable, a git command failed, or a branch name was rejected."""


@dataclass(frozen=True)
class GitDiff:
    """A diff written to `path`, with a human-readable `description`."""

    path: Path
    description: str


@dataclass
class GitDiffProvider:
    """
    Produces diff files for uncommitted changes or for a branch compared with
    the default branch (`main`, falling back to `master`).

    `runner` executes a git argument list and returns the completed process;
    it is injectable for tests.
    """

    runner: Runner | None = None
    temp_dir: Path | None = None
    cwd: Path | None = None
    _created: list[Path] = field(default_factory=list, init=False, repr=False)

    def uncommitted(self) -> GitDiff | None:
        """Diff of uncommitted changes, or `None` if the tree is clean."""
        self._require_git()
        output = self._output(["git", "diff"])
        return self._write(output, "git diff (uncommitted changes)")

    def branch(self, branch: str) -> GitDiff | None:
        """Diff between the default branch and `branch`, or `None` if identical."""
        self._require_git()
        if not self._is_valid_branch(branch):
            raise GitDiffError(f"invalid branch name: {branch}")
        default = self.default_branch()
        output = self._output(["git", "diff", f"{default}...{branch}"])
        return self._write(output, f"git diff between {default} and {branch}")

    def default_branch(self) -> str:
        return "main" if self._succeeds(["git", "rev-parse", "--verify", "main"]) else "master"

    def cleanup(self) -> None:
        """Remove every diff file this provider created."""
        for path in self._created:
            try:
                path.unlink()
                log.debug("removed temporary git diff file: %s", path)
            except FileNotFoundError:
                pass
            except OSError as e:
                log.warning("failed to remove temporary git diff file %s: %s", path, e)
        self._created.clear()

    def _is_valid_branch(self, branch: str) -> bool:
        if not _BRANCH_NAME_RE.match(branch):
            return False
        return self._succeeds(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch}"]
        ) or self._succeeds(["git", "show-ref", "--verify", "--quiet", f"refs/remotes/{branch}"])

    def _require_git(self) -> None:
        if self.runner is None and shutil.which("git") is None:
            raise GitDiffError("git executable not found")

    def _run(self, args: Sequence[str]) -> subprocess.CompletedProcess[bytes]:
        if self.runner is not None:
            return self.runner(args)
        return subprocess.run(list(args), cwd=self.cwd, capture_output=True, check=False)

    def _succeeds(self, args: Sequence[str]) -> bool:
        return self._run(args).returncode == 0

    def _output(self, args: Sequence[str]) -> bytes:
        completed = self._run(args)
        if completed.returncode != 0:
            stderr = (completed.stderr or b"").decode("utf-8", errors="replace").strip()
            raise GitDiffError(f"git command failed: {' '.join(args)}: {stderr}")
        return completed.stdout or b""

    def _write(self, output: bytes, description: str) -> GitDiff | None:
        if not output:
            log.info("no git differences found, skipping git context")
            return None
        temp_dir = self.temp_dir or Path(tempfile.gettempdir())
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        fd, name = tempfile.mkstemp(
            prefix=f"globcat-git-diff-{timestamp}-", suffix=".txt", dir=temp_dir
        )
        with os.fdopen(fd, "wb") as f:
            f.write(output)
        path = Path(name)
        self._created.append(path)
        log.info("wrote git diff to temporary file: %s", path)
        return GitDiff(path=path, description=description)
