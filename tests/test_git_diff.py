"""Tests for the git diff provider."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest

from globcat.file_loader import load_content
from globcat.git_diff import GitDiffError, GitDiffProvider

DIFF = b"diff --git a/main.go b/main.go\n+// new line\n"


class FakeGit:
    """Records git invocations and answers them from a table of canned results."""

    def __init__(self, results: dict[tuple[str, ...], tuple[int, bytes]] | None = None) -> None:
        self.calls: list[list[str]] = []
        self.results = results or {}

    def __call__(self, args: Sequence[str]) -> subprocess.CompletedProcess[bytes]:
        self.calls.append(list(args))
        code, out = self.results.get(tuple(args), (0, b""))
        stderr = b"boom" if code else b""
        return subprocess.CompletedProcess(list(args), code, stdout=out, stderr=stderr)


def test_uncommitted_writes_temp_file(tmp_path: Path):
    git = FakeGit({("git", "diff"): (0, DIFF)})
    provider = GitDiffProvider(runner=git, temp_dir=tmp_path)

    diff = provider.uncommitted()

    assert diff is not None
    assert diff.description == "git diff (uncommitted changes)"
    assert diff.path.parent == tmp_path
    assert diff.path.name.startswith("globcat-git-diff-")
    assert diff.path.read_bytes() == DIFF
    assert (diff.path.stat().st_mode & 0o777) == 0o600
    assert git.calls == [["git", "diff"]]


def test_uncommitted_clean_tree_returns_none(tmp_path: Path):
    provider = GitDiffProvider(runner=FakeGit(), temp_dir=tmp_path)
    assert provider.uncommitted() is None
    assert list(tmp_path.iterdir()) == []


def test_git_failure_raises(tmp_path: Path):
    provider = GitDiffProvider(runner=FakeGit({("git", "diff"): (128, b"")}), temp_dir=tmp_path)
    with pytest.raises(GitDiffError) as exc:
        provider.uncommitted()
    assert "git command failed" in str(exc.value)
    assert "boom" in str(exc.value)


def test_branch_diff_against_main(tmp_path: Path):
    git = FakeGit(
        {
            ("git", "show-ref", "--verify", "--quiet", "refs/heads/feature/x"): (0, b""),
            ("git", "rev-parse", "--verify", "main"): (0, b""),
            ("git", "diff", "main...feature/x"): (0, DIFF),
        }
    )
    provider = GitDiffProvider(runner=git, temp_dir=tmp_path)

    diff = provider.branch("feature/x")

    assert diff is not None
    assert diff.description == "git diff between main and feature/x"
    assert ["git", "diff", "main...feature/x"] in git.calls


def test_branch_diff_falls_back_to_master(tmp_path: Path):
    git = FakeGit(
        {
            ("git", "show-ref", "--verify", "--quiet", "refs/heads/topic"): (1, b""),
            ("git", "show-ref", "--verify", "--quiet", "refs/remotes/topic"): (0, b""),
            ("git", "rev-parse", "--verify", "main"): (1, b""),
            ("git", "diff", "master...topic"): (0, DIFF),
        }
    )
    diff = GitDiffProvider(runner=git, temp_dir=tmp_path).branch("topic")
    assert diff is not None
    assert diff.description == "git diff between master and topic"


@pytest.mark.parametrize("branch", ["bad;rm -rf", "$(whoami)", "a b", "x|y", ""])
def test_branch_rejects_unsafe_names(tmp_path: Path, branch: str):
    git = FakeGit()
    with pytest.raises(GitDiffError) as exc:
        GitDiffProvider(runner=git, temp_dir=tmp_path).branch(branch)
    assert "invalid branch name" in str(exc.value)
    assert git.calls == []


def test_branch_rejects_unknown_ref(tmp_path: Path):
    git = FakeGit(
        {
            ("git", "show-ref", "--verify", "--quiet", "refs/heads/ghost"): (1, b""),
            ("git", "show-ref", "--verify", "--quiet", "refs/remotes/ghost"): (1, b""),
        }
    )
    with pytest.raises(GitDiffError):
        GitDiffProvider(runner=git, temp_dir=tmp_path).branch("ghost")


def test_missing_git_executable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("globcat.git_diff.shutil.which", lambda _name: None)
    with pytest.raises(GitDiffError) as exc:
        GitDiffProvider(temp_dir=tmp_path).uncommitted()
    assert "git executable not found" in str(exc.value)


def test_cleanup_removes_created_files(tmp_path: Path):
    provider = GitDiffProvider(runner=FakeGit({("git", "diff"): (0, DIFF)}), temp_dir=tmp_path)
    first = provider.uncommitted()
    second = provider.uncommitted()
    assert first is not None and second is not None
    first.path.unlink()

    provider.cleanup()

    assert not second.path.exists()
    assert list(tmp_path.iterdir()) == []


def test_diff_file_is_loaded_like_any_other_path(tmp_path: Path):
    project = tmp_path / "project"
    project.mkdir()
    (project / "main.go").write_text("package main\n")
    diffs = tmp_path / "diffs"
    diffs.mkdir()
    provider = GitDiffProvider(runner=FakeGit({("git", "diff"): (0, DIFF)}), temp_dir=diffs)
    diff = provider.uncommitted()
    assert diff is not None

    out = load_content(["*.go", str(diff.path)], root=project)

    assert "// file: main.go\npackage main\n" in out
    assert f"// file: ../diffs/{diff.path.name}\n" in out
    assert DIFF.decode() in out
