"""Tests for the git helpers against a real throwaway repository."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from native_dependency_hash.core.git import is_dirty, list_tracked_files
from native_dependency_hash.exceptions import GitError

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(root: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "user.email=test@example.com", "-c", "user.name=test", *args],
        cwd=root,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    _git(tmp_path, "init", "-q")
    (tmp_path / "ios").mkdir()
    (tmp_path / "ios" / "Podfile").write_text("platform :ios\n")
    (tmp_path / "package.json").write_text("{}\n")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-q", "-m", "init")
    return tmp_path


@pytest.mark.asyncio
async def test_lists_tracked_files_only(repo: Path):
    (repo / "ios" / "Pods.generated").write_text("untracked")
    assert sorted(await list_tracked_files(repo)) == ["ios/Podfile", "package.json"]


@pytest.mark.asyncio
async def test_lists_relative_to_subdirectory(repo: Path):
    assert await list_tracked_files(repo / "ios") == ["Podfile"]


@pytest.mark.asyncio
async def test_clean_tree(repo: Path):
    assert await is_dirty(repo) is False


@pytest.mark.asyncio
async def test_untracked_files_are_not_dirty(repo: Path):
    (repo / "new.txt").write_text("x")
    assert await is_dirty(repo) is False


@pytest.mark.asyncio
async def test_modified_file_is_dirty(repo: Path):
    (repo / "package.json").write_text('{"name": "changed"}\n')
    assert await is_dirty(repo) is True


@pytest.mark.asyncio
async def test_not_a_repository(tmp_path: Path):
    with pytest.raises(GitError, match="git command failed"):
        await list_tracked_files(tmp_path)
