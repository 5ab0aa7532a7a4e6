"""git helpers: tracked file listing and dirty working tree detection."""

from __future__ import annotations

import asyncio
from pathlib import Path

from native_dependency_hash.exceptions import GitError


async def list_tracked_files(root: Path) -> list[str]:
    """Return every tracked file below *root*, relative to *root*, in git's order."""
    out = await _run(["git", "-C", str(root), "ls-files", "-z"])
    return [p for p in out.split("\0") if p]


async def is_dirty(root: Path) -> bool:
    """True when tracked files below *root* have uncommitted changes."""
    out = await _run(
        ["git", "-C", str(root), "status", "--porcelain", "--untracked-files=no", "--", "."]
    )
    return bool(out.strip())


async def _run(cmd: list[str]) -> str:
    """Run a git command and return stdout, raising GitError on failure."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise GitError(
            f"git command failed (exit {proc.returncode}): {stderr.decode().strip()}"
        )
    return stdout.decode()
