"""Digest helpers."""

from __future__ import annotations

import hashlib


def md5_hex(data: str | bytes) -> str:
    """Lowercase hex MD5; used for stability of existing hashes, not for security."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.md5(data, usedforsecurity=False).hexdigest()
