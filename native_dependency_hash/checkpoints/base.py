"""Checkpoint store interface and JSON document helpers."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog

from native_dependency_hash.app_config.normalizer import canonical_json
from native_dependency_hash.exceptions import CheckpointWriteError
from native_dependency_hash.models import Fingerprint, Platform

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StoredValue:
    """One checkpoint field: where it lives, which platform it tracks, what it holds."""

    field: str
    platform: Platform
    value: str | None


@runtime_checkable
class CheckpointStore(Protocol):
    """Interface that every checkpoint location must satisfy."""

    name: str

    def read(self) -> list[StoredValue]: ...

    def write(self, fingerprint: Fingerprint) -> None: ...


def as_checkpoint_value(raw: Any) -> str | None:
    """Normalize a stored value; empty and missing both mean absent."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        return raw
    return canonical_json(raw)


def read_json_document(path: Path) -> dict[str, Any] | None:
    """Load a JSON object for reading a checkpoint; ``None`` when missing or unusable."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, json.JSONDecodeError) as e:
        log.warning("checkpoint.unreadable", path=str(path), error=str(e))
        return None
    if not isinstance(data, dict):
        log.warning("checkpoint.not_an_object", path=str(path))
        return None
    return data


def load_json_for_update(path: Path) -> dict[str, Any]:
    """Load a JSON object that is about to be rewritten; any problem is fatal."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CheckpointWriteError(f"Cannot update {path}: {e}") from e
    if not isinstance(data, dict):
        raise CheckpointWriteError(f"Cannot update {path}: not a JSON object")
    return data


def atomic_write_text(path: Path, text: str) -> None:
    """Replace *path* with *text* in one rename."""
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp, path)
    except OSError as e:
        Path(tmp).unlink(missing_ok=True)
        raise CheckpointWriteError(f"Cannot write {path}: {e}") from e


def write_json_document(path: Path, data: dict[str, Any]) -> None:
    atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
