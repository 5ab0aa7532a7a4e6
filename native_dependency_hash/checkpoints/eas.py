"""Checkpoint stored as ``releaseChannel`` of every build profile in eas.json."""

from __future__ import annotations

from pathlib import Path

from native_dependency_hash.checkpoints.base import (
    StoredValue,
    as_checkpoint_value,
    load_json_for_update,
    read_json_document,
    write_json_document,
)
from native_dependency_hash.exceptions import CheckpointWriteError
from native_dependency_hash.models import Fingerprint, Platform

_FIELD = "releaseChannel"


class EasProfileStore:
    def __init__(self, path: Path, platform: Platform = Platform.ALL) -> None:
        self.path = Path(path)
        self.platform = platform
        self.name = str(self.path)

    def read(self) -> list[StoredValue]:
        doc = read_json_document(self.path) or {}
        profiles = doc.get("build")
        if not isinstance(profiles, dict):
            return []
        return [
            StoredValue(
                field=f"build.{name}.{_FIELD}",
                platform=self.platform,
                value=as_checkpoint_value(profile.get(_FIELD)) if isinstance(profile, dict) else None,
            )
            for name, profile in profiles.items()
        ]

    def write(self, fingerprint: Fingerprint) -> None:
        doc = load_json_for_update(self.path)
        profiles = doc.get("build")
        if not isinstance(profiles, dict):
            raise CheckpointWriteError(f"Cannot update {self.path}: no 'build' profiles")
        value = fingerprint.for_platform(self.platform)
        for name, profile in profiles.items():
            if not isinstance(profile, dict):
                raise CheckpointWriteError(f"Cannot update {self.path}: profile '{name}' is not an object")
            profile[_FIELD] = value
        write_json_document(self.path, doc)
