"""Checkpoint stored as ``runtimeVersion`` in the Expo app config."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from native_dependency_hash.app_config.loader import unwrap
from native_dependency_hash.checkpoints.base import (
    StoredValue,
    as_checkpoint_value,
    load_json_for_update,
    read_json_document,
    write_json_document,
)
from native_dependency_hash.exceptions import CheckpointWriteError
from native_dependency_hash.models import Fingerprint, Platform

_FIELD = "runtimeVersion"


class AppConfigStore:
    """``expo.runtimeVersion`` (all) plus ``expo.ios.runtimeVersion`` / ``expo.android.runtimeVersion``.

    Reads the evaluated config when one is given, since ``app.config.js`` can
    compute runtimeVersion. Writes always go to the static app.json.
    """

    def __init__(self, path: Path, evaluated: dict[str, Any] | None = None) -> None:
        self.path = Path(path)
        self.evaluated = evaluated
        self.name = str(self.path)

    def _source(self) -> dict[str, Any]:
        if self.evaluated is not None:
            return self.evaluated
        return unwrap(read_json_document(self.path)) or {}

    def read(self) -> list[StoredValue]:
        config = self._source()
        values = [
            StoredValue(
                field=_FIELD, platform=Platform.ALL, value=as_checkpoint_value(config.get(_FIELD))
            )
        ]
        for platform in (Platform.IOS, Platform.ANDROID):
            section = config.get(platform.value)
            raw = section.get(_FIELD) if isinstance(section, dict) else None
            values.append(
                StoredValue(
                    field=f"{platform.value}.{_FIELD}",
                    platform=platform,
                    value=as_checkpoint_value(raw),
                )
            )
        return values

    def write(self, fingerprint: Fingerprint) -> None:
        if not self.path.is_file():
            raise CheckpointWriteError(
                f"{self.path} not found; set runtimeVersion manually when using a dynamic app config"
            )
        doc = load_json_for_update(self.path)
        target = doc["expo"] if isinstance(doc.get("expo"), dict) else doc

        target[_FIELD] = fingerprint.all
        for platform in (Platform.IOS, Platform.ANDROID):
            section = target.setdefault(platform.value, {})
            if not isinstance(section, dict):
                raise CheckpointWriteError(f"Cannot update {self.path}: '{platform.value}' is not an object")
            section[_FIELD] = fingerprint.for_platform(platform)

        write_json_document(self.path, doc)
