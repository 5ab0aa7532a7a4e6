"""Checkpoint stored in a package.json property.

Libraries publish their hash here; apps read the same property back as the
package's native hash override.
"""

from __future__ import annotations

from pathlib import Path

from native_dependency_hash.checkpoints.base import (
    StoredValue,
    as_checkpoint_value,
    load_json_for_update,
    read_json_document,
    write_json_document,
)
from native_dependency_hash.config import DEFAULT_PACKAGE_JSON_PROPERTY
from native_dependency_hash.models import PLATFORMS, Fingerprint, Platform


class PackageJsonStore:
    """``{"<property>": {"ios": ..., "android": ..., "all": ...}}`` in package.json.

    With ``single_value=True`` the property holds one string tracking the
    ``all`` hash, as older releases wrote it.
    """

    def __init__(
        self,
        path: Path,
        property_name: str = DEFAULT_PACKAGE_JSON_PROPERTY,
        *,
        single_value: bool = False,
    ) -> None:
        self.path = Path(path)
        self.property_name = property_name
        self.single_value = single_value
        self.name = f"{self.path}#{property_name}"

    def read(self) -> list[StoredValue]:
        doc = read_json_document(self.path) or {}
        raw = doc.get(self.property_name)

        if self.single_value or isinstance(raw, str):
            return [
                StoredValue(
                    field=self.property_name,
                    platform=Platform.ALL,
                    value=as_checkpoint_value(raw if isinstance(raw, str) else None),
                )
            ]

        values = raw if isinstance(raw, dict) else {}
        return [
            StoredValue(
                field=f"{self.property_name}.{p.value}",
                platform=p,
                value=as_checkpoint_value(values.get(p.value)),
            )
            for p in PLATFORMS
        ]

    def write(self, fingerprint: Fingerprint) -> None:
        doc = load_json_for_update(self.path)
        if self.single_value:
            doc[self.property_name] = fingerprint.all
        else:
            doc[self.property_name] = fingerprint.as_dict()
        write_json_document(self.path, doc)
