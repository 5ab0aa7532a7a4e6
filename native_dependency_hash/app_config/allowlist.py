"""Allow-lists of app config fields that affect the native build.

Each table maps a field name to ``True`` (retain) or ``False`` (drop). Fields
not present are dropped.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any

from native_dependency_hash.exceptions import ConfigurationError

DEFAULT_TOP_LEVEL: dict[str, bool] = {
    "ios": True,
    "android": True,
    "jsEngine": True,
    "plugins": True,
}

DEFAULT_IOS: dict[str, bool] = {
    "entitlements": True,
    "infoPlist": True,
    "jsEngine": True,
}

DEFAULT_ANDROID: dict[str, bool] = {
    "permissions": True,
    "blockedPermissions": True,
    "jsEngine": True,
}


@dataclass(frozen=True)
class EntitlementRedaction:
    """Remove the app's own bundle identifier from string entitlement values.

    Only entitlements whose key matches one of *keys* (fnmatch patterns) are
    touched.
    """

    name: str = "bundle-identifier"
    keys: tuple[str, ...] = ("*",)

    def applies_to(self, key: str) -> bool:
        return any(fnmatchcase(key, pattern) for pattern in self.keys)

    def apply(self, entitlements: dict[str, Any], bundle_identifier: str | None) -> dict[str, Any]:
        if not bundle_identifier:
            return dict(entitlements)
        return {
            key: (
                value.replace(bundle_identifier, "")
                if isinstance(value, str) and self.applies_to(key)
                else value
            )
            for key, value in entitlements.items()
        }


@dataclass(frozen=True)
class ConfigAllowList:
    top_level: dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_TOP_LEVEL))
    ios: dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_IOS))
    android: dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_ANDROID))
    redactions: tuple[EntitlementRedaction, ...] = (EntitlementRedaction(),)

    def with_build_numbers(self) -> ConfigAllowList:
        """Older releases also rebuilt on ``ios.buildNumber`` / ``android.versionCode`` changes."""
        return replace(
            self,
            ios={**self.ios, "buildNumber": True},
            android={**self.android, "versionCode": True},
        )

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ConfigAllowList:
        """Build from ``{"topLevel": {...}, "ios": {...}, "android": {...}, "redactions": [...]}``.

        Missing tables fall back to the defaults.
        """
        if not isinstance(data, dict):
            raise ValueError("allow-list must be a JSON object")
        redactions = data.get("redactions")
        return cls(
            top_level=_bool_table(data.get("topLevel"), DEFAULT_TOP_LEVEL),
            ios=_bool_table(data.get("ios"), DEFAULT_IOS),
            android=_bool_table(data.get("android"), DEFAULT_ANDROID),
            redactions=(
                tuple(
                    EntitlementRedaction(
                        name=r.get("name", "bundle-identifier"),
                        keys=tuple(r.get("keys", ("*",))),
                    )
                    for r in redactions
                )
                if redactions is not None
                else (EntitlementRedaction(),)
            ),
        )

    @classmethod
    def from_file(cls, path: Path) -> ConfigAllowList:
        try:
            return cls.from_mapping(json.loads(Path(path).read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Invalid allow-list file {path}: {e}") from e


def _bool_table(raw: Any, default: dict[str, bool]) -> dict[str, bool]:
    if raw is None:
        return dict(default)
    if not isinstance(raw, dict):
        raise ValueError(f"allow-list table must be an object, got {type(raw).__name__}")
    return {str(k): bool(v) for k, v in raw.items()}
