"""Data models shared by the scanner, fingerprint engine and reconciliation."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class Platform(str, enum.Enum):
    IOS = "ios"
    ANDROID = "android"
    ALL = "all"


PLATFORMS: tuple[Platform, ...] = (Platform.IOS, Platform.ANDROID, Platform.ALL)


class NativeHashOverride(BaseModel):
    """Hash a package author embeds in package.json to signal native changes independent of semver."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    ios: str | None = None
    android: str | None = None
    all: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _expand_single_value(cls, data: Any) -> Any:
        # Older releases wrote one string for every platform
        if isinstance(data, str):
            return {"ios": data, "android": data, "all": data}
        return data

    def for_platform(self, platform: Platform) -> str | None:
        return getattr(self, platform.value) or None


class PackageManifest(BaseModel):
    """The parts of a package.json the scanner cares about."""

    model_config = ConfigDict(frozen=True)

    version: str = ""
    native_hash: NativeHashOverride | None = None

    @classmethod
    def from_document(cls, data: Any, hash_property: str) -> PackageManifest:
        if not isinstance(data, dict):
            raise ValueError("package.json is not a JSON object")
        return cls.model_validate(
            {
                "version": data.get("version") or "",
                "native_hash": data.get(hash_property),
            }
        )


@dataclass(frozen=True)
class Module:
    """An installed package discovered in a packages directory."""

    name: str
    path: Path
    version: str
    is_native_android: bool
    is_native_ios: bool
    native_hash: NativeHashOverride | None = None

    @property
    def is_native(self) -> bool:
        return self.is_native_android or self.is_native_ios

    def is_native_for(self, platform: Platform) -> bool:
        if platform is Platform.IOS:
            return self.is_native_ios
        if platform is Platform.ANDROID:
            return self.is_native_android
        return self.is_native

    def identity(self, platform: Platform) -> str:
        """``name@override`` when the package declares one for *platform*, else ``name@version``."""
        override = self.native_hash.for_platform(platform) if self.native_hash else None
        return f"{self.name}@{override or self.version}"


@dataclass(frozen=True)
class Fingerprint:
    """One digest per platform."""

    ios: str
    android: str
    all: str

    def for_platform(self, platform: Platform) -> str:
        return getattr(self, platform.value)

    def as_dict(self) -> dict[str, str]:
        return {"ios": self.ios, "android": self.android, "all": self.all}
