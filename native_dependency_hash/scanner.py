"""Package scanner: find installed packages and classify them as native per platform."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Iterable

import structlog
from pydantic import ValidationError

from native_dependency_hash.config import DEFAULT_PACKAGE_JSON_PROPERTY, DEFAULT_PACKAGES_DIR
from native_dependency_hash.exceptions import CorruptPackageError, SetupError
from native_dependency_hash.models import Module, PackageManifest, Platform

log = structlog.get_logger(__name__)

_NATIVE_DIRS: dict[Platform, tuple[str, ...]] = {
    Platform.IOS: ("ios",),
    Platform.ANDROID: ("android",),
    Platform.ALL: ("ios", "android"),
}


def has_native_version(platform: Platform, path: Path) -> bool:
    """True if the package at *path* ships a native folder for *platform*."""
    return any((path / d).is_dir() for d in _NATIVE_DIRS[platform])


def read_package_json(
    path: Path, hash_property: str = DEFAULT_PACKAGE_JSON_PROPERTY
) -> PackageManifest:
    """Read ``package.json`` under *path*; raises CorruptPackageError if unusable."""
    manifest = path / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
        return PackageManifest.from_document(data, hash_property)
    except OSError as e:
        raise CorruptPackageError(path, f"cannot read package.json: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorruptPackageError(path, f"invalid JSON: {e}") from e
    except (ValidationError, ValueError) as e:
        raise CorruptPackageError(path, str(e)) from e


def _list_dir(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError as e:
        raise SetupError(directory, str(e)) from e


def discover_packages(packages_dir: Path) -> list[tuple[str, Path]]:
    """List ``(name, path)`` for every package in *packages_dir*, including ``@scope/name``."""
    found: list[tuple[str, Path]] = []
    for entry in _list_dir(packages_dir):
        if entry.name.startswith("."):
            continue
        if entry.name.startswith("@"):
            for sub in _list_dir(entry):
                if sub.name.startswith(".") or not sub.is_dir():
                    continue
                found.append((f"{entry.name}/{sub.name}", sub))
            continue
        if not entry.is_dir():
            continue
        found.append((entry.name, entry))
    return found


def _load_module(name: str, path: Path, hash_property: str) -> Module:
    manifest = read_package_json(path, hash_property)
    return Module(
        name=name,
        path=path,
        version=manifest.version,
        is_native_android=has_native_version(Platform.ANDROID, path),
        is_native_ios=has_native_version(Platform.IOS, path),
        native_hash=manifest.native_hash,
    )


async def scan_modules(
    root: Path,
    packages_dirs: Iterable[str] = (DEFAULT_PACKAGES_DIR,),
    hash_property: str = DEFAULT_PACKAGE_JSON_PROPERTY,
) -> list[Module]:
    """Scan every packages directory below *root* and return all modules sorted by name."""
    candidates: list[tuple[str, Path]] = []
    for packages_dir in packages_dirs:
        candidates.extend(discover_packages(Path(root) / packages_dir))

    modules = await asyncio.gather(
        *(asyncio.to_thread(_load_module, name, path, hash_property) for name, path in candidates)
    )
    result = sorted(modules, key=lambda m: m.name)

    log.debug(
        "scanner.scan_complete",
        root=str(root),
        total=len(result),
        native=sum(1 for m in result if m.is_native),
    )
    return result


def filter_native(modules: Iterable[Module], platform: Platform) -> list[Module]:
    """Modules native for *platform*, ordered by name."""
    return sorted((m for m in modules if m.is_native_for(platform)), key=lambda m: m.name)


def module_identities(modules: Iterable[Module], platform: Platform) -> list[str]:
    """Identity strings of the modules native for *platform*, ordered by module name."""
    return [m.identity(platform) for m in filter_native(modules, platform)]
