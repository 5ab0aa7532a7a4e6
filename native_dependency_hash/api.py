"""Facade: the operations the CLI exposes, usable from Python.

Scenarios:
    1. App: node_modules + app config + local native folders, checkpoint in app.json runtimeVersion
    2. Library: local native folders only, checkpoint in package.json
    3. Plain hash / module listing for piping
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from native_dependency_hash.app_config.allowlist import ConfigAllowList
from native_dependency_hash.app_config.loader import AppConfigLoader
from native_dependency_hash.app_config.normalizer import ConfigNormalizer
from native_dependency_hash.checkpoints import (
    AppConfigStore,
    CheckpointStore,
    EasProfileStore,
    PackageJsonStore,
    SidecarFileStore,
)
from native_dependency_hash.config import Settings
from native_dependency_hash.core.git import list_tracked_files
from native_dependency_hash.fingerprint import FileLister, FingerprintEngine, FingerprintOptions
from native_dependency_hash.models import Module, Platform
from native_dependency_hash.reconcile import ReconciliationService, UpdateResult, VerifyResult
from native_dependency_hash.scanner import filter_native

APP_OPTIONS = FingerprintOptions()
LIBRARY_OPTIONS = FingerprintOptions(skip_node_modules=True, skip_app_config=True)


def build_engine(
    root: Path,
    options: FingerprintOptions | None = None,
    settings: Settings | None = None,
    *,
    file_lister: FileLister | None = None,
) -> FingerprintEngine:
    settings = settings or Settings()
    allowlist = (
        ConfigAllowList.from_file(settings.allowlist_path)
        if settings.allowlist_path
        else ConfigAllowList()
    )
    if settings.include_build_numbers:
        allowlist = allowlist.with_build_numbers()
    return FingerprintEngine(
        Path(root),
        options,
        packages_dirs=settings.packages_dirs,
        hash_property=settings.package_json_property,
        config_loader=AppConfigLoader(settings.config_command, settings.app_config_file),
        normalizer=ConfigNormalizer(allowlist),
        file_lister=file_lister or list_tracked_files,
    )


async def get_current_hash(
    root: Path,
    platform: Platform = Platform.ALL,
    options: FingerprintOptions | None = None,
    settings: Settings | None = None,
) -> str:
    return await build_engine(root, options, settings).compute(platform)


async def list_native_modules(
    root: Path,
    platform: Platform = Platform.ALL,
    settings: Settings | None = None,
) -> list[Module]:
    engine = build_engine(root, APP_OPTIONS, settings)
    return filter_native(await engine.modules(), platform)


# ── app ──────────────────────────────────────────────────────────────────


def _app_stores(
    root: Path,
    settings: Settings,
    evaluated: dict[str, Any] | None,
    sidecar_file: str | None,
    eas_file: str | None,
) -> list[CheckpointStore]:
    stores: list[CheckpointStore] = [AppConfigStore(root / settings.app_config_file, evaluated)]
    if sidecar_file:
        stores.append(SidecarFileStore(root / sidecar_file))
    if eas_file:
        stores.append(EasProfileStore(root / eas_file))
    return stores


async def verify_app(
    root: Path,
    settings: Settings | None = None,
    *,
    sidecar_file: str | None = None,
    eas_file: str | None = None,
) -> VerifyResult:
    settings = settings or Settings()
    engine = build_engine(root, APP_OPTIONS, settings)
    fingerprint = await engine.compute_all()
    stores = _app_stores(
        engine.root, settings, await engine.app_config(), sidecar_file, eas_file
    )
    return ReconciliationService(stores).verify(fingerprint)


async def update_app(
    root: Path,
    settings: Settings | None = None,
    *,
    sidecar_file: str | None = None,
    eas_file: str | None = None,
) -> UpdateResult:
    settings = settings or Settings()
    engine = build_engine(root, APP_OPTIONS, settings)
    fingerprint = await engine.compute_all()
    # Writes go to the static document, so compare against it rather than the evaluated config
    stores = _app_stores(engine.root, settings, None, sidecar_file, eas_file)
    return ReconciliationService(stores).update(fingerprint)


# ── library ──────────────────────────────────────────────────────────────


def _library_stores(root: Path, settings: Settings, sidecar_file: str | None) -> list[CheckpointStore]:
    stores: list[CheckpointStore] = [
        PackageJsonStore(root / settings.package_json, settings.package_json_property)
    ]
    if sidecar_file:
        stores.append(SidecarFileStore(root / sidecar_file))
    return stores


async def verify_library(
    root: Path,
    settings: Settings | None = None,
    *,
    sidecar_file: str | None = None,
) -> VerifyResult:
    settings = settings or Settings()
    fingerprint = await build_engine(root, LIBRARY_OPTIONS, settings).compute_all()
    return ReconciliationService(_library_stores(Path(root), settings, sidecar_file)).verify(
        fingerprint
    )


async def update_library(
    root: Path,
    settings: Settings | None = None,
    *,
    sidecar_file: str | None = None,
) -> UpdateResult:
    settings = settings or Settings()
    fingerprint = await build_engine(root, LIBRARY_OPTIONS, settings).compute_all()
    return ReconciliationService(_library_stores(Path(root), settings, sidecar_file)).update(
        fingerprint
    )
