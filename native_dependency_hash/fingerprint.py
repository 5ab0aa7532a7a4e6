"""FingerprintEngine: compose module identities, app config and native files into digests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, Sequence

import structlog

from native_dependency_hash.app_config.loader import AppConfigLoader
from native_dependency_hash.app_config.normalizer import ConfigNormalizer
from native_dependency_hash.config import DEFAULT_PACKAGE_JSON_PROPERTY, DEFAULT_PACKAGES_DIR
from native_dependency_hash.core.git import list_tracked_files
from native_dependency_hash.core.hashing import md5_hex
from native_dependency_hash.exceptions import WorkingTreeError
from native_dependency_hash.models import PLATFORMS, Fingerprint, Module, Platform
from native_dependency_hash.scanner import has_native_version, module_identities, scan_modules

log = structlog.get_logger(__name__)

FileLister = Callable[[Path], Awaitable[list[str]]]

IOS_PACKAGING_SUFFIX = ".podspec"
APP_PLUGIN_SUFFIX = "app.plugin.js"


@dataclass(frozen=True)
class FingerprintOptions:
    skip_node_modules: bool = False
    skip_app_config: bool = False
    skip_local_native_folders: bool = False


def is_native_file(path: str, platform: Platform) -> bool:
    """Whether a tracked path (relative, ``/``-separated) belongs to *platform*'s native surface."""
    ios = path.startswith("ios/") or path.endswith(IOS_PACKAGING_SUFFIX)
    android = path.startswith("android/")
    if platform is Platform.IOS:
        return ios
    if platform is Platform.ANDROID:
        return android
    return ios or android


def _digest_file(root: Path, rel: str) -> str:
    try:
        return md5_hex((root / rel).read_bytes())
    except OSError as e:
        raise WorkingTreeError(f"Cannot read tracked file {rel}: {e}") from e


async def hash_files(root: Path, paths: Sequence[str]) -> str:
    """Digest of ``path@md5`` pairs joined with ``,`` in the order given."""
    digests = await asyncio.gather(*(asyncio.to_thread(_digest_file, root, p) for p in paths))
    joined = ",".join(f"{p}@{d}" for p, d in zip(paths, digests))
    return md5_hex(joined)


def compose(config_digest: str, local_digest: str, identities: Iterable[str], plugin_digest: str) -> str:
    """The string that gets hashed. Changing this format changes every hash."""
    return f"app.json@{config_digest};local@{local_digest};{','.join(identities)};plugins@{plugin_digest}"


class FingerprintEngine:
    """Compute the per-platform native dependency hash of a project.

    Inputs (modules, app config, tracked files) are gathered once and shared
    by every platform computed with the same engine.
    """

    def __init__(
        self,
        root: Path,
        options: FingerprintOptions | None = None,
        *,
        packages_dirs: Sequence[str] = (DEFAULT_PACKAGES_DIR,),
        hash_property: str = DEFAULT_PACKAGE_JSON_PROPERTY,
        config_loader: AppConfigLoader | None = None,
        normalizer: ConfigNormalizer | None = None,
        file_lister: FileLister = list_tracked_files,
    ) -> None:
        self.root = Path(root)
        self.options = options or FingerprintOptions()
        self.packages_dirs = tuple(packages_dirs)
        self.hash_property = hash_property
        self.config_loader = config_loader or AppConfigLoader()
        self.normalizer = normalizer or ConfigNormalizer()
        self.file_lister = file_lister

        self._modules: list[Module] | None = None
        self._config: dict[str, Any] | None = None
        self._config_loaded = False
        self._tracked: list[str] | None = None

    # ── inputs ───────────────────────────────────────────────────────────

    async def modules(self) -> list[Module]:
        if self._modules is None:
            self._modules = await scan_modules(self.root, self.packages_dirs, self.hash_property)
        return self._modules

    async def app_config(self) -> dict[str, Any] | None:
        if not self._config_loaded:
            self._config = await self.config_loader.load(self.root)
            self._config_loaded = True
            if self._config is None:
                log.debug("fingerprint.no_app_config", root=str(self.root))
        return self._config

    async def tracked_files(self) -> list[str]:
        if self._tracked is None:
            self._tracked = await self.file_lister(self.root)
        return self._tracked

    # ── per-input digests ────────────────────────────────────────────────

    async def local_folders_digest(self, platform: Platform) -> str:
        if self.options.skip_local_native_folders:
            return ""
        if not has_native_version(platform, self.root):
            return ""
        files = [p for p in await self.tracked_files() if is_native_file(p, platform)]
        log.debug("fingerprint.local_files", platform=platform.value, count=len(files))
        return await hash_files(self.root, files)

    async def config_digest(self, platform: Platform) -> str:
        if self.options.skip_app_config:
            return ""
        return self.normalizer.digest(await self.app_config(), platform)

    async def identities(self, platform: Platform) -> list[str]:
        if self.options.skip_node_modules:
            return []
        return module_identities(await self.modules(), platform)

    async def plugin_digest(self) -> str:
        """Digest of every tracked config plugin, on every platform and under every option."""
        plugins = [p for p in await self.tracked_files() if p.endswith(APP_PLUGIN_SUFFIX)]
        return await hash_files(self.root, plugins)

    # ── public ───────────────────────────────────────────────────────────

    async def compute(self, platform: Platform) -> str:
        composed = compose(
            await self.config_digest(platform),
            await self.local_folders_digest(platform),
            await self.identities(platform),
            await self.plugin_digest(),
        )
        digest = md5_hex(composed)
        log.debug("fingerprint.composed", platform=platform.value, input=composed, hash=digest)
        return digest

    async def compute_all(self) -> Fingerprint:
        ios, android, all_ = [await self.compute(p) for p in PLATFORMS]
        return Fingerprint(ios=ios, android=android, all=all_)
