"""ConfigNormalizer: reduce the app config to native-affecting fields and digest it."""

from __future__ import annotations

import copy
import json
from typing import Any

from native_dependency_hash.app_config.allowlist import ConfigAllowList
from native_dependency_hash.core.hashing import md5_hex
from native_dependency_hash.models import Platform

_PLATFORM_KEYS = {Platform.IOS: "ios", Platform.ANDROID: "android"}


def _keep(mapping: dict[str, Any], allowed: dict[str, bool]) -> dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in mapping.items() if allowed.get(k, False)}


def prune(
    config: dict[str, Any],
    allowlist: ConfigAllowList,
    platform: Platform = Platform.ALL,
) -> dict[str, Any]:
    """Return a new config holding only allow-listed fields for *platform*.

    *config* is left untouched.
    """
    pruned = _keep(config, allowlist.top_level)

    # The other platform's sub-object never affects this platform's build
    for other, key in _PLATFORM_KEYS.items():
        if platform is not Platform.ALL and platform is not other:
            pruned.pop(key, None)

    ios = pruned.get("ios")
    if isinstance(ios, dict):
        ios = _keep(ios, allowlist.ios)
        entitlements = ios.get("entitlements")
        if isinstance(entitlements, dict):
            raw_ios = config.get("ios")
            bundle_identifier = (
                raw_ios.get("bundleIdentifier") if isinstance(raw_ios, dict) else None
            )
            for rule in allowlist.redactions:
                entitlements = rule.apply(entitlements, bundle_identifier)
            ios["entitlements"] = entitlements
        pruned["ios"] = ios

    android = pruned.get("android")
    if isinstance(android, dict):
        pruned["android"] = _keep(android, allowlist.android)

    # An emptied section hashes the same as a missing one, so writing
    # ios.runtimeVersion into a config without "ios" leaves the hash alone
    for key in _PLATFORM_KEYS.values():
        if pruned.get(key) == {}:
            del pruned[key]

    return pruned


def canonical_json(obj: Any) -> str:
    """Sorted-key, compact JSON so equal objects serialize byte-identically."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class ConfigNormalizer:
    def __init__(self, allowlist: ConfigAllowList | None = None) -> None:
        self.allowlist = allowlist or ConfigAllowList()

    def normalize(self, config: dict[str, Any], platform: Platform) -> str:
        return canonical_json(prune(config, self.allowlist, platform))

    def digest(self, config: dict[str, Any] | None, platform: Platform) -> str:
        """Digest of the normalized config; empty string when there is no config."""
        if config is None:
            return ""
        return md5_hex(self.normalize(config, platform))
