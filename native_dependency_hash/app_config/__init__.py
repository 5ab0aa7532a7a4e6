"""App config loading and normalization."""

from native_dependency_hash.app_config.allowlist import ConfigAllowList, EntitlementRedaction
from native_dependency_hash.app_config.loader import AppConfigLoader
from native_dependency_hash.app_config.normalizer import ConfigNormalizer, canonical_json, prune

__all__ = [
    "AppConfigLoader",
    "ConfigAllowList",
    "ConfigNormalizer",
    "EntitlementRedaction",
    "canonical_json",
    "prune",
]
