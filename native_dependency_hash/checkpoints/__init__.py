"""Checkpoint stores: places a previously computed fingerprint is persisted."""

from native_dependency_hash.checkpoints.app_config import AppConfigStore
from native_dependency_hash.checkpoints.base import CheckpointStore, StoredValue
from native_dependency_hash.checkpoints.eas import EasProfileStore
from native_dependency_hash.checkpoints.package_json import PackageJsonStore
from native_dependency_hash.checkpoints.sidecar import SidecarFileStore

__all__ = [
    "AppConfigStore",
    "CheckpointStore",
    "EasProfileStore",
    "PackageJsonStore",
    "SidecarFileStore",
    "StoredValue",
]
