"""rn-native-hash: fingerprint the native surface of React Native apps and libraries."""

__version__ = "3.2.1"

from native_dependency_hash.api import (
    get_current_hash,
    list_native_modules,
    update_app,
    update_library,
    verify_app,
    verify_library,
)
from native_dependency_hash.fingerprint import FingerprintEngine, FingerprintOptions, hash_files
from native_dependency_hash.models import Fingerprint, Module, NativeHashOverride, Platform
from native_dependency_hash.reconcile import ReconciliationService, UpdateResult, VerifyResult
from native_dependency_hash.scanner import has_native_version, read_package_json, scan_modules

__all__ = [
    "Fingerprint",
    "FingerprintEngine",
    "FingerprintOptions",
    "Module",
    "NativeHashOverride",
    "Platform",
    "ReconciliationService",
    "UpdateResult",
    "VerifyResult",
    "get_current_hash",
    "has_native_version",
    "hash_files",
    "list_native_modules",
    "read_package_json",
    "scan_modules",
    "update_app",
    "update_library",
    "verify_app",
    "verify_library",
]
