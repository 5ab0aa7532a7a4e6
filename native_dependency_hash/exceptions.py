"""Custom exceptions for rn-native-hash."""

from __future__ import annotations

from pathlib import Path


class NativeHashError(Exception):
    """Base exception for all native hash errors."""


class SetupError(NativeHashError):
    """Raised when a packages directory is missing, i.e. dependencies are not installed."""

    def __init__(self, packages_dir: Path, reason: str = ""):
        self.packages_dir = packages_dir
        detail = f" ({reason})" if reason else ""
        super().__init__(
            f'Have you installed your packages? "{packages_dir}" does not seem like '
            f"a valid node_modules folder{detail}"
        )


class CorruptPackageError(NativeHashError):
    """Raised when an installed package's manifest cannot be read or parsed."""

    def __init__(self, package_path: Path, reason: str):
        self.package_path = package_path
        self.reason = reason
        super().__init__(f"Unreadable package manifest in {package_path}: {reason}")


class WorkingTreeError(NativeHashError):
    """Raised when a tracked native file cannot be read while hashing."""


class GitError(NativeHashError):
    """Raised when a git command fails."""


class CheckpointWriteError(NativeHashError):
    """Raised when a checkpoint store cannot be written."""


class ConfigurationError(NativeHashError):
    """Raised when a settings file (e.g. a custom allow-list) is unusable."""
