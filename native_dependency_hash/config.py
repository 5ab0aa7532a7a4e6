"""Runtime settings: environment defaults, overridden by CLI options."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PACKAGES_DIR = "node_modules"
DEFAULT_PACKAGE_JSON = "package.json"
DEFAULT_PACKAGE_JSON_PROPERTY = "rnNativeHash"
DEFAULT_SIDECAR_FILE = ".rn-native-hashrc"
DEFAULT_APP_CONFIG_FILE = "app.json"
DEFAULT_EAS_FILE = "eas.json"
DEFAULT_CONFIG_COMMAND: tuple[str, ...] = ("npx", "expo", "config", "--json", "--type", "public")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_config_command() -> tuple[str, ...] | None:
    """Parse NATIVE_HASH_CONFIG_COMMAND.

    Supported formats:
        unset                         → ``npx expo config --json --type public``
        NATIVE_HASH_CONFIG_COMMAND=none → never evaluate, read the static document only
        anything else                 → split with shell rules
    """
    raw = os.environ.get("NATIVE_HASH_CONFIG_COMMAND")
    if raw is None:
        return DEFAULT_CONFIG_COMMAND
    if raw.strip().lower() in {"", "none"}:
        return None
    return tuple(shlex.split(raw))


@dataclass
class Settings:
    packages_dirs: tuple[str, ...] = (DEFAULT_PACKAGES_DIR,)
    package_json: str = DEFAULT_PACKAGE_JSON
    package_json_property: str = DEFAULT_PACKAGE_JSON_PROPERTY
    sidecar_file: str = DEFAULT_SIDECAR_FILE
    app_config_file: str = DEFAULT_APP_CONFIG_FILE
    eas_file: str = DEFAULT_EAS_FILE
    config_command: tuple[str, ...] | None = DEFAULT_CONFIG_COMMAND
    allowlist_path: Path | None = None
    include_build_numbers: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        packages = os.environ.get("NATIVE_HASH_PACKAGES_DIRS")
        allowlist = os.environ.get("NATIVE_HASH_ALLOWLIST")
        return cls(
            packages_dirs=(
                tuple(p for p in packages.split(os.pathsep) if p)
                if packages
                else (DEFAULT_PACKAGES_DIR,)
            ),
            package_json_property=os.environ.get(
                "NATIVE_HASH_PACKAGE_JSON_PROPERTY", DEFAULT_PACKAGE_JSON_PROPERTY
            ),
            sidecar_file=os.environ.get("NATIVE_HASH_SIDECAR_FILE", DEFAULT_SIDECAR_FILE),
            app_config_file=os.environ.get("NATIVE_HASH_APP_CONFIG_FILE", DEFAULT_APP_CONFIG_FILE),
            eas_file=os.environ.get("NATIVE_HASH_EAS_FILE", DEFAULT_EAS_FILE),
            config_command=_env_config_command(),
            allowlist_path=Path(allowlist) if allowlist else None,
            include_build_numbers=_env_flag("NATIVE_HASH_INCLUDE_BUILD_NUMBERS"),
        )
