"""Shared pytest fixtures for rn-native-hash tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


def make_package(
    packages_dir: Path,
    name: str,
    version: str = "0.0.2",
    *,
    ios: bool = False,
    android: bool = False,
    native_hash: dict | str | None = None,
    hash_property: str = "rnNativeHash",
) -> Path:
    """Create ``<packages_dir>/<name>/package.json`` plus optional ios/android folders."""
    path = packages_dir / name
    path.mkdir(parents=True)
    manifest: dict = {"name": name, "version": version}
    if native_hash is not None:
        manifest[hash_property] = native_hash
    (path / "package.json").write_text(json.dumps(manifest))
    if ios:
        (path / "ios").mkdir()
    if android:
        (path / "android").mkdir()
    return path


def write_json(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")
    return path


def static_lister(files: list[str]):
    """A file lister returning a fixed list, standing in for ``git ls-files``."""

    async def _lister(root: Path) -> list[str]:
        return list(files)

    return _lister


@pytest.fixture
def package_factory():
    return make_package


@pytest.fixture
def json_writer():
    return write_json


@pytest.fixture
def lister_factory():
    return static_lister


@pytest.fixture
def node_modules(tmp_path: Path) -> Path:
    """A node_modules tree mirroring a typical app install."""
    nm = tmp_path / "node_modules"
    nm.mkdir()
    (nm / ".bin").mkdir()
    (nm / ".package-lock.json").write_text("{}")
    make_package(nm, "android-module", android=True)
    make_package(
        nm,
        "android-module-with-hash",
        android=True,
        native_hash={
            "ios": "55ced75517884f5f86e2c36097f78e33",
            "android": "9bf8dfcb0b6dd11b8f2c817eec217651",
            "all": "9bf8dfcb0b6dd11b8f2c817eec217651",
        },
    )
    make_package(nm, "ios-module", ios=True)
    make_package(nm, "js-module", version="0.0.1")
    make_package(nm, "native-module", ios=True, android=True)
    make_package(
        nm,
        "native-module-with-hash",
        ios=True,
        android=True,
        native_hash={"ios": "X", "android": "Y", "all": "Z"},
    )
    make_package(nm, "@scope/scoped-native", version="1.2.3", ios=True)
    make_package(nm, "@scope/scoped-js", version="4.5.6")
    (nm / "@scope" / ".DS_Store").write_text("")
    return nm


@pytest.fixture
def library(tmp_path: Path) -> Path:
    """A library checkout with native folders, a podspec and a config plugin."""
    root = tmp_path / "my-lib"
    (root / "ios").mkdir(parents=True)
    (root / "android" / "src").mkdir(parents=True)
    (root / "ios" / "MyLib.swift").write_text("class MyLib {}\n")
    (root / "android" / "src" / "MyLib.kt").write_text("class MyLib\n")
    (root / "my-lib.podspec").write_text("Pod::Spec.new\n")
    (root / "app.plugin.js").write_text("module.exports = () => {}\n")
    (root / "index.js").write_text("export default {}\n")
    write_json(root / "package.json", {"name": "my-lib", "version": "1.0.0"})
    return root


@pytest.fixture
def library_files() -> list[str]:
    """What `git ls-files` would report for the library fixture."""
    return [
        "android/src/MyLib.kt",
        "app.plugin.js",
        "index.js",
        "ios/MyLib.swift",
        "my-lib.podspec",
        "package.json",
    ]
