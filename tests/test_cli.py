"""Tests for CLI commands. git is mocked except where a test needs the real binary."""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from native_dependency_hash.cli import main

ENV = {"NATIVE_HASH_CONFIG_COMMAND": "none"}


@pytest.fixture
def git(lister_factory):
    """Patch git: clean working tree, tracked files as given to ``git(files)``."""
    patchers = []

    def _git(files: list[str], dirty: bool = False):
        for p in (
            patch("native_dependency_hash.api.list_tracked_files", lister_factory(files)),
            patch("native_dependency_hash.cli.is_dirty", AsyncMock(return_value=dirty)),
        ):
            p.start()
            patchers.append(p)

    yield _git
    for p in patchers:
        p.stop()


def _invoke(*args: str):
    return CliRunner().invoke(main, list(args), env=ENV)


class TestHash:
    def test_prints_hash_without_newline(self, node_modules: Path, git):
        git([])
        result = _invoke("hash", str(node_modules.parent))
        assert result.exit_code == 0, result.output
        assert len(result.output) == 32
        int(result.output, 16)

    def test_platforms_differ(self, node_modules: Path, git):
        git([])
        root = str(node_modules.parent)
        ios = _invoke("hash", root, "-p", "ios").output
        android = _invoke("hash", root, "--platform", "android").output
        assert ios != android

    def test_skip_flags(self, tmp_path: Path, git):
        git([])
        result = _invoke(
            "hash",
            str(tmp_path),
            "--skip-node-modules",
            "--skip-app-config",
            "--skip-local-native-folders",
        )
        assert result.exit_code == 0
        assert len(result.output) == 32

    def test_invalid_platform(self, tmp_path: Path, git):
        git([])
        result = _invoke("hash", str(tmp_path), "-p", "windows")
        assert result.exit_code == 2

    def test_missing_node_modules(self, tmp_path: Path, git):
        git([])
        result = _invoke("hash", str(tmp_path))
        assert result.exit_code == 1
        assert "[rn-native-hash] Have you installed your packages?" in result.output

    def test_verbose_flag(self, node_modules: Path, git):
        git([])
        result = CliRunner().invoke(main, ["-v", "hash", str(node_modules.parent)], env=ENV)
        assert result.exit_code == 0


    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_skip_flags_still_check_git(self, tmp_path: Path, lister_factory):
        with patch("native_dependency_hash.api.list_tracked_files", lister_factory([])):
            result = _invoke(
                "hash", str(tmp_path), "--skip-local-native-folders", "--skip-node-modules"
            )
        assert result.exit_code == 1
        assert "[rn-native-hash] git command failed" in result.output


class TestList:
    def test_lists_identities(self, node_modules: Path, git):
        git([])
        result = _invoke("list", str(node_modules.parent), "-p", "android")
        assert result.exit_code == 0
        assert result.output.split("\n") == [
            "android-module@0.0.2",
            "android-module-with-hash@9bf8dfcb0b6dd11b8f2c817eec217651",
            "native-module@0.0.2",
            "native-module-with-hash@Y",
        ]

    def test_custom_property(self, tmp_path: Path, package_factory, git):
        git([])
        package_factory(
            tmp_path / "node_modules", "lib", ios=True, native_hash={"all": "H"}, hash_property="nh"
        )
        result = _invoke("list", str(tmp_path), "--package-json-property", "nh")
        assert result.output == "lib@H"

    def test_extra_packages_dir(self, tmp_path: Path, package_factory, git):
        git([])
        package_factory(tmp_path / "node_modules", "a", ios=True)
        package_factory(tmp_path / "packages", "b", android=True)
        result = _invoke(
            "list", str(tmp_path), "--packages-dir", "node_modules", "--packages-dir", "packages"
        )
        assert result.output == "a@0.0.2\nb@0.0.2"


class TestLibraryCommands:
    def test_verify_without_hash(self, library: Path, library_files, git):
        git(library_files)
        result = _invoke("verify-library", str(library))
        assert result.exit_code == 1
        assert "No previous hash found" in result.output
        assert "update-library" in result.output

    def test_update_then_verify(self, library: Path, library_files, git):
        git(library_files)

        updated = _invoke("update-library", str(library))
        assert updated.exit_code == 0, updated.output
        assert "Saving to" in updated.output

        verified = _invoke("verify-library", str(library))
        assert verified.exit_code == 0
        assert "[rn-native-hash] Hash up to date" in verified.output

    def test_second_update_reports_up_to_date(self, library: Path, library_files, git):
        git(library_files)
        _invoke("update-library", str(library))
        result = _invoke("update-library", str(library))
        assert "Up to date:" in result.output
        assert "Saving to" not in result.output

    def test_change_detected(self, library: Path, library_files, git):
        git(library_files)
        _invoke("update-library", str(library))
        (library / "ios" / "MyLib.swift").write_text("class MyLib2 {}\n")

        result = _invoke("verify-library", str(library))
        assert result.exit_code == 1
        assert "Hash has changed" in result.output
        assert "rnNativeHash.ios" in result.output

        updated = _invoke("update-library", str(library))
        assert "Updating" in updated.output

    def test_bare_file_option_uses_default_name(self, library: Path, library_files, git):
        git(library_files)
        result = _invoke("update-library", str(library), "-f")
        assert result.exit_code == 0, result.output
        assert (library / ".rn-native-hashrc").is_file()

    def test_file_option_with_name(self, library: Path, library_files, git):
        git(library_files)
        _invoke("update-library", str(library), "--file", ".native-hash")
        assert (library / ".native-hash").is_file()

    def test_dirty_tree_refused(self, library: Path, library_files, git):
        git(library_files, dirty=True)
        result = _invoke("update-library", str(library))
        assert result.exit_code == 1
        assert "dirty" in result.output
        assert "rnNativeHash" not in json.loads((library / "package.json").read_text())

    def test_allow_dirty(self, library: Path, library_files, git):
        git(library_files, dirty=True)
        result = _invoke("update-library", str(library), "--allow-dirty")
        assert result.exit_code == 0


class TestAppCommands:
    @pytest.fixture
    def app(self, node_modules: Path, json_writer, git) -> Path:
        root = node_modules.parent
        json_writer(root / "app.json", {"expo": {"name": "app", "android": {"permissions": []}}})
        json_writer(root / "eas.json", {"build": {"production": {}}})
        git(["app.json", "eas.json"])
        return root

    def test_verify_without_hash(self, app: Path):
        result = _invoke("verify-app", str(app))
        assert result.exit_code == 1
        assert "looked in Expo Config" in result.output

    def test_update_then_verify(self, app: Path):
        assert _invoke("update-app", str(app), "-e").exit_code == 0

        expo = json.loads((app / "app.json").read_text())["expo"]
        channel = json.loads((app / "eas.json").read_text())["build"]["production"]["releaseChannel"]
        assert channel == expo["runtimeVersion"]

        result = _invoke("verify-app", str(app), "-e")
        assert result.exit_code == 0
        assert "Hash up to date" in result.output

    def test_stale_eas_profile(self, app: Path, json_writer):
        _invoke("update-app", str(app), "--eas")
        json_writer(app / "eas.json", {"build": {"production": {"releaseChannel": "old"}}})

        assert _invoke("verify-app", str(app)).exit_code == 0
        result = _invoke("verify-app", str(app), "--eas")
        assert result.exit_code == 1
        assert "build.production.releaseChannel" in result.output

    def test_lone_runtime_version_is_up_to_date(self, app: Path, json_writer):
        fresh = _invoke("hash", str(app)).output
        doc = json.loads((app / "app.json").read_text())
        doc["expo"]["runtimeVersion"] = fresh
        json_writer(app / "app.json", doc)

        result = _invoke("verify-app", str(app))
        assert result.exit_code == 0, result.output
        assert "Hash up to date" in result.output

    def test_dynamic_config_cannot_be_updated(self, node_modules: Path, git):
        git([])
        result = _invoke("update-app", str(node_modules.parent))
        assert result.exit_code == 1
        assert "runtimeVersion manually" in result.output
