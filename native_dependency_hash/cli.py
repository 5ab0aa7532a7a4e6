"""CLI entry point: rn-native-hash.

Subcommands:
    rn-native-hash verify-app [ROOT]        # exit 1 if the app's runtimeVersion is stale
    rn-native-hash update-app [ROOT]        # write runtimeVersion to app.json
    rn-native-hash verify-library [ROOT]    # exit 1 if package.json rnNativeHash is stale
    rn-native-hash update-library [ROOT]    # write rnNativeHash to package.json
    rn-native-hash list [ROOT]              # native modules, one identity per line
    rn-native-hash hash [ROOT]              # the hash alone, for piping
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Coroutine, NoReturn, TypeVar

import click
import structlog

from native_dependency_hash import api
from native_dependency_hash.config import Settings
from native_dependency_hash.core.git import is_dirty
from native_dependency_hash.core.logging import setup_logging
from native_dependency_hash.exceptions import NativeHashError
from native_dependency_hash.fingerprint import FingerprintOptions
from native_dependency_hash.models import Platform
from native_dependency_hash.reconcile import UpdateResult, VerifyResult

log = structlog.get_logger(__name__)

PREFIX = "[rn-native-hash]"

T = TypeVar("T")


def _fail(message: str) -> NoReturn:
    click.secho(f"{PREFIX} {message}", fg="red", err=True)
    sys.exit(1)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, turning library errors into exit code 1."""
    try:
        return asyncio.run(coro)
    except NativeHashError as e:
        _fail(str(e))


def _resolve_root(root: str) -> Path:
    return Path(root).expanduser().resolve()


def _ensure_clean(root: Path, allow_dirty: bool) -> None:
    if allow_dirty:
        return
    if _run(is_dirty(root)):
        _fail(
            "Git working copy is dirty. Please commit or stash your changes "
            "before running this command (or pass --allow-dirty)."
        )


def _settings(ctx: click.Context, packages_dirs: tuple[str, ...], property_name: str | None) -> Settings:
    settings: Settings = ctx.obj["settings"]
    overrides: dict[str, Any] = {}
    if packages_dirs:
        overrides["packages_dirs"] = packages_dirs
    if property_name:
        overrides["package_json_property"] = property_name
    return replace(settings, **overrides) if overrides else settings


def _common_options(f: Callable[..., Any]) -> Callable[..., Any]:
    f = click.argument("root", default=".", type=click.Path(file_okay=False))(f)
    f = click.option(
        "--packages-dir",
        "packages_dirs",
        multiple=True,
        help="Packages directory relative to ROOT (repeatable, default: node_modules)",
    )(f)
    f = click.option(
        "--package-json-property",
        default=None,
        help="package.json property holding native hashes (default: rnNativeHash)",
    )(f)
    f = click.option(
        "--allow-dirty", is_flag=True, help="Do not refuse to run on a dirty git working copy"
    )(f)
    return f


_platform_option = click.option(
    "-p",
    "--platform",
    type=click.Choice([p.value for p in Platform]),
    default=Platform.ALL.value,
    show_default=True,
    help="ios, android or all",
)

# Given bare, these fall back to the file named in Settings
_file_option = click.option(
    "-f",
    "--file",
    "sidecar_file",
    is_flag=False,
    flag_value="",
    default=None,
    help="Also check/write a one-line hash file (bare: .rn-native-hashrc)",
)

_eas_option = click.option(
    "-e",
    "--eas",
    "eas_file",
    is_flag=False,
    flag_value="",
    default=None,
    help="Also check/write releaseChannel of every build profile (bare: eas.json)",
)


def _checkpoint_file(value: str | None, default: str) -> str | None:
    if value is None:
        return None
    return value or default


def _report_verify(result: VerifyResult, looked_in: str, update_command: str) -> None:
    for source in result.sources:
        for stored in source.stored:
            fresh = result.fingerprint.for_platform(stored.platform)
            if stored.value is not None and stored.value != fresh:
                click.secho(
                    f"{PREFIX} hash has changed in {source.store} {stored.field}! "
                    f"(was {stored.value}, now {fresh})",
                    fg="red",
                    err=True,
                )

    if not result.value_exists:
        _fail(
            f'No previous hash found, looked in {looked_in}. '
            f'Use "rn-native-hash {update_command}" to create a new hash.'
        )
    if result.has_changed:
        _fail("Hash has changed")
    click.secho(f"{PREFIX} Hash up to date", fg="green")


def _report_update(result: UpdateResult) -> None:
    existed = {s.store: s.value_exists for s in result.verify.sources}
    for name in result.written:
        if existed.get(name):
            click.secho(f"{PREFIX} Updating {name}", fg="yellow")
        else:
            click.secho(f"{PREFIX} Saving to {name}", fg="green")
    for name in result.up_to_date:
        click.secho(f"{PREFIX} Up to date: {name}", fg="green")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """rn-native-hash: detect when a React Native app or library needs a new native build."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings.from_env()


@main.command("verify-app")
@_common_options
@_file_option
@_eas_option
@click.pass_context
def verify_app(
    ctx: click.Context,
    root: str,
    packages_dirs: tuple[str, ...],
    package_json_property: str | None,
    allow_dirty: bool,
    sidecar_file: str | None,
    eas_file: str | None,
) -> None:
    """Check if the app's native hash has changed."""
    root_dir = _resolve_root(root)
    _ensure_clean(root_dir, allow_dirty)
    settings = _settings(ctx, packages_dirs, package_json_property)
    log.debug("cli.verify_app", root=str(root_dir))
    result = _run(
        api.verify_app(
            root_dir,
            settings,
            sidecar_file=_checkpoint_file(sidecar_file, settings.sidecar_file),
            eas_file=_checkpoint_file(eas_file, settings.eas_file),
        )
    )
    _report_verify(result, "Expo Config", "update-app")


@main.command("update-app")
@_common_options
@_file_option
@_eas_option
@click.pass_context
def update_app(
    ctx: click.Context,
    root: str,
    packages_dirs: tuple[str, ...],
    package_json_property: str | None,
    allow_dirty: bool,
    sidecar_file: str | None,
    eas_file: str | None,
) -> None:
    """Write the app's native hash to app.json runtimeVersion."""
    root_dir = _resolve_root(root)
    _ensure_clean(root_dir, allow_dirty)
    settings = _settings(ctx, packages_dirs, package_json_property)
    log.debug("cli.update_app", root=str(root_dir))
    result = _run(
        api.update_app(
            root_dir,
            settings,
            sidecar_file=_checkpoint_file(sidecar_file, settings.sidecar_file),
            eas_file=_checkpoint_file(eas_file, settings.eas_file),
        )
    )
    _report_update(result)


@main.command("verify-library")
@_common_options
@_file_option
@click.pass_context
def verify_library(
    ctx: click.Context,
    root: str,
    packages_dirs: tuple[str, ...],
    package_json_property: str | None,
    allow_dirty: bool,
    sidecar_file: str | None,
) -> None:
    """Check if the library's native hash in package.json has changed."""
    root_dir = _resolve_root(root)
    _ensure_clean(root_dir, allow_dirty)
    settings = _settings(ctx, packages_dirs, package_json_property)
    log.debug("cli.verify_library", root=str(root_dir))
    result = _run(
        api.verify_library(
            root_dir,
            settings,
            sidecar_file=_checkpoint_file(sidecar_file, settings.sidecar_file),
        )
    )
    _report_verify(result, settings.package_json, "update-library")


@main.command("update-library")
@_common_options
@_file_option
@click.pass_context
def update_library(
    ctx: click.Context,
    root: str,
    packages_dirs: tuple[str, ...],
    package_json_property: str | None,
    allow_dirty: bool,
    sidecar_file: str | None,
) -> None:
    """Write the library's native hash to package.json."""
    root_dir = _resolve_root(root)
    _ensure_clean(root_dir, allow_dirty)
    settings = _settings(ctx, packages_dirs, package_json_property)
    log.debug("cli.update_library", root=str(root_dir))
    result = _run(
        api.update_library(
            root_dir,
            settings,
            sidecar_file=_checkpoint_file(sidecar_file, settings.sidecar_file),
        )
    )
    _report_update(result)


@main.command("list")
@_common_options
@_platform_option
@click.pass_context
def list_modules(
    ctx: click.Context,
    root: str,
    packages_dirs: tuple[str, ...],
    package_json_property: str | None,
    allow_dirty: bool,
    platform: str,
) -> None:
    """List all native dependencies."""
    root_dir = _resolve_root(root)
    _ensure_clean(root_dir, allow_dirty)
    settings = _settings(ctx, packages_dirs, package_json_property)
    target = Platform(platform)
    modules = _run(api.list_native_modules(root_dir, target, settings))
    click.echo("\n".join(m.identity(target) for m in modules), nl=False)


@main.command("hash")
@_common_options
@_platform_option
@click.option("--skip-node-modules", is_flag=True, help="Skip node_modules, useful for libraries")
@click.option("--skip-app-config", is_flag=True, help="Skip the app config")
@click.option("--skip-local-native-folders", is_flag=True, help="Skip local ios/android files")
@click.pass_context
def hash_cmd(
    ctx: click.Context,
    root: str,
    packages_dirs: tuple[str, ...],
    package_json_property: str | None,
    allow_dirty: bool,
    platform: str,
    skip_node_modules: bool,
    skip_app_config: bool,
    skip_local_native_folders: bool,
) -> None:
    """Print the hash for piping."""
    root_dir = _resolve_root(root)
    _ensure_clean(root_dir, allow_dirty)
    settings = _settings(ctx, packages_dirs, package_json_property)
    options = FingerprintOptions(
        skip_node_modules=skip_node_modules,
        skip_app_config=skip_app_config,
        skip_local_native_folders=skip_local_native_folders,
    )
    digest = _run(api.get_current_hash(root_dir, Platform(platform), options, settings))
    click.echo(digest, nl=False)


if __name__ == "__main__":
    main()
