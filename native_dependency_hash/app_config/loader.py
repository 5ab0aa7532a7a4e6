"""Obtain the evaluated app config, from the config command or the static document."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Sequence

import structlog

from native_dependency_hash.config import DEFAULT_APP_CONFIG_FILE, DEFAULT_CONFIG_COMMAND

log = structlog.get_logger(__name__)

_STATIC_FALLBACKS = ("app.json", "app.config.json")


def unwrap(document: Any) -> dict[str, Any] | None:
    """Strip the ``{"expo": {...}}`` wrapper used by app.json."""
    if not isinstance(document, dict):
        return None
    inner = document.get("expo")
    if isinstance(inner, dict):
        return inner
    return document


class AppConfigLoader:
    """Load the app config as a plain dict, or ``None`` when there is none.

    Tries the evaluation command first (``npx expo config --json --type public``),
    then the static document. Failures are logged and never raised.
    """

    def __init__(
        self,
        command: Sequence[str] | None = DEFAULT_CONFIG_COMMAND,
        static_file: str = DEFAULT_APP_CONFIG_FILE,
    ) -> None:
        self.command = tuple(command) if command else None
        self.static_file = static_file

    async def load(self, root: Path) -> dict[str, Any] | None:
        if self.command:
            config = await self._evaluate(root, self.command)
            if config is not None:
                return config
        return self.load_static(root)

    async def _evaluate(self, root: Path, command: tuple[str, ...]) -> dict[str, Any] | None:
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(root),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            log.debug("app_config.command_unavailable", command=command[0], error=str(e))
            return None
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            log.debug(
                "app_config.command_failed",
                returncode=proc.returncode,
                stderr=stderr.decode(errors="replace").strip()[:500],
            )
            return None
        try:
            return unwrap(json.loads(stdout))
        except json.JSONDecodeError as e:
            log.debug("app_config.invalid_json", error=str(e))
            return None

    def load_static(self, root: Path) -> dict[str, Any] | None:
        names = [self.static_file] + [n for n in _STATIC_FALLBACKS if n != self.static_file]
        for name in names:
            path = Path(root) / name
            if not path.is_file():
                continue
            try:
                return unwrap(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, json.JSONDecodeError) as e:
                log.debug("app_config.static_unreadable", path=str(path), error=str(e))
                return None
        log.debug("app_config.not_found", root=str(root))
        return None
