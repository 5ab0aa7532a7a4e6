"""One-line checkpoint file (``.rn-native-hashrc``)."""

from __future__ import annotations

from pathlib import Path

import structlog

from native_dependency_hash.checkpoints.base import StoredValue, atomic_write_text
from native_dependency_hash.models import Fingerprint, Platform

log = structlog.get_logger(__name__)


class SidecarFileStore:
    def __init__(self, path: Path, platform: Platform = Platform.ALL) -> None:
        self.path = Path(path)
        self.platform = platform
        self.name = str(self.path)

    def read(self) -> list[StoredValue]:
        log.debug("checkpoint.read", path=str(self.path))
        try:
            first_line = self.path.read_text(encoding="utf-8").split("\n")[0].strip()
        except OSError as e:
            log.debug("checkpoint.missing", path=str(self.path), error=str(e))
            first_line = ""
        return [StoredValue(field=self.path.name, platform=self.platform, value=first_line or None)]

    def write(self, fingerprint: Fingerprint) -> None:
        atomic_write_text(self.path, fingerprint.for_platform(self.platform) + "\n")
