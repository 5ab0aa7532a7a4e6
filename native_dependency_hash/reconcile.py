"""ReconciliationService: compare a fresh fingerprint against stored checkpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import structlog

from native_dependency_hash.checkpoints.base import CheckpointStore, StoredValue
from native_dependency_hash.models import Fingerprint

log = structlog.get_logger(__name__)


@dataclass
class SourceResult:
    """Outcome for a single checkpoint store."""

    store: str
    value_exists: bool
    has_changed: bool
    stored: list[StoredValue] = field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        return self.value_exists and not self.has_changed


@dataclass
class VerifyResult:
    value_exists: bool
    has_changed: bool
    fingerprint: Fingerprint
    sources: list[SourceResult] = field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        return self.value_exists and not self.has_changed


@dataclass
class UpdateResult:
    verify: VerifyResult
    written: list[str] = field(default_factory=list)
    up_to_date: list[str] = field(default_factory=list)


def compare_store(store: CheckpointStore, fingerprint: Fingerprint) -> SourceResult:
    """A store has changed if any set field differs from the fresh value; unset fields are absent."""
    stored = store.read()
    present = [s for s in stored if s.value is not None]
    differing = [s for s in present if s.value != fingerprint.for_platform(s.platform)]

    for s in differing:
        log.info(
            "reconcile.changed",
            store=store.name,
            field=s.field,
            stored=s.value,
            fresh=fingerprint.for_platform(s.platform),
        )
    return SourceResult(
        store=store.name,
        value_exists=bool(present),
        has_changed=bool(differing),
        stored=stored,
    )


class ReconciliationService:
    """Verify and update a fingerprint across every configured checkpoint store."""

    def __init__(self, stores: Sequence[CheckpointStore]) -> None:
        self.stores = list(stores)

    def verify(self, fingerprint: Fingerprint) -> VerifyResult:
        sources = [compare_store(store, fingerprint) for store in self.stores]
        result = VerifyResult(
            value_exists=any(s.value_exists for s in sources),
            has_changed=any(s.has_changed for s in sources),
            fingerprint=fingerprint,
            sources=sources,
        )
        log.debug(
            "reconcile.verified",
            value_exists=result.value_exists,
            has_changed=result.has_changed,
            stores=[s.store for s in sources],
        )
        return result

    def update(self, fingerprint: Fingerprint) -> UpdateResult:
        """Write *fingerprint* to every store unless the checkpoint is already up to date.

        Stores that already match are rewritten too, so fields they lacked get filled in.
        """
        verified = self.verify(fingerprint)
        result = UpdateResult(verify=verified)
        if verified.up_to_date:
            result.up_to_date = [s.store for s in verified.sources]
            log.debug("reconcile.up_to_date")
            return result

        for store, source in zip(self.stores, verified.sources):
            store.write(fingerprint)
            result.written.append(store.name)
            log.info("reconcile.written", store=store.name, existed=source.value_exists)
        return result
