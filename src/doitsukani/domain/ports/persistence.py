"""Ports for persisting finished synchronization runs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from doitsukani.domain.model import SyncRunRecord


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class SyncRunRepository(Repository[SyncRunRecord], Protocol):
    """Persistence contract for the run ledger."""

    def list_recent(self, limit: int = 10) -> list[SyncRunRecord]: ...

    def latest(self) -> SyncRunRecord | None: ...


__all__ = ["Repository", "SyncRunRepository"]
