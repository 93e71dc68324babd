"""Persistent record of a finished synchronization run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from doitsukani.domain.model.enums import RunState, SynonymPolicy


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class SyncRunRecord:
    id: UUID = field(default_factory=uuid4)
    session_id: int
    policy: SynonymPolicy
    state: RunState
    total_items: int
    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    started_at: datetime = field(default_factory=_utcnow)
    finished_at: datetime | None = None

    @property
    def attempted(self) -> int:
        return self.created + self.updated + self.failed + self.skipped

    @property
    def successful(self) -> int:
        return self.created + self.updated + self.skipped
