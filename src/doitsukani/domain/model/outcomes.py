"""Per-item outcomes and the statistics they fold into."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import assert_never


@dataclass(frozen=True, slots=True)
class Created:
    item_id: int


@dataclass(frozen=True, slots=True)
class Updated:
    item_id: int


@dataclass(frozen=True, slots=True)
class Skipped:
    item_id: int


@dataclass(frozen=True, slots=True)
class Failed:
    item_id: int
    reason: str
    kind: str = "SyncError"


type Outcome = Created | Updated | Skipped | Failed


@dataclass(slots=True)
class SyncStats:
    """Outcome counters for a single session.

    Counters only ever grow, one outcome at a time, through :meth:`record`.
    """

    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def successful(self) -> int:
        return self.created + self.updated + self.skipped

    @property
    def total(self) -> int:
        return self.created + self.updated + self.failed + self.skipped

    def record(self, outcome: Outcome) -> None:
        match outcome:
            case Created():
                self.created += 1
            case Updated():
                self.updated += 1
            case Skipped():
                self.skipped += 1
            case Failed():
                self.failed += 1
            case _:
                assert_never(outcome)

    def snapshot(self) -> SyncStats:
        return replace(self)
