"""Session bookkeeping with a generation counter.

Only the most recently started session is *current*. Outcomes committed for
any other session, or for a session that was already finalized, are dropped,
so a superseded run can never leak counts into the statistics of its
successor.
"""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from doitsukani.domain.batching import progress_percent
from doitsukani.domain.errors import UnknownSessionError
from doitsukani.domain.model import RunState, SyncStats

if TYPE_CHECKING:
    from doitsukani.domain.model import Outcome, SynonymPolicy

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class SyncSession:
    id: int
    policy: SynonymPolicy
    total_items: int
    stats: SyncStats = field(default_factory=SyncStats)
    state: RunState = RunState.IDLE
    cancelled: bool = False
    superseded: bool = False
    finalized: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    @property
    def processed(self) -> int:
        return self.stats.total

    @property
    def stop_requested(self) -> bool:
        return self.cancelled or self.superseded

    def request_stop(self) -> None:
        self.cancel_event.set()

    async def pause(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless a stop is requested first."""

        if seconds <= 0 or self.cancel_event.is_set():
            return
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self.cancel_event.wait(), timeout=seconds)


class SessionController:
    """Issue session ids and guard every statistics write."""

    def __init__(self) -> None:
        self._counter = 0
        self._sessions: dict[int, SyncSession] = {}

    @property
    def current_id(self) -> int:
        return self._counter

    def start_session(self, *, policy: SynonymPolicy, total_items: int) -> int:
        previous = self._sessions.get(self._counter)
        if previous is not None and not previous.finalized:
            previous.superseded = True
            previous.request_stop()
            log.info("Session %d superseded", previous.id)

        self._counter += 1
        self._sessions[self._counter] = SyncSession(
            id=self._counter,
            policy=policy,
            total_items=total_items,
        )
        return self._counter

    def is_current(self, session_id: int) -> bool:
        return session_id == self._counter

    def session(self, session_id: int) -> SyncSession:
        try:
            return self._sessions[session_id]
        except KeyError as exc:
            raise UnknownSessionError(f"Unknown session id {session_id}") from exc

    def begin(self, session_id: int) -> None:
        session = self.session(session_id)
        if session.state is RunState.IDLE:
            session.state = RunState.RUNNING

    def commit(self, session_id: int, outcome: Outcome) -> bool:
        session = self.session(session_id)
        if not self.is_current(session_id) or session.finalized:
            log.debug("Dropping outcome %r for stale session %d", outcome, session_id)
            return False
        session.stats.record(outcome)
        return True

    def cancel(self, session_id: int) -> None:
        session = self.session(session_id)
        if session.finalized:
            return
        session.cancelled = True
        session.request_stop()

    def finalize(self, session_id: int, state: RunState) -> bool:
        """Mark the session terminal; report whether it was still current."""

        if not state.is_terminal:
            raise ValueError(f"{state} is not a terminal state")
        session = self.session(session_id)
        if session.finalized:
            return False
        session.finalized = True
        session.state = state
        session.finished_at = datetime.now(UTC)
        return self.is_current(session_id)

    def stats(self, session_id: int) -> SyncStats:
        return self.session(session_id).stats.snapshot()

    def progress(self, session_id: int) -> int:
        session = self.session(session_id)
        if session.state is RunState.COMPLETED:
            return 100
        return progress_percent(session.processed, session.total_items)
