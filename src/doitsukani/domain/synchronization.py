"""Batch synchronization of translated meaning synonyms.

:class:`SynonymSynchronizer` drives one session at a time: it translates each
item's primary meaning, merges the result into the item's current synonyms
according to the selected :class:`~doitsukani.domain.model.SynonymPolicy`
and writes only when the set actually changes. Outcomes are committed through
a shared :class:`~doitsukani.domain.sessions.SessionController`, so starting
a new session silently stops and isolates the previous one.
"""

from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from doitsukani.config.sync import SyncConfig
from doitsukani.domain.batching import BatchProgress, BatchScheduler
from doitsukani.domain.context import extract_context
from doitsukani.domain.errors import AuthError, SyncError, UnknownSessionError, ValidationError
from doitsukani.domain.model import (
    Created,
    Failed,
    Outcome,
    RunState,
    Skipped,
    SynonymPolicy,
    SyncRunRecord,
    SyncStats,
    Updated,
)
from doitsukani.domain.sessions import SessionController
from doitsukani.domain.synonyms import merge_synonyms

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from doitsukani.domain.batching import Sleep
    from doitsukani.domain.model import StudyItem, StudyMaterialRef
    from doitsukani.domain.ports import StudyMaterialStore, Translator

log = getLogger(__name__)

type ProgressCallback = Callable[[int, BatchProgress], None]


@dataclass(frozen=True, slots=True)
class RunResult:
    """Summary of a finished session."""

    session_id: int
    policy: SynonymPolicy
    state: RunState
    stats: SyncStats
    total_items: int
    attempted: int
    outcomes: tuple[Outcome, ...]
    started_at: datetime
    finished_at: datetime
    superseded: bool = False

    @property
    def failures(self) -> tuple[Failed, ...]:
        return tuple(outcome for outcome in self.outcomes if isinstance(outcome, Failed))

    def to_record(self) -> SyncRunRecord:
        return SyncRunRecord(
            session_id=self.session_id,
            policy=self.policy,
            state=self.state,
            total_items=self.total_items,
            created=self.stats.created,
            updated=self.stats.updated,
            failed=self.stats.failed,
            skipped=self.stats.skipped,
            started_at=self.started_at,
            finished_at=self.finished_at,
        )


class SynonymSynchronizer:
    def __init__(
        self,
        *,
        store: StudyMaterialStore,
        translator: Translator | None = None,
        controller: SessionController | None = None,
        config: SyncConfig | None = None,
        sleep: Sleep | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._store = store
        self._translator = translator
        self._controller = controller or SessionController()
        self._config = config or SyncConfig()
        self._sleep = sleep
        self._on_progress = on_progress
        self._tasks: dict[int, asyncio.Task[RunResult]] = {}

    @property
    def controller(self) -> SessionController:
        return self._controller

    def start_run(self, items: Iterable[StudyItem], policy: SynonymPolicy) -> int:
        """Open a new session and schedule it on the running event loop.

        Any session still in progress is superseded. Raises :class:`AuthError`
        right away, without opening a session or touching the running one,
        when ``policy`` needs a translator and none is configured.
        """

        loop = asyncio.get_running_loop()
        if policy.requires_translation and self._translator is None:
            raise AuthError(f"Policy {policy.value!r} requires translation credentials")

        batch = list(items)
        session_id = self._controller.start_session(policy=policy, total_items=len(batch))
        log.info("Session %d: %s for %d item(s)", session_id, policy.value, len(batch))

        task = loop.create_task(
            self._execute(session_id, batch, policy),
            name=f"synonym-sync-{session_id}",
        )
        task.add_done_callback(functools.partial(self._release_task, session_id))
        self._tasks[session_id] = task
        return session_id

    async def wait(self, session_id: int) -> RunResult:
        """Await the result of ``session_id``.

        Superseded sessions drop their task once it finishes, so only callers
        already waiting on them receive their result.
        """

        try:
            task = self._tasks[session_id]
        except KeyError as exc:
            raise UnknownSessionError(f"No running task for session {session_id}") from exc
        try:
            return await task
        finally:
            if task.done():
                self._tasks.pop(session_id, None)

    async def run(self, items: Iterable[StudyItem], policy: SynonymPolicy) -> RunResult:
        return await self.wait(self.start_run(items, policy))

    def _release_task(self, session_id: int, task: asyncio.Task[RunResult]) -> None:
        if not task.cancelled() and task.exception() is not None:
            log.debug("Session %d ended with %r", session_id, task.exception())
        if not self._controller.is_current(session_id):
            self._tasks.pop(session_id, None)

    def cancel(self, session_id: int) -> None:
        self._controller.cancel(session_id)

    def get_stats(self, session_id: int) -> SyncStats:
        return self._controller.stats(session_id)

    def get_progress_percent(self, session_id: int) -> int:
        return self._controller.progress(session_id)

    async def _execute(
        self,
        session_id: int,
        items: list[StudyItem],
        policy: SynonymPolicy,
    ) -> RunResult:
        controller = self._controller
        session = controller.session(session_id)
        controller.begin(session_id)

        try:
            records = await self._store.list_existing_records(item.id for item in items)
        except SyncError:
            controller.finalize(session_id, RunState.FAILED)
            log.exception("Session %d: could not look up existing study materials", session_id)
            raise

        stats = SyncStats()
        outcomes: list[Outcome] = []

        async def handle(item: StudyItem) -> None:
            outcome = await self._process_item(item, policy, records)
            stats.record(outcome)
            outcomes.append(outcome)
            controller.commit(session_id, outcome)

        def should_stop() -> bool:
            return session.stop_requested or not controller.is_current(session_id)

        def report(progress: BatchProgress) -> None:
            if self._on_progress is not None and controller.is_current(session_id):
                self._on_progress(session_id, progress)

        scheduler = BatchScheduler(
            batch_size=self._config.batch_size,
            item_delay=self._config.item_delay_seconds,
            batch_delay=self._config.batch_delay_seconds,
            sleep=self._sleep or session.pause,
        )
        try:
            schedule = await scheduler.run(
                items, handle, should_stop=should_stop, on_progress=report
            )
        except asyncio.CancelledError:
            controller.finalize(session_id, RunState.CANCELLED)
            raise
        except Exception:
            controller.finalize(session_id, RunState.FAILED)
            log.exception("Session %d aborted", session_id)
            raise

        state = RunState.CANCELLED if schedule.cancelled else RunState.COMPLETED
        still_current = controller.finalize(session_id, state)
        log.info(
            "Session %d %s: %d created, %d updated, %d skipped, %d failed",
            session_id,
            state.value,
            stats.created,
            stats.updated,
            stats.skipped,
            stats.failed,
        )
        return RunResult(
            session_id=session_id,
            policy=policy,
            state=state,
            stats=stats.snapshot(),
            total_items=len(items),
            attempted=schedule.processed,
            outcomes=tuple(outcomes),
            started_at=session.started_at,
            finished_at=session.finished_at or datetime.now(UTC),
            superseded=not still_current,
        )

    async def _process_item(
        self,
        item: StudyItem,
        policy: SynonymPolicy,
        records: Mapping[int, StudyMaterialRef],
    ) -> Outcome:
        try:
            translated = await self._translate(item, policy)
            result = merge_synonyms(item.current_synonyms, translated, policy)

            if policy is not SynonymPolicy.DELETE and not result.next_synonyms:
                raise ValidationError(f"Refusing to write an empty synonym set for {item.label!r}")
            if not result.changed:
                return Skipped(item.id)
            if len(result.next_synonyms) > self._config.max_synonyms:
                raise ValidationError(
                    f"{item.label!r} would have {len(result.next_synonyms)} synonyms, "
                    f"at most {self._config.max_synonyms} are allowed"
                )

            record = records.get(item.id)
            if record is not None:
                await self._store.update_record(record.id, result.next_synonyms)
                return Updated(item.id)
            await self._store.create_record(item.id, result.next_synonyms)
            return Created(item.id)
        except SyncError as exc:
            log.warning("Item %d (%s) failed: %s", item.id, item.label, exc)
            return Failed(item.id, reason=str(exc), kind=type(exc).__name__)
        except Exception as exc:
            log.exception("Item %d (%s) failed unexpectedly", item.id, item.label)
            return Failed(item.id, reason=str(exc), kind=type(exc).__name__)

    async def _translate(self, item: StudyItem, policy: SynonymPolicy) -> str | None:
        if not policy.requires_translation:
            return None
        translator = self._translator
        if translator is None:
            raise AuthError("No translator configured")
        translated = await translator.translate(
            item.label,
            target_language=self._config.target_language,
            retries=self._config.translation_retries,
            context=extract_context(item.meaning_mnemonic, item.label),
        )
        if not translated or not translated.strip():
            raise ValidationError(f"Empty translation for {item.label!r}")
        return translated
