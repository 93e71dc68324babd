"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable
from contextlib import AsyncExitStack
from logging import getLogger
from signal import SIGINT
from typing import TYPE_CHECKING

from doitsukani.adapters.deepl import DeepLClient
from doitsukani.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySyncRunUnitOfWork,
    is_started,
    startup,
)
from doitsukani.adapters.wanikani import WaniKaniClient, is_radical_collection
from doitsukani.config import (
    get_deepl_config,
    get_optional_deepl_config,
    get_sync_config,
    get_wanikani_config,
)
from doitsukani.domain.errors import SyncError
from doitsukani.domain.model import RunState, SyncRunRecord
from doitsukani.domain.ports.unit_of_work import SyncRunUnitOfWork
from doitsukani.domain.sessions import SessionController
from doitsukani.domain.synchronization import (
    ProgressCallback,
    RunResult,
    SynonymSynchronizer,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from doitsukani.adapters.deepl import UsageResponse
    from doitsukani.config import SyncConfig
    from doitsukani.domain.model import StudyItem, SynonymPolicy
    from doitsukani.domain.ports import ItemSource, StudyMaterialStore, Translator

UnitOfWorkFactory = Callable[[], SyncRunUnitOfWork]

log = getLogger(__name__)

# Shared by every run in this process so a new run supersedes the previous one.
_CONTROLLER = SessionController()


def session_controller() -> SessionController:
    return _CONTROLLER


def sync_radical_synonyms(
    *,
    policy: SynonymPolicy,
    levels: Iterable[int] | None = None,
    sync_config: SyncConfig | None = None,
    source: ItemSource | None = None,
    store: StudyMaterialStore | None = None,
    translator: Translator | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    record: bool = True,
    on_progress: ProgressCallback | None = None,
) -> RunResult:
    """Synchronise radical meaning synonyms using the configured adapters.

    ``source``, ``store`` and ``translator`` default to the WaniKani and DeepL
    clients built from the environment. When ``record`` is true the finished
    run is written to the ledger, unless a newer run superseded it.
    """

    effective_uow = unit_of_work_factory or SqlAlchemySyncRunUnitOfWork
    if record and unit_of_work_factory is None and not is_started():
        startup()

    config = sync_config or get_sync_config()
    level_filter = sorted(set(levels)) if levels is not None else None
    log.info(
        "Starting synonym sync: policy=%s, levels=%s, batch_size=%s",
        policy.value,
        level_filter or "all",
        config.batch_size,
    )

    previous_session = _CONTROLLER.current_id
    try:
        result = asyncio.run(
            _sync_async(
                policy=policy,
                levels=level_filter,
                config=config,
                source=source,
                store=store,
                translator=translator,
                on_progress=on_progress,
            )
        )
    except SyncError:
        if record and _CONTROLLER.current_id > previous_session:
            _record_failed_session(effective_uow)
        raise

    log.info(
        "Finished synonym sync (%s): created=%s, updated=%s, skipped=%s, failed=%s",
        result.state.value,
        result.stats.created,
        result.stats.updated,
        result.stats.skipped,
        result.stats.failed,
    )

    if record and not result.superseded:
        with effective_uow() as uow:
            uow.repositories.sync_runs.add(result.to_record())
            uow.commit()
    return result


async def _sync_async(
    *,
    policy: SynonymPolicy,
    levels: list[int] | None,
    config: SyncConfig,
    source: ItemSource | None,
    store: StudyMaterialStore | None,
    translator: Translator | None,
    on_progress: ProgressCallback | None,
) -> RunResult:
    async with AsyncExitStack() as stack:
        if source is None or store is None:
            wanikani = await stack.enter_async_context(
                WaniKaniClient(config=get_wanikani_config(cache_predicate=is_radical_collection))
            )
            source = source or wanikani
            store = store or wanikani
        if translator is None and policy.requires_translation:
            deepl_config = get_optional_deepl_config()
            if deepl_config is not None:
                translator = await stack.enter_async_context(DeepLClient(config=deepl_config))

        items = await source.list_items(levels=levels)
        synchronizer = SynonymSynchronizer(
            store=store,
            translator=translator,
            controller=_CONTROLLER,
            config=config,
            on_progress=on_progress,
        )
        session_id = synchronizer.start_run(items, policy)

        loop = asyncio.get_running_loop()
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(SIGINT, _request_cancel, synchronizer, session_id)
        try:
            return await synchronizer.wait(session_id)
        finally:
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.remove_signal_handler(SIGINT)


def _request_cancel(synchronizer: SynonymSynchronizer, session_id: int) -> None:
    log.info("Cancellation requested, finishing the current item")
    synchronizer.cancel(session_id)


def _record_failed_session(unit_of_work_factory: UnitOfWorkFactory) -> None:
    session = _CONTROLLER.session(_CONTROLLER.current_id)
    if session.state is not RunState.FAILED:
        return
    stats = session.stats
    with unit_of_work_factory() as uow:
        uow.repositories.sync_runs.add(
            SyncRunRecord(
                session_id=session.id,
                policy=session.policy,
                state=session.state,
                total_items=session.total_items,
                created=stats.created,
                updated=stats.updated,
                failed=stats.failed,
                skipped=stats.skipped,
                started_at=session.started_at,
                finished_at=session.finished_at,
            )
        )
        uow.commit()


def list_radicals(
    *,
    levels: Iterable[int] | None = None,
    source: ItemSource | None = None,
) -> list[StudyItem]:
    """Fetch radicals and their current synonyms without changing anything."""

    level_filter = sorted(set(levels)) if levels is not None else None

    async def fetch() -> list[StudyItem]:
        if source is not None:
            return await source.list_items(levels=level_filter)
        config = get_wanikani_config(cache_predicate=is_radical_collection)
        async with WaniKaniClient(config=config) as client:
            return await client.list_items(levels=level_filter)

    return asyncio.run(fetch())


def deepl_usage() -> UsageResponse:
    """Return the character usage of the configured DeepL account."""

    async def fetch() -> UsageResponse:
        async with DeepLClient(config=get_deepl_config()) as client:
            return await client.usage()

    return asyncio.run(fetch())


def recent_runs(
    *,
    limit: int = 10,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[SyncRunRecord]:
    """Return the most recently recorded runs, newest first."""

    if unit_of_work_factory is None and not is_started():
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemySyncRunUnitOfWork
    with effective_uow() as uow:
        return uow.repositories.sync_runs.list_recent(limit=limit)
