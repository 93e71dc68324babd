from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from doitsukani.app import list_radicals, recent_runs, session_controller, sync_radical_synonyms
from doitsukani.config.sync import SyncConfig
from doitsukani.domain.errors import AuthError, NetworkError
from doitsukani.domain.model import RunState, SynonymPolicy
from tests.helpers.fakes import FakeStudyMaterialStore, FakeTranslator, make_item

if TYPE_CHECKING:
    from collections.abc import Callable

    from doitsukani.adapters.sqlalchemy.unit_of_work import SqlAlchemySyncRunUnitOfWork
    from doitsukani.domain.batching import BatchProgress
    from doitsukani.domain.ports.unit_of_work import SyncRunUnitOfWork

type UnitOfWorkFactory = Callable[[], SqlAlchemySyncRunUnitOfWork]

NO_DELAYS = SyncConfig(item_delay_seconds=0, batch_delay_seconds=0)


@pytest.fixture(autouse=True)
def no_deepl_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DEEPL_API_KEY", raising=False)


def _unused_unit_of_work() -> SyncRunUnitOfWork:
    raise AssertionError("the ledger must not be touched")


def test_sync_records_finished_run(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    items = [make_item(1, "ground"), make_item(2, "fins", synonyms=["Flosse"])]
    store = FakeStudyMaterialStore.with_records(items)
    progress: list[BatchProgress] = []

    result = sync_radical_synonyms(
        policy=SynonymPolicy.SMART_MERGE,
        sync_config=NO_DELAYS,
        source=store,
        store=store,
        translator=FakeTranslator(translations={"ground": "Boden", "fins": "Flossen"}),
        unit_of_work_factory=sqlite_unit_of_work,
        on_progress=lambda _session_id, update: progress.append(update),
    )

    assert result.state is RunState.COMPLETED
    assert (result.stats.created, result.stats.updated) == (1, 1)
    assert store.records[2].synonyms == ("Flosse", "Flossen")
    assert progress[-1].completed == 2

    (recorded,) = recent_runs(unit_of_work_factory=sqlite_unit_of_work)
    assert recorded.session_id == result.session_id
    assert recorded.policy is SynonymPolicy.SMART_MERGE
    assert recorded.state is RunState.COMPLETED
    assert recorded.created == 1
    assert recorded.updated == 1


def test_sync_filters_levels() -> None:
    items = [make_item(1, level=1), make_item(2, level=2), make_item(3, level=3)]
    store = FakeStudyMaterialStore(items=items)
    translator = FakeTranslator()

    result = sync_radical_synonyms(
        policy=SynonymPolicy.REPLACE,
        levels=[3, 1],
        sync_config=NO_DELAYS,
        source=store,
        store=store,
        translator=translator,
        unit_of_work_factory=_unused_unit_of_work,
        record=False,
    )

    assert result.total_items == 2
    assert [call.text for call in translator.calls] == ["radical 1", "radical 3"]


def test_delete_runs_without_translation_credentials(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    items = [make_item(1, synonyms=["Boden"]), make_item(2)]
    store = FakeStudyMaterialStore.with_records(items)

    result = sync_radical_synonyms(
        policy=SynonymPolicy.DELETE,
        sync_config=NO_DELAYS,
        source=store,
        store=store,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert (result.stats.updated, result.stats.skipped) == (1, 1)
    assert store.records[1].synonyms == ()


def test_missing_translator_is_rejected_without_a_ledger_entry(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    store = FakeStudyMaterialStore(items=[make_item(1)])
    previous_session = session_controller().current_id

    with pytest.raises(AuthError):
        sync_radical_synonyms(
            policy=SynonymPolicy.SMART_MERGE,
            sync_config=NO_DELAYS,
            source=store,
            store=store,
            unit_of_work_factory=sqlite_unit_of_work,
        )

    assert session_controller().current_id == previous_session
    assert recent_runs(unit_of_work_factory=sqlite_unit_of_work) == []
    assert store.writes == []


def test_lookup_failure_is_recorded_and_raised(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    store = FakeStudyMaterialStore(
        items=[make_item(1), make_item(2)],
        lookup_error=NetworkError("WaniKani unreachable"),
    )

    with pytest.raises(NetworkError, match="unreachable"):
        sync_radical_synonyms(
            policy=SynonymPolicy.REPLACE,
            sync_config=NO_DELAYS,
            source=store,
            store=store,
            translator=FakeTranslator(),
            unit_of_work_factory=sqlite_unit_of_work,
        )

    (recorded,) = recent_runs(unit_of_work_factory=sqlite_unit_of_work)
    assert recorded.state is RunState.FAILED
    assert recorded.total_items == 2
    assert recorded.finished_at is not None


def test_failure_before_session_start_is_not_recorded(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    class BrokenSource:
        async def list_items(self, *, levels: object = None) -> list[object]:
            _ = levels
            raise NetworkError("listing failed")

    store = FakeStudyMaterialStore()

    with pytest.raises(NetworkError):
        sync_radical_synonyms(
            policy=SynonymPolicy.REPLACE,
            sync_config=NO_DELAYS,
            source=BrokenSource(),  # type: ignore[arg-type]
            store=store,
            translator=FakeTranslator(),
            unit_of_work_factory=sqlite_unit_of_work,
        )

    assert recent_runs(unit_of_work_factory=sqlite_unit_of_work) == []


def test_missing_wanikani_token_is_an_auth_error(
    monkeypatch: pytest.MonkeyPatch, sqlite_unit_of_work: UnitOfWorkFactory
) -> None:
    monkeypatch.delenv("WANIKANI_API_TOKEN", raising=False)

    with pytest.raises(AuthError, match="WANIKANI_API_TOKEN"):
        sync_radical_synonyms(
            policy=SynonymPolicy.DELETE,
            sync_config=NO_DELAYS,
            unit_of_work_factory=sqlite_unit_of_work,
        )

    assert recent_runs(unit_of_work_factory=sqlite_unit_of_work) == []


def test_recent_runs_respects_limit(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    store = FakeStudyMaterialStore(items=[make_item(1)])
    for _ in range(3):
        sync_radical_synonyms(
            policy=SynonymPolicy.DELETE,
            sync_config=NO_DELAYS,
            source=store,
            store=store,
            unit_of_work_factory=sqlite_unit_of_work,
        )

    runs = recent_runs(limit=2, unit_of_work_factory=sqlite_unit_of_work)

    assert len(runs) == 2
    assert runs[0].session_id > runs[1].session_id


def test_list_radicals_uses_source() -> None:
    store = FakeStudyMaterialStore(items=[make_item(1, level=1), make_item(2, level=5)])

    radicals = list_radicals(levels=[5], source=store)

    assert [item.id for item in radicals] == [2]
