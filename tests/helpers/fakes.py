"""In-memory collaborators for synchronization tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from doitsukani.domain.errors import NetworkError
from doitsukani.domain.model import StudyItem, StudyMaterialRef

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from doitsukani.domain.model import TranslationTier


def make_item(
    item_id: int,
    label: str | None = None,
    *,
    synonyms: Sequence[str] = (),
    level: int = 1,
    mnemonic: str | None = None,
) -> StudyItem:
    return StudyItem(
        id=item_id,
        label=label or f"radical {item_id}",
        level=level,
        current_synonyms=tuple(synonyms),
        meaning_mnemonic=mnemonic,
    )


async def no_sleep(_seconds: float) -> None:
    await asyncio.sleep(0)


@dataclass
class TranslateCall:
    text: str
    target_language: str
    retries: int | None
    context: str | None


@dataclass
class FakeTranslator:
    translations: Mapping[str, str] = field(default_factory=dict[str, str])
    errors: Mapping[str, Exception] = field(default_factory=dict[str, Exception])
    calls: list[TranslateCall] = field(default_factory=list[TranslateCall])
    block_on_call: int | None = None
    reached: asyncio.Event | None = None
    release: asyncio.Event | None = None

    async def translate(
        self,
        text: str,
        *,
        target_language: str,
        tier: TranslationTier | None = None,
        retries: int | None = None,
        context: str | None = None,
    ) -> str:
        _ = tier
        self.calls.append(
            TranslateCall(
                text=text, target_language=target_language, retries=retries, context=context
            )
        )
        if self.block_on_call is not None and len(self.calls) == self.block_on_call:
            assert self.reached is not None
            assert self.release is not None
            self.reached.set()
            await self.release.wait()
        if text in self.errors:
            raise self.errors[text]
        return self.translations.get(text, f"{text} (de)")


@dataclass
class StoreCall:
    action: str
    target_id: int
    synonyms: tuple[str, ...]


@dataclass
class FakeStudyMaterialStore:
    """Study-material store and item source backed by dictionaries."""

    items: list[StudyItem] = field(default_factory=list[StudyItem])
    records: dict[int, StudyMaterialRef] = field(default_factory=dict[int, StudyMaterialRef])
    failing_subjects: set[int] = field(default_factory=set[int])
    unexpected_errors: dict[int, Exception] = field(default_factory=dict[int, Exception])
    lookup_error: Exception | None = None
    calls: list[StoreCall] = field(default_factory=list[StoreCall])
    lookups: int = 0
    _next_id: int = 1000

    @classmethod
    def with_records(cls, items: Iterable[StudyItem]) -> FakeStudyMaterialStore:
        """Mirror the items' current synonyms as existing remote records."""

        store = cls(items=list(items))
        for item in store.items:
            if item.current_synonyms:
                store.records[item.id] = StudyMaterialRef(
                    id=item.id + 500, subject_id=item.id, synonyms=item.current_synonyms
                )
        return store

    @property
    def writes(self) -> list[StoreCall]:
        return [call for call in self.calls if call.action in {"create", "update"}]

    async def list_items(self, *, levels: Iterable[int] | None = None) -> list[StudyItem]:
        if levels is None:
            return list(self.items)
        wanted = set(levels)
        return [item for item in self.items if item.level in wanted]

    async def list_existing_records(
        self, subject_ids: Iterable[int]
    ) -> dict[int, StudyMaterialRef]:
        self.lookups += 1
        if self.lookup_error is not None:
            raise self.lookup_error
        wanted = set(subject_ids)
        return {
            subject_id: record
            for subject_id, record in self.records.items()
            if subject_id in wanted
        }

    async def create_record(self, subject_id: int, synonyms: Sequence[str]) -> StudyMaterialRef:
        self.calls.append(StoreCall("create", subject_id, tuple(synonyms)))
        if subject_id in self.unexpected_errors:
            raise self.unexpected_errors[subject_id]
        if subject_id in self.failing_subjects:
            raise NetworkError(f"create failed for {subject_id}", status_code=500)
        self._next_id += 1
        record = StudyMaterialRef(id=self._next_id, subject_id=subject_id, synonyms=tuple(synonyms))
        self.records[subject_id] = record
        return record

    async def update_record(self, record_id: int, synonyms: Sequence[str]) -> StudyMaterialRef:
        subject_id = next(
            (sid for sid, record in self.records.items() if record.id == record_id), None
        )
        assert subject_id is not None, f"unknown record {record_id}"
        self.calls.append(StoreCall("update", record_id, tuple(synonyms)))
        if subject_id in self.failing_subjects:
            raise NetworkError(f"update failed for {subject_id}", status_code=500)
        record = StudyMaterialRef(id=record_id, subject_id=subject_id, synonyms=tuple(synonyms))
        self.records[subject_id] = record
        return record
