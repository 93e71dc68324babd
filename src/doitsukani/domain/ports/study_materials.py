"""Ports for reading radicals and writing study materials."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from doitsukani.domain.model import StudyItem, StudyMaterialRef


@runtime_checkable
class ItemSource(Protocol):
    """Source of the items whose synonyms get synchronized."""

    async def list_items(self, *, levels: Iterable[int] | None = None) -> list[StudyItem]: ...


@runtime_checkable
class StudyMaterialStore(Protocol):
    """Remote store holding one synonym record per subject."""

    async def list_existing_records(
        self, subject_ids: Iterable[int]
    ) -> dict[int, StudyMaterialRef]: ...

    async def create_record(
        self, subject_id: int, synonyms: Sequence[str]
    ) -> StudyMaterialRef: ...

    async def update_record(
        self, record_id: int, synonyms: Sequence[str]
    ) -> StudyMaterialRef: ...


__all__ = ["ItemSource", "StudyMaterialStore"]
