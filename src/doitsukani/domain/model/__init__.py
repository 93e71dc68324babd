"""Public domain model surface."""

from __future__ import annotations

from doitsukani.domain.model.enums import RunState, SynonymPolicy, TranslationTier
from doitsukani.domain.model.items import StudyItem, StudyMaterialRef
from doitsukani.domain.model.outcomes import (
    Created,
    Failed,
    Outcome,
    Skipped,
    SyncStats,
    Updated,
)
from doitsukani.domain.model.runs import SyncRunRecord

__all__ = [  # noqa: RUF022
    # items
    "StudyItem",
    "StudyMaterialRef",
    # outcomes
    "Created",
    "Updated",
    "Skipped",
    "Failed",
    "Outcome",
    "SyncStats",
    # runs
    "SyncRunRecord",
    # enums
    "RunState",
    "SynonymPolicy",
    "TranslationTier",
]
