"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import Repository, SyncRunRepository
from .study_materials import ItemSource, StudyMaterialStore
from .translation import Translator
from .unit_of_work import (
    RepositoryCollection,
    SyncRunRepositories,
    SyncRunUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "ItemSource",
    "Repository",
    "RepositoryCollection",
    "StudyMaterialStore",
    "SyncRunRepositories",
    "SyncRunRepository",
    "SyncRunUnitOfWork",
    "Translator",
    "UnitOfWork",
]
