"""SQLAlchemy adapter package for the run ledger."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers, sync_run_table
from .repositories import SqlAlchemySyncRunRepository

__all__ = [
    "SqlAlchemySyncRunRepository",
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
    "sync_run_table",
]
