"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from doitsukani.adapters.sqlalchemy.mappings import sync_run_table
from doitsukani.domain.model import SyncRunRecord

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from doitsukani.domain.ports import SyncRunRepository


class SqlAlchemySyncRunRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: SyncRunRecord) -> None:
        self.session.add(entity)

    def list_recent(self, limit: int = 10) -> list[SyncRunRecord]:
        stmt = (
            select(SyncRunRecord)
            .order_by(sync_run_table.c.started_at.desc(), sync_run_table.c.session_id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def latest(self) -> SyncRunRecord | None:
        recent = self.list_recent(limit=1)
        return recent[0] if recent else None


if TYPE_CHECKING:
    _repository_check: SyncRunRepository = SqlAlchemySyncRunRepository(session=None)  # type: ignore[arg-type]
