"""SQLAlchemy unit of work — one session, one transaction."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sourcing.adapters.persistence.repositories import (
    SqlActivityLog,
    SqlAssignmentRepository,
    SqlEventRepository,
    SqlNoteRepository,
    SqlTariffRepository,
)
from sourcing.application.ports.unit_of_work import UnitOfWork


class SqlUnitOfWork(UnitOfWork):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> SqlUnitOfWork:
        self._session = self._session_factory()
        self.assignments = SqlAssignmentRepository(self._session)
        self.events = SqlEventRepository(self._session)
        self.tariffs = SqlTariffRepository(self._session)
        self.notes = SqlNoteRepository(self._session)
        self.activity = SqlActivityLog(self._session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        # Rolling back after a commit is a no-op
        await self.rollback()
        await self._session.close()
        self._session = None

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()
