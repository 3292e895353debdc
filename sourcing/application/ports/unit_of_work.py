"""Port interface for one atomic unit of work across repositories."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sourcing.application.ports.activity_log import ActivityLog
from sourcing.application.ports.assignment_repo import AssignmentRepository
from sourcing.application.ports.event_repo import EventRepository
from sourcing.application.ports.note_repo import NoteRepository
from sourcing.application.ports.tariff_repo import TariffRepository


class UnitOfWork(ABC):
    """Transaction boundary.

    Usage::

        async with uow_factory() as uow:
            ...
            await uow.commit()

    Leaving the block without commit() rolls everything back.
    """

    assignments: AssignmentRepository
    events: EventRepository
    tariffs: TariffRepository
    notes: NoteRepository
    activity: ActivityLog

    async def __aenter__(self) -> UnitOfWork:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
