"""Port interface for read-only sourcing event access."""

from abc import ABC, abstractmethod

from sourcing.domain.entities.sourcing_event import SourcingEvent
from sourcing.domain.value_objects.enums import EventStage


class EventRepository(ABC):
    @abstractmethod
    async def get(self, event_id: int) -> SourcingEvent | None:
        ...

    @abstractmethod
    async def get_stage(self, event_id: int) -> EventStage | None:
        ...
