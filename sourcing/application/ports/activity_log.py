"""Port interface for the append-only activity (audit) log."""

from abc import ABC, abstractmethod

from sourcing.domain.entities.note import ActivityEntry


class ActivityLog(ABC):
    @abstractmethod
    async def append(self, entry: ActivityEntry) -> ActivityEntry:
        ...
