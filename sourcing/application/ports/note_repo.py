"""Port interface for assignment notes."""

from abc import ABC, abstractmethod

from sourcing.domain.entities.note import Note


class NoteRepository(ABC):
    @abstractmethod
    async def add(self, note: Note) -> Note:
        ...

    @abstractmethod
    async def get(self, note_id: int) -> Note | None:
        ...
