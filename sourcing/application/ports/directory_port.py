"""Port interface for the user directory."""

from abc import ABC, abstractmethod

from sourcing.domain.entities.note import DirectoryUser


class DirectoryLookup(ABC):
    @abstractmethod
    async def list_users(self) -> list[DirectoryUser]:
        """Return every user that can be mentioned.

        Raises ExternalServiceError if the directory cannot be reached.
        """
        ...
