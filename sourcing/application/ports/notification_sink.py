"""Port interface for the user-facing notification queue."""

from abc import ABC, abstractmethod

from sourcing.domain.entities.note import Notification


class NotificationSink(ABC):
    @abstractmethod
    async def enqueue(self, notification: Notification) -> bool:
        """Store the notification.

        Returns False when a notification with the same idempotency key
        already exists (nothing is written). Raises ExternalServiceError if
        the sink is unavailable.
        """
        ...
