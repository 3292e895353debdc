"""Port interface for carrier assignment persistence."""

from abc import ABC, abstractmethod
from typing import Any

from sourcing.domain.entities.assignment import CarrierAssignment
from sourcing.domain.value_objects.enums import AssignmentStatus


class AssignmentRepository(ABC):
    @abstractmethod
    async def create(self, assignment: CarrierAssignment) -> CarrierAssignment:
        ...

    @abstractmethod
    async def get(self, assignment_id: int) -> CarrierAssignment | None:
        ...

    @abstractmethod
    async def get_for_update(self, assignment_id: int) -> CarrierAssignment | None:
        """Read the assignment and lock its row until the transaction ends.

        Must use row-level locking (SELECT ... FOR UPDATE) for safety.
        """
        ...

    @abstractmethod
    async def get_by_event_and_carrier(
        self, event_id: int, carrier_id: int
    ) -> CarrierAssignment | None:
        ...

    @abstractmethod
    async def list_by_event(self, event_id: int) -> list[CarrierAssignment]:
        ...

    @abstractmethod
    async def conditional_update(
        self,
        assignment_id: int,
        expected_status: AssignmentStatus,
        changes: dict[str, Any],
    ) -> CarrierAssignment:
        """Apply *changes* only if the stored status still equals *expected_status*.

        Raises:
            NotFoundError: no assignment with this id.
            ConflictError: the stored status differs from *expected_status*.
        """
        ...

    @abstractmethod
    async def append_note(self, assignment_id: int, text: str) -> None:
        """Append *text* to the note log and refresh ``latest_note``.

        Does not touch the status, so it never conflicts with a transition.
        """
        ...

    @abstractmethod
    async def update(self, assignment_id: int, changes: dict[str, Any]) -> CarrierAssignment:
        """Apply *changes* unconditionally. Status changes go through conditional_update.

        Raises NotFoundError if the assignment does not exist.
        """
        ...
