"""Quick status changes and carrier invitations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from sourcing.application.ports.unit_of_work import UnitOfWork
from sourcing.domain.entities.assignment import CarrierAssignment
from sourcing.domain.entities.note import ActivityEntry
from sourcing.domain.errors import ConflictError, NotFoundError
from sourcing.domain.policies.status_transitions import quick_status_changes
from sourcing.domain.value_objects.enums import ActivityType, AssignmentStatus

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], UnitOfWork]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuickStatusChangeUseCase:
    """Move an assignment between the active statuses."""

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Callable[[], datetime] = utcnow):
        self._uow_factory = uow_factory
        self._clock = clock

    async def execute(
        self,
        assignment_id: int,
        new_status: AssignmentStatus,
        actor_id: str | None = None,
    ) -> CarrierAssignment:
        async with self._uow_factory() as uow:
            assignment = await uow.assignments.get(assignment_id)
            if assignment is None:
                raise NotFoundError(f"Assignment {assignment_id} not found")

            changes = quick_status_changes(assignment, new_status, self._clock())
            if not changes:
                return assignment

            previous = assignment.status
            updated = await uow.assignments.conditional_update(
                assignment_id, expected_status=previous, changes=changes
            )
            await uow.activity.append(ActivityEntry(
                activity_type=ActivityType.STATUS_CHANGE,
                description=f"Status changed: {previous.value} → {new_status.value}",
                user_id=actor_id,
                carrier_id=assignment.carrier_id,
                event_id=assignment.event_id,
                assignment_id=assignment_id,
            ))
            await uow.commit()

        logger.info(
            "Assignment %d: %s → %s", assignment_id, previous.value, new_status.value
        )
        return updated


class InviteCarrierUseCase:
    """Add a carrier to a sourcing event in the ``invited`` status."""

    def __init__(self, uow_factory: UnitOfWorkFactory, clock: Callable[[], datetime] = utcnow):
        self._uow_factory = uow_factory
        self._clock = clock

    async def execute(
        self, event_id: int, carrier_id: int, actor_id: str | None = None
    ) -> CarrierAssignment:
        async with self._uow_factory() as uow:
            event = await uow.events.get(event_id)
            if event is None:
                raise NotFoundError(f"Sourcing event {event_id} not found")

            existing = await uow.assignments.get_by_event_and_carrier(event_id, carrier_id)
            if existing is not None:
                raise ConflictError(
                    f"Carrier {carrier_id} is already on event {event_id} "
                    f"(assignment {existing.id}, status '{existing.status.value}')"
                )

            assignment = await uow.assignments.create(CarrierAssignment(
                id=None,
                event_id=event_id,
                carrier_id=carrier_id,
                status=AssignmentStatus.INVITED,
                invited_at=self._clock(),
            ))
            await uow.activity.append(ActivityEntry(
                activity_type=ActivityType.CARRIER_INVITED,
                description=f"Carrier {carrier_id} invited",
                user_id=actor_id,
                customer_id=event.customer_id,
                carrier_id=carrier_id,
                event_id=event_id,
                assignment_id=assignment.id,
            ))
            await uow.commit()

        logger.info("Event %d: carrier %d invited (assignment %d)", event_id, carrier_id, assignment.id)
        return assignment
