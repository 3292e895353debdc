"""StageGatePolicy — may a sourcing event advance past its current stage?"""

from __future__ import annotations

from collections.abc import Iterable

from sourcing.domain.entities.assignment import CarrierAssignment
from sourcing.domain.entities.sourcing_event import SourcingEvent
from sourcing.domain.value_objects.enums import AssignmentStatus, EventStage

# Early stages where no award is required yet
UNGATED_STAGES = frozenset({EventStage.INVITED, EventStage.PLANNING})


def can_advance(event: SourcingEvent, assignments: Iterable[CarrierAssignment]) -> bool:
    """True if the event is in an ungated stage or any carrier is awarded."""
    if event.stage in UNGATED_STAGES:
        return True
    return any(a.status == AssignmentStatus.AWARDED for a in assignments)


def blocked_reason(event: SourcingEvent) -> str:
    return (
        f"Event {event.id} is in stage '{event.stage.value}' with no awarded carrier. "
        "Award at least one carrier to proceed."
    )
