"""AssignmentStatusPolicy — the carrier assignment state machine.

States:
    invited ↔ submitted ↔ under_review ↔ revision_requested   (active set)
    awarded, not_awarded, withdrawn, declined                  (terminal)

Any active status may move to any other active status through the quick-change
path. Terminal statuses are only entered through dedicated operations (award,
not-award) and have no outgoing transitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sourcing.domain.entities.assignment import CarrierAssignment
from sourcing.domain.errors import InvalidTransition, PreconditionFailed
from sourcing.domain.value_objects.enums import (
    ACTIVE_STATUSES,
    AWARDABLE_STATUSES,
    AssignmentStatus,
)


def quick_status_changes(
    assignment: CarrierAssignment,
    new_status: AssignmentStatus,
    now: datetime,
) -> dict[str, Any]:
    """Validate a quick status change and return the column changes to write.

    Returns an empty dict when the assignment is already in *new_status*.

    Raises:
        InvalidTransition: target outside the active set, or the assignment
            is already in a terminal status.
    """
    if new_status not in ACTIVE_STATUSES:
        raise InvalidTransition(
            f"Cannot set status '{new_status.value}' via quick change; "
            f"allowed: {', '.join(sorted(s.value for s in ACTIVE_STATUSES))}"
        )
    if assignment.status.is_terminal():
        raise InvalidTransition(
            f"Assignment {assignment.id} is '{assignment.status.value}', "
            "which is terminal"
        )
    if assignment.status == new_status:
        return {}

    changes: dict[str, Any] = {"status": new_status}
    if new_status == AssignmentStatus.SUBMITTED and assignment.submitted_at is None:
        changes["submitted_at"] = now
    return changes


def ensure_awardable(assignment: CarrierAssignment) -> None:
    """Raise PreconditionFailed unless the assignment may be awarded.

    An already-awarded assignment is reported by the caller as a conflict,
    not here.
    """
    if assignment.status not in AWARDABLE_STATUSES:
        raise PreconditionFailed(
            f"Assignment {assignment.id} is '{assignment.status.value}'; "
            "only carriers under review or with a revision requested can be awarded"
        )


def ensure_can_decline(assignment: CarrierAssignment) -> None:
    """Raise PreconditionFailed unless the assignment may be marked not awarded."""
    if not assignment.status.is_active():
        raise PreconditionFailed(
            f"Assignment {assignment.id} is '{assignment.status.value}', "
            "which is terminal"
        )
