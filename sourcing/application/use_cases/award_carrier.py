"""AwardCarrierUseCase / NotAwardCarrierUseCase — the award decision.

Awarding is the only path that creates a tariff as a side effect of a status
transition. Everything it writes goes through one unit of work:

1. assignment → ``awarded`` (compare-and-set on the locked row)
2. find or create the primary tariff family for (customer, carrier)
3. create a ``proposed`` tariff linked to the event and the assignment
4. back-link the tariff on the assignment
5. stamp a human-readable tariff reference
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sourcing.application.use_cases.change_status import UnitOfWorkFactory, utcnow
from sourcing.domain.entities.assignment import CarrierAssignment
from sourcing.domain.entities.note import ActivityEntry
from sourcing.domain.entities.tariff import Tariff
from sourcing.domain.errors import (
    ConflictError,
    NotFoundError,
    PreconditionFailed,
    ValidationError,
)
from sourcing.domain.policies.status_transitions import ensure_awardable, ensure_can_decline
from sourcing.domain.policies.tariff_naming import build_tariff_name, build_tariff_reference
from sourcing.domain.value_objects.enums import (
    ActivityType,
    AssignmentStatus,
    OwnershipType,
    TariffStatus,
)
from sourcing.domain.value_objects.lane_scope import LaneScope

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PREFIX = "TRF"


@dataclass(frozen=True)
class AwardResult:
    """What the caller needs to show after a successful award."""

    assignment_id: int
    tariff_id: int
    tariff_family_id: int
    tariff_reference_id: str


def _require_award_stage(event, assignment_id: int) -> None:
    if not event.is_in_award_stage():
        raise PreconditionFailed(
            f"Event {event.id} is in stage '{event.stage.value}'; carriers can only be "
            f"awarded or declined during award_tariff_finalization (assignment {assignment_id})"
        )


class AwardCarrierUseCase:
    """Atomic award: status transition + tariff family + proposed tariff + back-link."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        reference_prefix: str = DEFAULT_REFERENCE_PREFIX,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._uow_factory = uow_factory
        self._prefix = reference_prefix
        self._clock = clock

    async def execute(
        self,
        assignment_id: int,
        awarded_by: str,
        lane_scope: LaneScope | None = None,
        notes: str | None = None,
        proposed_effective_date: date | None = None,
        proposed_expiry_date: date | None = None,
    ) -> AwardResult:
        """Award the carrier behind *assignment_id*.

        Args:
            assignment_id: assignment to award.
            awarded_by: identity recorded as the awarding user.
            lane_scope: stored only when the assignment has no lane scope yet.
            notes: optional award notes, appended to the note log.
            proposed_effective_date / proposed_expiry_date: carried on the tariff.

        Raises:
            NotFoundError: assignment or event missing.
            ConflictError: already awarded, or lost a concurrent award race.
            PreconditionFailed: wrong event stage or assignment status.
        """
        if proposed_effective_date and proposed_expiry_date:
            if proposed_expiry_date < proposed_effective_date:
                raise ValidationError("Proposed expiry date is before the effective date")

        async with self._uow_factory() as uow:
            assignment = await uow.assignments.get_for_update(assignment_id)
            if assignment is None:
                raise NotFoundError(f"Assignment {assignment_id} not found")
            if assignment.status == AssignmentStatus.AWARDED:
                raise ConflictError(
                    f"Assignment {assignment_id} is already awarded "
                    f"(tariff {assignment.proposed_tariff_id}); refresh and retry"
                )

            event = await uow.events.get(assignment.event_id)
            if event is None:
                raise NotFoundError(f"Sourcing event {assignment.event_id} not found")
            _require_award_stage(event, assignment_id)
            ensure_awardable(assignment)

            now = self._clock()
            changes = self._award_changes(assignment, awarded_by, now, lane_scope)

            # Step 1: compare-and-set; a concurrent award makes this raise ConflictError
            awarded = await uow.assignments.conditional_update(
                assignment_id, expected_status=assignment.status, changes=changes
            )

            # Step 2: tariff family
            family = await uow.tariffs.find_or_create_family(
                event.customer_id, assignment.carrier_id, OwnershipType.PRIMARY
            )

            # Step 3: proposed tariff
            scope = awarded.lane_scope
            mode = scope.mode if scope is not None and scope.mode else event.mode
            tariff = await uow.tariffs.create_tariff(Tariff(
                id=None,
                family_id=family.id,
                carrier_id=assignment.carrier_id,
                csp_event_id=event.id,
                source_assignment_id=assignment_id,
                name=build_tariff_name(event.title, assignment.carrier_id, now),
                status=TariffStatus.PROPOSED,
                customer_ids=[event.customer_id],
                mode=mode,
                proposed_effective_date=proposed_effective_date,
                proposed_expiry_date=proposed_expiry_date,
            ))

            # Step 4: back-link; the row is still locked by get_for_update
            await uow.assignments.update(assignment_id, {"proposed_tariff_id": tariff.id})

            # Step 5: reference id
            reference = build_tariff_reference(self._prefix, tariff.id, now)
            await uow.tariffs.set_reference_id(tariff.id, reference)

            if notes and notes.strip():
                await uow.assignments.append_note(assignment_id, notes)

            await uow.activity.append(ActivityEntry(
                activity_type=ActivityType.AWARD,
                description=f"Carrier {assignment.carrier_id} awarded; proposed tariff {reference}",
                user_id=awarded_by,
                customer_id=event.customer_id,
                carrier_id=assignment.carrier_id,
                event_id=event.id,
                assignment_id=assignment_id,
                details=notes.strip() if notes and notes.strip() else None,
            ))
            await uow.commit()

        logger.info(
            "Assignment %d awarded by %s → tariff %d (%s), family %d",
            assignment_id, awarded_by, tariff.id, reference, family.id,
        )
        return AwardResult(
            assignment_id=assignment_id,
            tariff_id=tariff.id,
            tariff_family_id=family.id,
            tariff_reference_id=reference,
        )

    @staticmethod
    def _award_changes(
        assignment: CarrierAssignment,
        awarded_by: str,
        now: datetime,
        lane_scope: LaneScope | None,
    ) -> dict[str, Any]:
        changes: dict[str, Any] = {
            "status": AssignmentStatus.AWARDED,
            "awarded_at": now,
            "awarded_by": awarded_by,
        }
        # An existing lane scope is kept as-is
        if lane_scope is not None and not lane_scope.is_empty() and not assignment.has_lane_scope():
            changes["lane_scope"] = lane_scope
        return changes


class NotAwardCarrierUseCase:
    """Mark a carrier as not awarded, with a mandatory reason."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def execute(
        self,
        assignment_id: int,
        reason: str,
        notes: str | None = None,
        actor_id: str | None = None,
    ) -> CarrierAssignment:
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A reason is required to mark a carrier as not awarded")

        async with self._uow_factory() as uow:
            assignment = await uow.assignments.get(assignment_id)
            if assignment is None:
                raise NotFoundError(f"Assignment {assignment_id} not found")

            event = await uow.events.get(assignment.event_id)
            if event is None:
                raise NotFoundError(f"Sourcing event {assignment.event_id} not found")
            _require_award_stage(event, assignment_id)
            ensure_can_decline(assignment)

            updated = await uow.assignments.conditional_update(
                assignment_id,
                expected_status=assignment.status,
                changes={"status": AssignmentStatus.NOT_AWARDED, "not_awarded_reason": reason},
            )
            if notes and notes.strip():
                await uow.assignments.append_note(assignment_id, notes)
            await uow.activity.append(ActivityEntry(
                activity_type=ActivityType.NOT_AWARD,
                description=f"Carrier {assignment.carrier_id} not awarded: {reason}",
                user_id=actor_id,
                customer_id=event.customer_id,
                carrier_id=assignment.carrier_id,
                event_id=event.id,
                assignment_id=assignment_id,
                details=notes.strip() if notes and notes.strip() else None,
            ))
            await uow.commit()

        logger.info("Assignment %d not awarded (%s)", assignment_id, reason)
        return updated
