"""StageGateUseCase — evaluate, and optionally override, the award stage gate."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sourcing.application.use_cases.change_status import UnitOfWorkFactory
from sourcing.domain.entities.note import ActivityEntry
from sourcing.domain.errors import NotFoundError, StageGateBlocked, ValidationError
from sourcing.domain.policies.stage_gate import blocked_reason, can_advance
from sourcing.domain.value_objects.enums import ActivityType, EventStage, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageGateDecision:
    event_id: int
    from_stage: EventStage
    to_stage: EventStage
    allowed: bool
    overridden: bool = False


class StageGateUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow_factory = uow_factory

    async def can_advance(self, event_id: int) -> bool:
        async with self._uow_factory() as uow:
            event = await uow.events.get(event_id)
            if event is None:
                raise NotFoundError(f"Sourcing event {event_id} not found")
            assignments = await uow.assignments.list_by_event(event_id)
        return can_advance(event, assignments)

    async def check_advance(
        self,
        event_id: int,
        to_stage: EventStage,
        actor_id: str,
        actor_role: UserRole,
        override_reason: str | None = None,
    ) -> StageGateDecision:
        """Decide whether the event may move to *to_stage*.

        Moving backwards is never gated. A blocked forward move is allowed
        only for an elevated role that supplies an override reason; the
        override is written to the activity log.

        Raises:
            NotFoundError: event missing.
            ValidationError: elevated override requested without a reason.
            StageGateBlocked: gate closed and no override available.
        """
        async with self._uow_factory() as uow:
            event = await uow.events.get(event_id)
            if event is None:
                raise NotFoundError(f"Sourcing event {event_id} not found")

            if to_stage.order <= event.stage.order:
                return StageGateDecision(event_id, event.stage, to_stage, allowed=True)

            assignments = await uow.assignments.list_by_event(event_id)
            if can_advance(event, assignments):
                return StageGateDecision(event_id, event.stage, to_stage, allowed=True)

            reason_text = blocked_reason(event)
            if not actor_role.is_elevated():
                raise StageGateBlocked(reason_text)

            if override_reason is None or not override_reason.strip():
                raise ValidationError("An override reason is required to bypass the stage gate")

            await uow.activity.append(ActivityEntry(
                activity_type=ActivityType.STAGE_GATE_OVERRIDE,
                description=f"Stage gate overridden: {event.stage.value} → {to_stage.value}",
                details=f"Reason: {override_reason.strip()}\n\nValidation Error: {reason_text}",
                user_id=actor_id,
                customer_id=event.customer_id,
                event_id=event_id,
            ))
            await uow.commit()

        logger.warning(
            "Event %d: stage gate overridden by %s (%s) %s → %s",
            event_id, actor_id, actor_role.value, event.stage.value, to_stage.value,
        )
        return StageGateDecision(event_id, event.stage, to_stage, allowed=True, overridden=True)
