"""Sourcing event endpoints — carrier invitations and the award stage gate."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from sourcing.application.use_cases.change_status import InviteCarrierUseCase
from sourcing.application.use_cases.stage_gate import StageGateUseCase
from sourcing.domain.errors import DomainError
from sourcing.infrastructure.api.dependencies import (
    Actor,
    get_actor,
    get_invite_carrier_uc,
    get_stage_gate_uc,
)
from sourcing.infrastructure.api.errors import to_http
from sourcing.infrastructure.api.schemas import (
    AssignmentOut,
    InviteCarrierRequest,
    StageAdvanceOut,
    StageAdvanceRequest,
    StageGateOut,
)

router = APIRouter(prefix="/events", tags=["events"])


@router.post("/{event_id}/carriers", response_model=AssignmentOut, status_code=201)
async def invite_carrier(
    event_id: int,
    payload: InviteCarrierRequest,
    actor: Actor = Depends(get_actor),
    uc: InviteCarrierUseCase = Depends(get_invite_carrier_uc),
):
    try:
        assignment = await uc.execute(event_id, payload.carrier_id, actor_id=actor.user_id)
    except DomainError as exc:
        raise to_http(exc) from exc
    return AssignmentOut.from_domain(assignment)


@router.get("/{event_id}/stage-gate", response_model=StageGateOut)
async def stage_gate(event_id: int, uc: StageGateUseCase = Depends(get_stage_gate_uc)):
    """Whether the event may move past its current stage."""
    try:
        allowed = await uc.can_advance(event_id)
    except DomainError as exc:
        raise to_http(exc) from exc
    return StageGateOut(event_id=event_id, can_advance=allowed)


@router.post("/{event_id}/stage-gate/check", response_model=StageAdvanceOut)
async def check_stage_advance(
    event_id: int,
    payload: StageAdvanceRequest,
    actor: Actor = Depends(get_actor),
    uc: StageGateUseCase = Depends(get_stage_gate_uc),
):
    """Check a stage move; admins and elite users may override with a reason."""
    try:
        decision = await uc.check_advance(
            event_id,
            payload.to_stage,
            actor_id=actor.user_id,
            actor_role=actor.role,
            override_reason=payload.override_reason,
        )
    except DomainError as exc:
        raise to_http(exc) from exc
    return StageAdvanceOut(
        event_id=decision.event_id,
        from_stage=decision.from_stage,
        to_stage=decision.to_stage,
        allowed=decision.allowed,
        overridden=decision.overridden,
    )
