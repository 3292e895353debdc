"""Assignment endpoints — status changes, award decisions, bulk actions."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from sourcing.application.use_cases.award_carrier import (
    AwardCarrierUseCase,
    AwardResult,
    NotAwardCarrierUseCase,
)
from sourcing.application.use_cases.bulk_apply import BulkApplyUseCase, BulkParams
from sourcing.application.use_cases.change_status import QuickStatusChangeUseCase
from sourcing.domain.entities.assignment import CarrierAssignment
from sourcing.domain.errors import DomainError
from sourcing.infrastructure.api.dependencies import (
    Actor,
    get_actor,
    get_award_uc,
    get_bulk_apply_uc,
    get_not_award_uc,
    get_quick_status_uc,
    get_uow_factory,
)
from sourcing.infrastructure.api.errors import to_http
from sourcing.infrastructure.api.schemas import (
    AssignmentOut,
    AwardOut,
    AwardRequest,
    BulkItemOut,
    BulkOut,
    BulkRequest,
    NotAwardRequest,
    StatusChangeRequest,
    TariffOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])


# Declared before /{assignment_id} routes so "bulk" is not parsed as an id
@router.post("/bulk", response_model=BulkOut)
async def bulk_apply(
    payload: BulkRequest,
    actor: Actor = Depends(get_actor),
    uc: BulkApplyUseCase = Depends(get_bulk_apply_uc),
):
    """Apply one action to many assignments. Per-item failures are reported, not raised."""
    params = BulkParams(
        awarded_by=actor.user_id,
        reason=payload.reason,
        notes=payload.notes,
        lane_scope=payload.lane_scope.to_domain() if payload.lane_scope else None,
        actor_id=actor.user_id,
    )
    try:
        result = await uc.execute(payload.assignment_ids, payload.action, params)
    except DomainError as exc:
        raise to_http(exc) from exc

    items = {}
    for assignment_id, item in result.items.items():
        body = None
        if isinstance(item.value, AwardResult):
            body = asdict(item.value)
        elif isinstance(item.value, CarrierAssignment):
            body = AssignmentOut.from_domain(item.value).model_dump(mode="json")
        items[assignment_id] = BulkItemOut(
            ok=item.ok, error_code=item.error_code, error=item.error, result=body
        )

    return BulkOut(
        action=result.action,
        succeeded=result.succeeded,
        failed=result.failed,
        partial=result.is_partial,
        items=items,
    )


@router.get("/{assignment_id}", response_model=AssignmentOut)
async def get_assignment(assignment_id: int, uow_factory=Depends(get_uow_factory)):
    async with uow_factory() as uow:
        assignment = await uow.assignments.get(assignment_id)
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return AssignmentOut.from_domain(assignment)


@router.get("/{assignment_id}/tariff", response_model=TariffOut)
async def get_assignment_tariff(assignment_id: int, uow_factory=Depends(get_uow_factory)):
    """The proposed tariff created when this assignment was awarded."""
    async with uow_factory() as uow:
        assignment = await uow.assignments.get(assignment_id)
        if assignment is None:
            raise HTTPException(status_code=404, detail="Assignment not found")
        if assignment.proposed_tariff_id is None:
            raise HTTPException(status_code=404, detail="Assignment has no linked tariff")
        tariff = await uow.tariffs.get_tariff(assignment.proposed_tariff_id)
    if tariff is None:
        raise HTTPException(status_code=404, detail="Tariff not found")
    return TariffOut.from_domain(tariff)


@router.post("/{assignment_id}/status", response_model=AssignmentOut)
async def change_status(
    assignment_id: int,
    payload: StatusChangeRequest,
    actor: Actor = Depends(get_actor),
    uc: QuickStatusChangeUseCase = Depends(get_quick_status_uc),
):
    try:
        assignment = await uc.execute(assignment_id, payload.status, actor_id=actor.user_id)
    except DomainError as exc:
        raise to_http(exc) from exc
    return AssignmentOut.from_domain(assignment)


@router.post("/{assignment_id}/award", response_model=AwardOut)
async def award_carrier(
    assignment_id: int,
    payload: AwardRequest,
    actor: Actor = Depends(get_actor),
    uc: AwardCarrierUseCase = Depends(get_award_uc),
):
    """Award the carrier and create its proposed tariff in one transaction."""
    try:
        result = await uc.execute(
            assignment_id,
            awarded_by=actor.user_id,
            lane_scope=payload.lane_scope.to_domain() if payload.lane_scope else None,
            notes=payload.notes,
            proposed_effective_date=payload.proposed_effective_date,
            proposed_expiry_date=payload.proposed_expiry_date,
        )
    except DomainError as exc:
        raise to_http(exc) from exc
    return AwardOut(**asdict(result))


@router.post("/{assignment_id}/not-award", response_model=AssignmentOut)
async def not_award_carrier(
    assignment_id: int,
    payload: NotAwardRequest,
    actor: Actor = Depends(get_actor),
    uc: NotAwardCarrierUseCase = Depends(get_not_award_uc),
):
    try:
        assignment = await uc.execute(
            assignment_id, reason=payload.reason, notes=payload.notes, actor_id=actor.user_id
        )
    except DomainError as exc:
        raise to_http(exc) from exc
    return AssignmentOut.from_domain(assignment)
