"""Tests for QuickStatusChangeUseCase and InviteCarrierUseCase with in-memory fakes."""

from __future__ import annotations

import pytest

from sourcing.application.use_cases.change_status import (
    InviteCarrierUseCase,
    QuickStatusChangeUseCase,
)
from sourcing.domain.errors import ConflictError, InvalidTransition, NotFoundError
from sourcing.domain.value_objects.enums import ActivityType, AssignmentStatus, EventStage
from tests.unit.application.fakes import FIXED_NOW, InMemoryStore, fixed_clock, uow_factory_for


@pytest.fixture
def store():
    s = InMemoryStore()
    s.add_event(stage=EventStage.ROUND_1)
    return s


@pytest.fixture
def quick_status(store):
    return QuickStatusChangeUseCase(uow_factory_for(store), clock=fixed_clock)


# ─── Quick status change ────────────────────────────────────────────


@pytest.mark.asyncio
async def test_invited_to_submitted_stamps_timestamp(store, quick_status):
    store.add_assignment(1, AssignmentStatus.INVITED)

    updated = await quick_status.execute(1, AssignmentStatus.SUBMITTED, actor_id="u-sam")

    assert updated.status == AssignmentStatus.SUBMITTED
    assert updated.submitted_at == FIXED_NOW
    assert store.assignments[1].status == AssignmentStatus.SUBMITTED
    [entry] = store.activities_of(ActivityType.STATUS_CHANGE)
    assert entry.user_id == "u-sam"
    assert entry.assignment_id == 1


@pytest.mark.asyncio
async def test_backwards_move_between_active_statuses(store, quick_status):
    store.add_assignment(1, AssignmentStatus.REVISION_REQUESTED)

    updated = await quick_status.execute(1, AssignmentStatus.INVITED)

    assert updated.status == AssignmentStatus.INVITED


@pytest.mark.asyncio
async def test_same_status_is_a_no_op(store, quick_status):
    store.add_assignment(1, AssignmentStatus.UNDER_REVIEW)

    await quick_status.execute(1, AssignmentStatus.UNDER_REVIEW)

    assert store.activities == []
    assert store.commits == 0


@pytest.mark.asyncio
async def test_quick_change_cannot_award(store, quick_status):
    store.add_assignment(1, AssignmentStatus.UNDER_REVIEW)

    with pytest.raises(InvalidTransition):
        await quick_status.execute(1, AssignmentStatus.AWARDED)

    assert store.assignments[1].status == AssignmentStatus.UNDER_REVIEW


@pytest.mark.asyncio
async def test_terminal_assignment_is_frozen(store, quick_status):
    store.add_assignment(1, AssignmentStatus.NOT_AWARDED)

    with pytest.raises(InvalidTransition):
        await quick_status.execute(1, AssignmentStatus.UNDER_REVIEW)


@pytest.mark.asyncio
async def test_missing_assignment(quick_status):
    with pytest.raises(NotFoundError):
        await quick_status.execute(999, AssignmentStatus.SUBMITTED)


# ─── Invite carrier ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_invite_creates_invited_assignment(store):
    uc = InviteCarrierUseCase(uow_factory_for(store), clock=fixed_clock)

    assignment = await uc.execute(1, carrier_id=555, actor_id="u-jane")

    stored = store.assignments[assignment.id]
    assert stored.status == AssignmentStatus.INVITED
    assert stored.invited_at == FIXED_NOW
    [entry] = store.activities_of(ActivityType.CARRIER_INVITED)
    assert entry.carrier_id == 555
    assert entry.customer_id == 7


@pytest.mark.asyncio
async def test_invite_same_carrier_twice_conflicts(store):
    uc = InviteCarrierUseCase(uow_factory_for(store), clock=fixed_clock)
    await uc.execute(1, carrier_id=555)

    with pytest.raises(ConflictError):
        await uc.execute(1, carrier_id=555)

    assert len(store.assignments) == 1


@pytest.mark.asyncio
async def test_invite_to_unknown_event(store):
    uc = InviteCarrierUseCase(uow_factory_for(store), clock=fixed_clock)

    with pytest.raises(NotFoundError):
        await uc.execute(42, carrier_id=555)
