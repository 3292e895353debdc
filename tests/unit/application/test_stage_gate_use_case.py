"""Tests for StageGateUseCase with in-memory fakes."""

from __future__ import annotations

import pytest

from sourcing.application.use_cases.stage_gate import StageGateUseCase
from sourcing.domain.errors import NotFoundError, StageGateBlocked, ValidationError
from sourcing.domain.value_objects.enums import ActivityType, AssignmentStatus, EventStage, UserRole
from tests.unit.application.fakes import InMemoryStore, uow_factory_for


@pytest.fixture
def store():
    s = InMemoryStore()
    s.add_event(stage=EventStage.AWARD_TARIFF_FINALIZATION)
    s.add_assignment(1, AssignmentStatus.UNDER_REVIEW)
    s.add_assignment(2, AssignmentStatus.NOT_AWARDED)
    return s


@pytest.fixture
def gate(store):
    return StageGateUseCase(uow_factory_for(store))


@pytest.mark.asyncio
async def test_blocked_without_award(gate):
    assert not await gate.can_advance(1)


@pytest.mark.asyncio
async def test_open_after_award(store, gate):
    store.assignments[1].status = AssignmentStatus.AWARDED

    assert await gate.can_advance(1)


@pytest.mark.asyncio
async def test_planning_event_is_ungated(store, gate):
    store.add_event(event_id=2, stage=EventStage.PLANNING)

    assert await gate.can_advance(2)


@pytest.mark.asyncio
async def test_unknown_event(gate):
    with pytest.raises(NotFoundError):
        await gate.can_advance(77)


@pytest.mark.asyncio
async def test_basic_user_is_blocked(gate):
    with pytest.raises(StageGateBlocked):
        await gate.check_advance(1, EventStage.AWARDED, actor_id="u-sam", actor_role=UserRole.BASIC)


@pytest.mark.asyncio
async def test_tariff_master_cannot_override(gate):
    with pytest.raises(StageGateBlocked):
        await gate.check_advance(
            1, EventStage.AWARDED, "u-maria", UserRole.TARIFF_MASTER, override_reason="urgent"
        )


@pytest.mark.asyncio
async def test_admin_override_needs_reason(store, gate):
    with pytest.raises(ValidationError):
        await gate.check_advance(1, EventStage.AWARDED, "u-jane", UserRole.ADMIN, override_reason=" ")

    assert store.activities == []


@pytest.mark.asyncio
async def test_elite_override_is_logged(store, gate):
    decision = await gate.check_advance(
        1, EventStage.AWARDED, "u-john", UserRole.ELITE, override_reason="Customer signed offline"
    )

    assert decision.allowed
    assert decision.overridden
    [entry] = store.activities_of(ActivityType.STAGE_GATE_OVERRIDE)
    assert entry.user_id == "u-john"
    assert entry.details.startswith("Reason: Customer signed offline\n\nValidation Error: ")


@pytest.mark.asyncio
async def test_moving_back_is_never_gated(store, gate):
    decision = await gate.check_advance(1, EventStage.ROUND_1, "u-sam", UserRole.BASIC)

    assert decision.allowed
    assert not decision.overridden
    assert store.activities == []


@pytest.mark.asyncio
async def test_open_gate_needs_no_override(store, gate):
    store.assignments[1].status = AssignmentStatus.AWARDED

    decision = await gate.check_advance(1, EventStage.AWARDED, "u-sam", UserRole.BASIC)

    assert decision.allowed
    assert not decision.overridden
