"""End-to-end award scenario over the in-memory store."""

from __future__ import annotations

import pytest

from sourcing.application.use_cases.add_note import AddNoteUseCase, NotificationFanout
from sourcing.application.use_cases.award_carrier import AwardCarrierUseCase, NotAwardCarrierUseCase
from sourcing.application.use_cases.bulk_apply import BulkApplyUseCase, BulkParams
from sourcing.application.use_cases.change_status import (
    InviteCarrierUseCase,
    QuickStatusChangeUseCase,
)
from sourcing.application.use_cases.stage_gate import StageGateUseCase
from sourcing.domain.value_objects.enums import AssignmentStatus, BulkAction, EventStage
from tests.unit.application.fakes import (
    FakeDirectory,
    FakeSink,
    InMemoryStore,
    fixed_clock,
    uow_factory_for,
)


@pytest.mark.asyncio
async def test_invite_review_award_and_open_gate(directory_users):
    store = InMemoryStore()
    store.add_event(stage=EventStage.AWARD_TARIFF_FINALIZATION)
    factory = uow_factory_for(store)

    invite = InviteCarrierUseCase(factory, clock=fixed_clock)
    quick = QuickStatusChangeUseCase(factory, clock=fixed_clock)
    award = AwardCarrierUseCase(factory, clock=fixed_clock)
    not_award = NotAwardCarrierUseCase(factory)
    bulk = BulkApplyUseCase(quick, award, not_award)
    gate = StageGateUseCase(factory)
    sink = FakeSink()
    notes = AddNoteUseCase(factory, FakeDirectory(directory_users), NotificationFanout(sink, retry_delay=0))

    ids = [(await invite.execute(1, carrier_id=c)).id for c in (201, 202, 203)]
    await bulk.execute(ids, BulkAction.MARK_SUBMITTED)
    for assignment_id in ids:
        await quick.execute(assignment_id, AssignmentStatus.UNDER_REVIEW)

    assert not await gate.can_advance(1)

    result = await award.execute(ids[0], awarded_by="u-jane")
    declined = await bulk.execute(ids[1:], BulkAction.NOT_AWARD, BulkParams(reason="Pricing"))
    note = await notes.execute(ids[0], "u-maria", "@Jane Doe tariff drafted")

    assert await gate.can_advance(1)
    assert declined.succeeded == ids[1:]
    assert store.assignments[ids[0]].proposed_tariff_id == result.tariff_id
    assert {a.status for a in store.assignments.values()} == {
        AssignmentStatus.AWARDED,
        AssignmentStatus.NOT_AWARDED,
    }
    assert note.notifications_created == 1
    assert len(store.tariffs) == 1
