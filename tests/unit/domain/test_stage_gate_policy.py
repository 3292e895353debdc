"""Tests for StageGatePolicy."""

from sourcing.domain.entities.assignment import CarrierAssignment
from sourcing.domain.entities.sourcing_event import SourcingEvent
from sourcing.domain.policies.stage_gate import blocked_reason, can_advance
from sourcing.domain.value_objects.enums import AssignmentStatus, EventStage


def _event(stage: EventStage) -> SourcingEvent:
    return SourcingEvent(id=5, customer_id=1, stage=stage)


def _assignments(*statuses: AssignmentStatus) -> list[CarrierAssignment]:
    return [
        CarrierAssignment(id=i, event_id=5, carrier_id=i, status=s)
        for i, s in enumerate(statuses, start=1)
    ]


def test_early_stages_are_ungated():
    assert can_advance(_event(EventStage.PLANNING), [])
    assert can_advance(_event(EventStage.INVITED), [])


def test_blocked_without_award():
    event = _event(EventStage.RFP_SENT)
    assert not can_advance(event, _assignments(AssignmentStatus.SUBMITTED, AssignmentStatus.UNDER_REVIEW))


def test_one_award_opens_gate():
    event = _event(EventStage.AWARD_TARIFF_FINALIZATION)
    assert can_advance(event, _assignments(AssignmentStatus.NOT_AWARDED, AssignmentStatus.AWARDED))


def test_blocked_reason_names_stage():
    assert "rfp_sent" in blocked_reason(_event(EventStage.RFP_SENT))
