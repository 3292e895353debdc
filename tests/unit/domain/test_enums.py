"""Tests for domain enums."""

from sourcing.domain.value_objects.enums import (
    ACTIVE_STATUSES,
    AWARDABLE_STATUSES,
    TERMINAL_STATUSES,
    AssignmentStatus,
    EventStage,
    UserRole,
)


def test_status_sets_partition_all_statuses():
    assert ACTIVE_STATUSES | TERMINAL_STATUSES == set(AssignmentStatus)
    assert not ACTIVE_STATUSES & TERMINAL_STATUSES


def test_awardable_statuses_are_active():
    assert AWARDABLE_STATUSES <= ACTIVE_STATUSES
    assert AssignmentStatus.SUBMITTED not in AWARDABLE_STATUSES


def test_terminal_flags():
    assert AssignmentStatus.AWARDED.is_terminal()
    assert AssignmentStatus.DECLINED.is_terminal()
    assert AssignmentStatus.INVITED.is_active()
    assert not AssignmentStatus.WITHDRAWN.is_active()


def test_stage_order_follows_pipeline():
    assert EventStage.PLANNING.order == 0
    assert EventStage.FINAL_OFFERS.order < EventStage.AWARD_TARIFF_FINALIZATION.order
    assert EventStage.AWARD_TARIFF_FINALIZATION.order < EventStage.AWARDED.order
    assert EventStage.RENEWAL_WATCH.order == len(EventStage) - 1


def test_elevated_roles():
    assert UserRole.ADMIN.is_elevated()
    assert UserRole.ELITE.is_elevated()
    assert not UserRole.TARIFF_MASTER.is_elevated()
    assert not UserRole.BASIC.is_elevated()


def test_status_values_round_trip_from_strings():
    assert AssignmentStatus("revision_requested") is AssignmentStatus.REVISION_REQUESTED
    assert EventStage("award_tariff_finalization") is EventStage.AWARD_TARIFF_FINALIZATION
