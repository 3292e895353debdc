"""Request / response schemas for the HTTP API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from sourcing.domain.entities.assignment import BidDoc, CarrierAssignment
from sourcing.domain.entities.tariff import Tariff
from sourcing.domain.value_objects.enums import AssignmentStatus, BulkAction, EventStage, TariffStatus
from sourcing.domain.value_objects.lane_scope import LaneScope


class LaneScopeIn(BaseModel):
    mode: str | None = None
    origins: list[str] = Field(default_factory=list)
    destinations: list[str] = Field(default_factory=list)
    equipment: list[str] = Field(default_factory=list)
    volume: str | float | None = None
    include_regions: list[str] = Field(default_factory=list)
    exclude_regions: list[str] = Field(default_factory=list)

    def to_domain(self) -> LaneScope | None:
        return LaneScope.from_dict(self.model_dump())


# ── Assignments ─────────────────────────────────────────────────────


class BidDocOut(BaseModel):
    name: str
    path: str
    uploaded_at: datetime | None = None
    uploaded_by: str | None = None
    size_bytes: int | None = None

    @classmethod
    def from_domain(cls, d: BidDoc) -> BidDocOut:
        return cls(
            name=d.name,
            path=d.path,
            uploaded_at=d.uploaded_at,
            uploaded_by=d.uploaded_by,
            size_bytes=d.size_bytes,
        )


class AssignmentOut(BaseModel):
    id: int
    event_id: int
    carrier_id: int
    status: AssignmentStatus
    invited_at: datetime | None = None
    submitted_at: datetime | None = None
    awarded_at: datetime | None = None
    awarded_by: str | None = None
    not_awarded_reason: str | None = None
    lane_scope: dict[str, Any] | None = None
    bid_docs: list[BidDocOut] = Field(default_factory=list)
    notes: str | None = None
    latest_note: str | None = None
    proposed_tariff_id: int | None = None

    @classmethod
    def from_domain(cls, a: CarrierAssignment) -> AssignmentOut:
        return cls(
            id=a.id,
            event_id=a.event_id,
            carrier_id=a.carrier_id,
            status=a.status,
            invited_at=a.invited_at,
            submitted_at=a.submitted_at,
            awarded_at=a.awarded_at,
            awarded_by=a.awarded_by,
            not_awarded_reason=a.not_awarded_reason,
            lane_scope=a.lane_scope.to_dict() if a.lane_scope else None,
            bid_docs=[BidDocOut.from_domain(d) for d in a.bid_docs],
            notes=a.notes,
            latest_note=a.latest_note,
            proposed_tariff_id=a.proposed_tariff_id,
        )


class InviteCarrierRequest(BaseModel):
    carrier_id: int


class StatusChangeRequest(BaseModel):
    status: AssignmentStatus


class AwardRequest(BaseModel):
    lane_scope: LaneScopeIn | None = None
    notes: str | None = None
    proposed_effective_date: date | None = None
    proposed_expiry_date: date | None = None


class AwardOut(BaseModel):
    assignment_id: int
    tariff_id: int
    tariff_family_id: int
    tariff_reference_id: str


class TariffOut(BaseModel):
    id: int
    family_id: int
    name: str
    status: TariffStatus
    carrier_id: int
    customer_ids: list[int]
    csp_event_id: int
    source_assignment_id: int | None = None
    mode: str | None = None
    proposed_effective_date: date | None = None
    proposed_expiry_date: date | None = None
    tariff_reference_id: str | None = None

    @classmethod
    def from_domain(cls, t: Tariff) -> TariffOut:
        return cls(
            id=t.id,
            family_id=t.family_id,
            name=t.name,
            status=t.status,
            carrier_id=t.carrier_id,
            customer_ids=t.customer_ids,
            csp_event_id=t.csp_event_id,
            source_assignment_id=t.source_assignment_id,
            mode=t.mode,
            proposed_effective_date=t.proposed_effective_date,
            proposed_expiry_date=t.proposed_expiry_date,
            tariff_reference_id=t.tariff_reference_id,
        )


class NotAwardRequest(BaseModel):
    reason: str
    notes: str | None = None


class BulkRequest(BaseModel):
    assignment_ids: list[int] = Field(min_length=1)
    action: BulkAction
    reason: str | None = None
    notes: str | None = None
    lane_scope: LaneScopeIn | None = None


class BulkItemOut(BaseModel):
    ok: bool
    error_code: str | None = None
    error: str | None = None
    result: dict[str, Any] | None = None


class BulkOut(BaseModel):
    action: BulkAction
    succeeded: list[int]
    failed: list[int]
    partial: bool
    items: dict[int, BulkItemOut]


# ── Notes ───────────────────────────────────────────────────────────


class NoteRequest(BaseModel):
    text: str


class NoteOut(BaseModel):
    note_id: int
    resolved_mention_count: int
    notifications_created: int = 0
    notification_error: str | None = None


class FanoutOut(BaseModel):
    note_id: int
    resolved_mention_count: int
    notifications_created: int


# ── Stage gate ──────────────────────────────────────────────────────


class StageGateOut(BaseModel):
    event_id: int
    can_advance: bool


class StageAdvanceRequest(BaseModel):
    to_stage: EventStage
    override_reason: str | None = None


class StageAdvanceOut(BaseModel):
    event_id: int
    from_stage: EventStage
    to_stage: EventStage
    allowed: bool
    overridden: bool
