"""CarrierAssignment entity — one carrier's participation in one sourcing event."""

from dataclasses import dataclass, field
from datetime import datetime

from sourcing.domain.value_objects.enums import AssignmentStatus
from sourcing.domain.value_objects.lane_scope import LaneScope

LATEST_NOTE_PREVIEW_CHARS = 100
# Between entries of the append-only note log
NOTE_LOG_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class BidDoc:
    """Metadata of a bid document held by the document store."""

    name: str
    path: str
    uploaded_at: datetime | None = None
    uploaded_by: str | None = None
    size_bytes: int | None = None


@dataclass
class CarrierAssignment:
    id: int | None
    event_id: int
    carrier_id: int
    status: AssignmentStatus = AssignmentStatus.INVITED
    invited_at: datetime | None = None
    submitted_at: datetime | None = None
    awarded_at: datetime | None = None
    awarded_by: str | None = None
    not_awarded_reason: str | None = None
    lane_scope: LaneScope | None = None
    bid_docs: list[BidDoc] = field(default_factory=list)
    notes: str | None = None
    latest_note: str | None = None
    proposed_tariff_id: int | None = None

    def has_lane_scope(self) -> bool:
        return self.lane_scope is not None and not self.lane_scope.is_empty()


def note_preview(text: str) -> str:
    text = text.strip()
    if len(text) > LATEST_NOTE_PREVIEW_CHARS:
        return text[:LATEST_NOTE_PREVIEW_CHARS] + "..."
    return text
