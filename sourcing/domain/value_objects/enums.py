"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AssignmentStatus(str, Enum):
    INVITED = "invited"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    REVISION_REQUESTED = "revision_requested"
    AWARDED = "awarded"
    NOT_AWARDED = "not_awarded"
    WITHDRAWN = "withdrawn"
    DECLINED = "declined"

    def is_active(self) -> bool:
        return self in ACTIVE_STATUSES

    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


ACTIVE_STATUSES = frozenset({
    AssignmentStatus.INVITED,
    AssignmentStatus.SUBMITTED,
    AssignmentStatus.UNDER_REVIEW,
    AssignmentStatus.REVISION_REQUESTED,
})

TERMINAL_STATUSES = frozenset({
    AssignmentStatus.AWARDED,
    AssignmentStatus.NOT_AWARDED,
    AssignmentStatus.WITHDRAWN,
    AssignmentStatus.DECLINED,
})

# Statuses from which a carrier may be awarded
AWARDABLE_STATUSES = frozenset({
    AssignmentStatus.UNDER_REVIEW,
    AssignmentStatus.REVISION_REQUESTED,
})


class EventStage(str, Enum):
    """Sourcing event stages, declared in pipeline order."""

    PLANNING = "planning"
    INVITED = "invited"
    DISCOVERY = "discovery"
    DATA_ROOM_READY = "data_room_ready"
    RFP_SENT = "rfp_sent"
    QA_ROUND = "qa_round"
    ROUND_1 = "round_1"
    FINAL_OFFERS = "final_offers"
    AWARD_TARIFF_FINALIZATION = "award_tariff_finalization"
    AWARDED = "awarded"
    IMPLEMENTATION = "implementation"
    VALIDATION = "validation"
    LIVE = "live"
    RENEWAL_WATCH = "renewal_watch"

    @property
    def order(self) -> int:
        return list(EventStage).index(self)


class OwnershipType(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class TariffStatus(str, Enum):
    PROPOSED = "proposed"
    ACTIVE = "active"
    EXPIRED = "expired"
    SUPERSEDED = "superseded"


class NotificationType(str, Enum):
    MENTION = "mention"


class ActivityType(str, Enum):
    NOTE = "note"
    STATUS_CHANGE = "status_change"
    AWARD = "award"
    NOT_AWARD = "not_award"
    STAGE_GATE_OVERRIDE = "stage_gate_override"
    CARRIER_INVITED = "carrier_invited"


class BulkAction(str, Enum):
    MARK_SUBMITTED = "mark_submitted"
    AWARD = "award"
    NOT_AWARD = "not_award"


class UserRole(str, Enum):
    ADMIN = "admin"
    ELITE = "elite"
    TARIFF_MASTER = "tariff_master"
    BASIC = "basic"

    def is_elevated(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.ELITE)
