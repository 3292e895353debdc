"""Notes, notifications, activity entries and directory identities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sourcing.domain.value_objects.enums import ActivityType, NotificationType


@dataclass(frozen=True)
class DirectoryUser:
    id: str
    first_name: str
    last_name: str
    email: str | None = None


@dataclass
class Note:
    id: int | None
    assignment_id: int
    author_id: str
    text: str
    created_at: datetime | None = None


@dataclass
class Notification:
    recipient_id: str
    type: NotificationType
    title: str
    message: str
    link: str
    idempotency_key: str
    metadata: dict[str, Any] = field(default_factory=dict)
    id: int | None = None


@dataclass
class ActivityEntry:
    activity_type: ActivityType
    description: str
    user_id: str | None = None
    customer_id: int | None = None
    carrier_id: int | None = None
    event_id: int | None = None
    assignment_id: int | None = None
    details: str | None = None
    id: int | None = None
