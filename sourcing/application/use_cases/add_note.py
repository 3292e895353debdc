"""AddNoteUseCase — save a note on an assignment and notify mentioned users.

The note commits first. Mention resolution and notification fanout run after
the commit, so a directory or sink outage is reported separately and never
undoes or fails the note itself. Fanout is idempotent per (note, recipient)
and can be re-run with ``retry_fanout``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from sourcing.application.ports.directory_port import DirectoryLookup
from sourcing.application.ports.notification_sink import NotificationSink
from sourcing.application.use_cases.change_status import UnitOfWorkFactory
from sourcing.domain.entities.assignment import CarrierAssignment
from sourcing.domain.entities.note import ActivityEntry, DirectoryUser, Note, Notification
from sourcing.domain.entities.sourcing_event import SourcingEvent
from sourcing.domain.errors import ExternalServiceError, NotFoundError, ValidationError
from sourcing.domain.policies.mentions import notification_key, resolve_mentions
from sourcing.domain.value_objects.enums import ActivityType, NotificationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddNoteResult:
    note_id: int
    resolved_mention_count: int
    notifications_created: int = 0
    notification_error: str | None = None


@dataclass(frozen=True)
class FanoutResult:
    note_id: int
    resolved_mention_count: int
    notifications_created: int


class NotificationFanout:
    """One ``mention`` notification per resolved identity."""

    def __init__(self, sink: NotificationSink, retry_attempts: int = 3, retry_delay: float = 0.2):
        self._sink = sink
        self._attempts = max(1, retry_attempts)
        self._delay = retry_delay

    async def fanout(
        self,
        note: Note,
        assignment: CarrierAssignment,
        event: SourcingEvent,
        recipients: list[DirectoryUser],
    ) -> int:
        """Enqueue notifications and return how many were newly stored.

        Raises ExternalServiceError once retries for a recipient run out.
        """
        created = 0
        for user in recipients:
            notification = self.build(note, assignment, event, user)
            if await self._enqueue_with_retry(notification):
                created += 1
        return created

    @staticmethod
    def build(
        note: Note,
        assignment: CarrierAssignment,
        event: SourcingEvent,
        recipient: DirectoryUser,
    ) -> Notification:
        return Notification(
            recipient_id=recipient.id,
            type=NotificationType.MENTION,
            title="You were mentioned in a note",
            message=f"Carrier {assignment.carrier_id} in CSP: {event.title or 'Untitled'}",
            link=f"/pipeline/{event.id}?tab=carriers",
            idempotency_key=notification_key(note.id, recipient.id),
            metadata={
                "csp_event_id": event.id,
                "csp_event_carrier_id": assignment.id,
                "carrier_id": assignment.carrier_id,
                "note_id": note.id,
                "note_text": note.text,
                "mentioned_by": note.author_id,
            },
        )

    async def _enqueue_with_retry(self, notification: Notification) -> bool:
        for attempt in range(1, self._attempts + 1):
            try:
                return await self._sink.enqueue(notification)
            except ExternalServiceError:
                if attempt == self._attempts:
                    raise
                logger.warning(
                    "Notification sink unavailable for %s (attempt %d/%d), retrying",
                    notification.recipient_id, attempt, self._attempts,
                )
                await asyncio.sleep(self._delay * attempt)
        return False


class AddNoteUseCase:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        directory: DirectoryLookup,
        fanout: NotificationFanout,
    ):
        self._uow_factory = uow_factory
        self._directory = directory
        self._fanout = fanout

    async def execute(self, assignment_id: int, author_id: str, text: str) -> AddNoteResult:
        if not text or not text.strip():
            raise ValidationError("Note cannot be empty")
        text = text.strip()

        async with self._uow_factory() as uow:
            assignment = await uow.assignments.get(assignment_id)
            if assignment is None:
                raise NotFoundError(f"Assignment {assignment_id} not found")
            event = await uow.events.get(assignment.event_id)
            if event is None:
                raise NotFoundError(f"Sourcing event {assignment.event_id} not found")

            note = await uow.notes.add(Note(
                id=None, assignment_id=assignment_id, author_id=author_id, text=text,
            ))
            await uow.assignments.append_note(assignment_id, text)
            await uow.activity.append(ActivityEntry(
                activity_type=ActivityType.NOTE,
                description=text,
                user_id=author_id,
                customer_id=event.customer_id,
                carrier_id=assignment.carrier_id,
                event_id=event.id,
                assignment_id=assignment_id,
            ))
            await uow.commit()

        logger.info("Note %d saved on assignment %d", note.id, assignment_id)

        mentions: list[DirectoryUser] = []
        try:
            mentions = resolve_mentions(text, await self._directory.list_users())
            created = await self._fanout.fanout(note, assignment, event, mentions)
        except Exception as e:
            logger.exception("Mention fanout failed for note %d", note.id)
            return AddNoteResult(
                note_id=note.id,
                resolved_mention_count=len(mentions),
                notification_error=str(e),
            )

        if mentions:
            logger.info("Note %d: %d user(s) notified", note.id, created)
        return AddNoteResult(
            note_id=note.id,
            resolved_mention_count=len(mentions),
            notifications_created=created,
        )

    async def retry_fanout(self, note_id: int) -> FanoutResult:
        """Re-run mention fanout for a stored note.

        Already-delivered notifications are skipped by their idempotency key.
        """
        async with self._uow_factory() as uow:
            note = await uow.notes.get(note_id)
            if note is None:
                raise NotFoundError(f"Note {note_id} not found")
            assignment = await uow.assignments.get(note.assignment_id)
            if assignment is None:
                raise NotFoundError(f"Assignment {note.assignment_id} not found")
            event = await uow.events.get(assignment.event_id)
            if event is None:
                raise NotFoundError(f"Sourcing event {assignment.event_id} not found")

        mentions = resolve_mentions(note.text, await self._directory.list_users())
        created = await self._fanout.fanout(note, assignment, event, mentions)
        logger.info(
            "Note %d fanout retried: %d mention(s), %d new notification(s)",
            note_id, len(mentions), created,
        )
        return FanoutResult(
            note_id=note_id,
            resolved_mention_count=len(mentions),
            notifications_created=created,
        )
