"""SQLAlchemy repository implementations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import case, literal, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sourcing.adapters.persistence.models import (
    ActivityModel,
    AssignmentNoteModel,
    CarrierAssignmentModel,
    NotificationModel,
    SourcingEventModel,
    TariffFamilyModel,
    TariffModel,
    UserProfileModel,
)
from sourcing.application.ports.activity_log import ActivityLog
from sourcing.application.ports.assignment_repo import AssignmentRepository
from sourcing.application.ports.directory_port import DirectoryLookup
from sourcing.application.ports.event_repo import EventRepository
from sourcing.application.ports.note_repo import NoteRepository
from sourcing.application.ports.notification_sink import NotificationSink
from sourcing.application.ports.tariff_repo import TariffRepository
from sourcing.domain.entities.assignment import (
    NOTE_LOG_SEPARATOR,
    BidDoc,
    CarrierAssignment,
    note_preview,
)
from sourcing.domain.entities.note import ActivityEntry, DirectoryUser, Note, Notification
from sourcing.domain.entities.sourcing_event import SourcingEvent
from sourcing.domain.entities.tariff import Tariff, TariffFamily
from sourcing.domain.errors import ConflictError, ExternalServiceError, NotFoundError
from sourcing.domain.value_objects.enums import (
    AssignmentStatus,
    EventStage,
    OwnershipType,
    TariffStatus,
)
from sourcing.domain.value_objects.lane_scope import LaneScope

logger = logging.getLogger(__name__)

# ─── Mappers ─────────────────────────────────────────────────────────


def _bid_doc_to_domain(raw: dict[str, Any]) -> BidDoc:
    uploaded_at = raw.get("uploaded_at")
    return BidDoc(
        name=raw.get("name", ""),
        path=raw.get("path") or raw.get("url", ""),
        uploaded_at=datetime.fromisoformat(uploaded_at) if uploaded_at else None,
        uploaded_by=raw.get("uploaded_by"),
        size_bytes=raw.get("size_bytes") or raw.get("size"),
    )


def _bid_doc_to_json(doc: BidDoc) -> dict[str, Any]:
    return {
        "name": doc.name,
        "path": doc.path,
        "uploaded_at": doc.uploaded_at.isoformat() if doc.uploaded_at else None,
        "uploaded_by": doc.uploaded_by,
        "size_bytes": doc.size_bytes,
    }


def _event_to_domain(m: SourcingEventModel) -> SourcingEvent:
    return SourcingEvent(
        id=m.id,
        customer_id=m.customer_id,
        stage=EventStage(m.stage),
        title=m.title,
        mode=m.mode,
    )


def _assignment_to_domain(m: CarrierAssignmentModel) -> CarrierAssignment:
    return CarrierAssignment(
        id=m.id,
        event_id=m.csp_event_id,
        carrier_id=m.carrier_id,
        status=AssignmentStatus(m.status),
        invited_at=m.invited_at,
        submitted_at=m.submitted_at,
        awarded_at=m.awarded_at,
        awarded_by=m.awarded_by,
        not_awarded_reason=m.not_awarded_reason,
        lane_scope=LaneScope.from_dict(m.lane_scope_json),
        bid_docs=[_bid_doc_to_domain(d) for d in (m.bid_docs or [])],
        notes=m.notes,
        latest_note=m.latest_note,
        proposed_tariff_id=m.proposed_tariff_id,
    )


def _assignment_values(changes: dict[str, Any]) -> dict[str, Any]:
    """Translate domain field changes into column values."""
    values: dict[str, Any] = {}
    for name, value in changes.items():
        if name == "status":
            values["status"] = AssignmentStatus(value).value
        elif name == "lane_scope":
            values["lane_scope_json"] = value.to_dict() if value is not None else None
        elif name == "bid_docs":
            values["bid_docs"] = [_bid_doc_to_json(d) for d in value]
        elif name == "event_id":
            values["csp_event_id"] = value
        else:
            values[name] = value
    return values


def _family_to_domain(m: TariffFamilyModel) -> TariffFamily:
    return TariffFamily(
        id=m.id,
        customer_id=m.customer_id,
        carrier_id=m.carrier_id,
        ownership_type=OwnershipType(m.ownership_type),
    )


def _tariff_to_domain(m: TariffModel) -> Tariff:
    return Tariff(
        id=m.id,
        family_id=m.family_id,
        carrier_id=m.carrier_id,
        csp_event_id=m.csp_event_id,
        source_assignment_id=m.source_assignment_id,
        name=m.name,
        status=TariffStatus(m.status),
        customer_ids=list(m.customer_ids or []),
        mode=m.mode,
        proposed_effective_date=m.proposed_effective_date,
        proposed_expiry_date=m.proposed_expiry_date,
        tariff_reference_id=m.tariff_reference_id,
    )


def _note_to_domain(m: AssignmentNoteModel) -> Note:
    return Note(
        id=m.id,
        assignment_id=m.csp_event_carrier_id,
        author_id=m.author_id,
        text=m.text,
        created_at=m.created_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlEventRepository(EventRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get(self, event_id: int) -> SourcingEvent | None:
        m = await self._s.get(SourcingEventModel, event_id)
        return _event_to_domain(m) if m else None

    async def get_stage(self, event_id: int) -> EventStage | None:
        result = await self._s.execute(
            select(SourcingEventModel.stage).where(SourcingEventModel.id == event_id)
        )
        stage = result.scalar_one_or_none()
        return EventStage(stage) if stage else None


class SqlAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def create(self, assignment: CarrierAssignment) -> CarrierAssignment:
        m = CarrierAssignmentModel(
            csp_event_id=assignment.event_id,
            carrier_id=assignment.carrier_id,
            status=assignment.status.value,
            invited_at=assignment.invited_at,
            lane_scope_json=assignment.lane_scope.to_dict() if assignment.lane_scope else None,
            bid_docs=[_bid_doc_to_json(d) for d in assignment.bid_docs],
            notes=assignment.notes,
        )
        self._s.add(m)
        try:
            await self._s.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"Carrier {assignment.carrier_id} is already on event {assignment.event_id}"
            ) from e
        assignment.id = m.id
        return assignment

    async def get(self, assignment_id: int) -> CarrierAssignment | None:
        m = await self._s.get(CarrierAssignmentModel, assignment_id)
        return _assignment_to_domain(m) if m else None

    async def get_for_update(self, assignment_id: int) -> CarrierAssignment | None:
        result = await self._s.execute(
            select(CarrierAssignmentModel)
            .where(CarrierAssignmentModel.id == assignment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        return _assignment_to_domain(m) if m else None

    async def get_by_event_and_carrier(
        self, event_id: int, carrier_id: int
    ) -> CarrierAssignment | None:
        result = await self._s.execute(
            select(CarrierAssignmentModel).where(
                CarrierAssignmentModel.csp_event_id == event_id,
                CarrierAssignmentModel.carrier_id == carrier_id,
            )
        )
        m = result.scalar_one_or_none()
        return _assignment_to_domain(m) if m else None

    async def list_by_event(self, event_id: int) -> list[CarrierAssignment]:
        result = await self._s.execute(
            select(CarrierAssignmentModel)
            .where(CarrierAssignmentModel.csp_event_id == event_id)
            .order_by(CarrierAssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def conditional_update(
        self,
        assignment_id: int,
        expected_status: AssignmentStatus,
        changes: dict[str, Any],
    ) -> CarrierAssignment:
        result = await self._s.execute(
            update(CarrierAssignmentModel)
            .where(
                CarrierAssignmentModel.id == assignment_id,
                CarrierAssignmentModel.status == expected_status.value,
            )
            .values(**_assignment_values(changes))
            .returning(CarrierAssignmentModel.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            current = await self._s.execute(
                select(CarrierAssignmentModel.status).where(CarrierAssignmentModel.id == assignment_id)
            )
            status = current.scalar_one_or_none()
            if status is None:
                raise NotFoundError(f"Assignment {assignment_id} not found")
            raise ConflictError(
                f"Assignment {assignment_id} changed concurrently: expected "
                f"'{expected_status.value}', found '{status}'. Refresh and retry."
            )
        m = await self._s.get(CarrierAssignmentModel, assignment_id, populate_existing=True)
        return _assignment_to_domain(m)

    async def update(self, assignment_id: int, changes: dict[str, Any]) -> CarrierAssignment:
        result = await self._s.execute(
            update(CarrierAssignmentModel)
            .where(CarrierAssignmentModel.id == assignment_id)
            .values(**_assignment_values(changes))
            .returning(CarrierAssignmentModel.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        m = await self._s.get(CarrierAssignmentModel, assignment_id, populate_existing=True)
        return _assignment_to_domain(m)

    async def append_note(self, assignment_id: int, text: str) -> None:
        text = text.strip()
        notes = CarrierAssignmentModel.notes
        result = await self._s.execute(
            update(CarrierAssignmentModel)
            .where(CarrierAssignmentModel.id == assignment_id)
            .values(
                notes=case(
                    ((notes.is_(None)) | (notes == ""), literal(text)),
                    else_=notes + literal(NOTE_LOG_SEPARATOR + text),
                ),
                latest_note=note_preview(text),
            )
            .returning(CarrierAssignmentModel.id)
            .execution_options(synchronize_session=False)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")


class SqlTariffRepository(TariffRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def _find_family(
        self, customer_id: int, carrier_id: int, ownership_type: OwnershipType
    ) -> TariffFamilyModel | None:
        result = await self._s.execute(
            select(TariffFamilyModel)
            .where(
                TariffFamilyModel.customer_id == customer_id,
                TariffFamilyModel.carrier_id == carrier_id,
                TariffFamilyModel.ownership_type == ownership_type.value,
            )
            .order_by(TariffFamilyModel.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_or_create_family(
        self, customer_id: int, carrier_id: int, ownership_type: OwnershipType
    ) -> TariffFamily:
        existing = await self._find_family(customer_id, carrier_id, ownership_type)
        if existing is not None:
            return _family_to_domain(existing)

        stmt = insert(TariffFamilyModel).values(
            customer_id=customer_id,
            carrier_id=carrier_id,
            ownership_type=ownership_type.value,
        )
        if ownership_type == OwnershipType.PRIMARY:
            # A concurrent award may have created it first
            stmt = stmt.on_conflict_do_nothing(
                index_elements=["customer_id", "carrier_id", "ownership_type"],
                index_where=TariffFamilyModel.ownership_type == OwnershipType.PRIMARY.value,
            )
        await self._s.execute(stmt)

        created = await self._find_family(customer_id, carrier_id, ownership_type)
        logger.info(
            "Tariff family %d ready for customer %d / carrier %d (%s)",
            created.id, customer_id, carrier_id, ownership_type.value,
        )
        return _family_to_domain(created)

    async def create_tariff(self, tariff: Tariff) -> Tariff:
        m = TariffModel(
            family_id=tariff.family_id,
            name=tariff.name,
            status=tariff.status.value,
            carrier_id=tariff.carrier_id,
            customer_ids=list(tariff.customer_ids),
            csp_event_id=tariff.csp_event_id,
            source_assignment_id=tariff.source_assignment_id,
            mode=tariff.mode,
            proposed_effective_date=tariff.proposed_effective_date,
            proposed_expiry_date=tariff.proposed_expiry_date,
            tariff_reference_id=tariff.tariff_reference_id,
        )
        self._s.add(m)
        try:
            await self._s.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"A tariff already exists for assignment {tariff.source_assignment_id}"
            ) from e
        tariff.id = m.id
        return tariff

    async def set_reference_id(self, tariff_id: int, reference_id: str) -> None:
        await self._s.execute(
            update(TariffModel)
            .where(TariffModel.id == tariff_id)
            .values(tariff_reference_id=reference_id)
            .execution_options(synchronize_session=False)
        )

    async def get_tariff(self, tariff_id: int) -> Tariff | None:
        m = await self._s.get(TariffModel, tariff_id)
        return _tariff_to_domain(m) if m else None


class SqlNoteRepository(NoteRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def add(self, note: Note) -> Note:
        m = AssignmentNoteModel(
            csp_event_carrier_id=note.assignment_id,
            author_id=note.author_id,
            text=note.text,
        )
        self._s.add(m)
        await self._s.flush()
        note.id = m.id
        note.created_at = m.created_at
        return note

    async def get(self, note_id: int) -> Note | None:
        m = await self._s.get(AssignmentNoteModel, note_id)
        return _note_to_domain(m) if m else None


class SqlActivityLog(ActivityLog):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def append(self, entry: ActivityEntry) -> ActivityEntry:
        m = ActivityModel(
            activity_type=entry.activity_type.value,
            customer_id=entry.customer_id,
            carrier_id=entry.carrier_id,
            csp_event_id=entry.event_id,
            csp_event_carrier_id=entry.assignment_id,
            user_id=entry.user_id,
            description=entry.description,
            details=entry.details,
        )
        self._s.add(m)
        await self._s.flush()
        entry.id = m.id
        return entry


# ─── Collaborators with their own sessions ───────────────────────────


class SqlNotificationSink(NotificationSink):
    """Writes to the ``notifications`` table, one short transaction per item."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def enqueue(self, notification: Notification) -> bool:
        stmt = (
            insert(NotificationModel)
            .values(
                user_id=notification.recipient_id,
                type=notification.type.value,
                title=notification.title,
                message=notification.message,
                link=notification.link,
                metadata_json=notification.metadata,
                idempotency_key=notification.idempotency_key,
            )
            .on_conflict_do_nothing(index_elements=["idempotency_key"])
            .returning(NotificationModel.id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                new_id = result.scalar_one_or_none()
                await session.commit()
        except SQLAlchemyError as e:
            raise ExternalServiceError(f"Notification sink unavailable: {e}") from e

        if new_id is None:
            logger.debug("Notification %s already delivered", notification.idempotency_key)
            return False
        notification.id = new_id
        return True


class SqlDirectoryLookup(DirectoryLookup):
    """Reads mentionable users from the ``user_profiles`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list_users(self) -> list[DirectoryUser]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(UserProfileModel).order_by(UserProfileModel.last_name)
                )
                return [
                    DirectoryUser(
                        id=m.id, first_name=m.first_name, last_name=m.last_name, email=m.email
                    )
                    for m in result.scalars()
                ]
        except SQLAlchemyError as e:
            raise ExternalServiceError(f"Directory unavailable: {e}") from e
