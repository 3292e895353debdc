"""In-memory fakes for the application ports."""

from __future__ import annotations

import asyncio
import copy
from dataclasses import replace
from datetime import datetime, timezone

from sourcing.application.ports.activity_log import ActivityLog
from sourcing.application.ports.assignment_repo import AssignmentRepository
from sourcing.application.ports.directory_port import DirectoryLookup
from sourcing.application.ports.event_repo import EventRepository
from sourcing.application.ports.note_repo import NoteRepository
from sourcing.application.ports.notification_sink import NotificationSink
from sourcing.application.ports.tariff_repo import TariffRepository
from sourcing.application.ports.unit_of_work import UnitOfWork
from sourcing.domain.entities.assignment import NOTE_LOG_SEPARATOR, CarrierAssignment, note_preview
from sourcing.domain.entities.sourcing_event import SourcingEvent
from sourcing.domain.entities.tariff import TariffFamily
from sourcing.domain.errors import ConflictError, ExternalServiceError, NotFoundError
from sourcing.domain.value_objects.enums import AssignmentStatus, EventStage

FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


# ─── Store ──────────────────────────────────────────────────────────


class InMemoryStore:
    """Shared state behind every FakeUnitOfWork."""

    def __init__(self):
        self.events: dict[int, SourcingEvent] = {}
        self.assignments: dict[int, CarrierAssignment] = {}
        self.families: dict[int, TariffFamily] = {}
        self.tariffs: dict[int, object] = {}
        self.notes: dict[int, object] = {}
        self.activities: list = []
        self.row_locks: dict[int, asyncio.Lock] = {}
        self.commits = 0
        self.fail_tariff_creation = False

    # helpers for arranging test data

    def add_event(
        self,
        event_id: int = 1,
        stage: EventStage = EventStage.AWARD_TARIFF_FINALIZATION,
        customer_id: int = 7,
        title: str | None = "Q3 LTL Bid",
        mode: str | None = "ltl",
    ) -> SourcingEvent:
        event = SourcingEvent(id=event_id, customer_id=customer_id, stage=stage, title=title, mode=mode)
        self.events[event_id] = event
        return event

    def add_assignment(
        self,
        assignment_id: int,
        status: AssignmentStatus = AssignmentStatus.UNDER_REVIEW,
        event_id: int = 1,
        carrier_id: int | None = None,
        **fields,
    ) -> CarrierAssignment:
        assignment = CarrierAssignment(
            id=assignment_id,
            event_id=event_id,
            carrier_id=carrier_id if carrier_id is not None else 100 + assignment_id,
            status=status,
            **fields,
        )
        self.assignments[assignment_id] = assignment
        return assignment

    def activities_of(self, activity_type) -> list:
        return [a for a in self.activities if a.activity_type == activity_type]


# ─── Repositories ───────────────────────────────────────────────────


class FakeEventRepo(EventRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get(self, event_id):
        event = self._store.events.get(event_id)
        return copy.deepcopy(event) if event else None

    async def get_stage(self, event_id):
        event = self._store.events.get(event_id)
        return event.stage if event else None


class FakeAssignmentRepo(AssignmentRepository):
    def __init__(self, store: InMemoryStore, uow: FakeUnitOfWork):
        self._store = store
        self._uow = uow

    async def create(self, assignment):
        for existing in self._store.assignments.values():
            if (existing.event_id, existing.carrier_id) == (assignment.event_id, assignment.carrier_id):
                raise ConflictError("duplicate carrier on event")
        assignment.id = max(self._store.assignments, default=0) + 1
        self._uow.touch("assignments", assignment.id)
        self._store.assignments[assignment.id] = copy.deepcopy(assignment)
        return assignment

    async def get(self, assignment_id):
        a = self._store.assignments.get(assignment_id)
        return copy.deepcopy(a) if a else None

    async def get_for_update(self, assignment_id):
        lock = self._store.row_locks.setdefault(assignment_id, asyncio.Lock())
        await self._uow.acquire(lock)
        # Let other tasks reach their own lock attempt
        await asyncio.sleep(0)
        return await self.get(assignment_id)

    async def get_by_event_and_carrier(self, event_id, carrier_id):
        for a in self._store.assignments.values():
            if a.event_id == event_id and a.carrier_id == carrier_id:
                return copy.deepcopy(a)
        return None

    async def list_by_event(self, event_id):
        return [copy.deepcopy(a) for a in self._store.assignments.values() if a.event_id == event_id]

    async def conditional_update(self, assignment_id, expected_status, changes):
        current = self._store.assignments.get(assignment_id)
        if current is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        if current.status != expected_status:
            raise ConflictError(f"Assignment {assignment_id} changed concurrently")
        return await self.update(assignment_id, changes)

    async def update(self, assignment_id, changes):
        current = self._store.assignments.get(assignment_id)
        if current is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        self._uow.touch("assignments", assignment_id)
        updated = replace(current, **changes)
        self._store.assignments[assignment_id] = updated
        return copy.deepcopy(updated)

    async def append_note(self, assignment_id, text):
        current = self._store.assignments.get(assignment_id)
        if current is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        self._uow.touch("assignments", assignment_id)
        text = text.strip()
        self._store.assignments[assignment_id] = replace(
            current,
            notes=current.notes + NOTE_LOG_SEPARATOR + text if current.notes else text,
            latest_note=note_preview(text),
        )


class FakeTariffRepo(TariffRepository):
    def __init__(self, store: InMemoryStore, uow: FakeUnitOfWork):
        self._store = store
        self._uow = uow

    async def find_or_create_family(self, customer_id, carrier_id, ownership_type):
        for family in self._store.families.values():
            if (family.customer_id, family.carrier_id, family.ownership_type) == (
                customer_id, carrier_id, ownership_type,
            ):
                return copy.deepcopy(family)
        family = TariffFamily(
            id=max(self._store.families, default=0) + 1,
            customer_id=customer_id,
            carrier_id=carrier_id,
            ownership_type=ownership_type,
        )
        self._uow.touch("families", family.id)
        self._store.families[family.id] = family
        return copy.deepcopy(family)

    async def create_tariff(self, tariff):
        if self._store.fail_tariff_creation:
            raise RuntimeError("tariffs table unavailable")
        if any(t.source_assignment_id == tariff.source_assignment_id for t in self._store.tariffs.values()):
            raise ConflictError("tariff already exists for assignment")
        tariff.id = max(self._store.tariffs, default=0) + 1
        self._uow.touch("tariffs", tariff.id)
        self._store.tariffs[tariff.id] = copy.deepcopy(tariff)
        return tariff

    async def set_reference_id(self, tariff_id, reference_id):
        self._uow.touch("tariffs", tariff_id)
        self._store.tariffs[tariff_id].tariff_reference_id = reference_id

    async def get_tariff(self, tariff_id):
        t = self._store.tariffs.get(tariff_id)
        return copy.deepcopy(t) if t else None


class FakeNoteRepo(NoteRepository):
    def __init__(self, store: InMemoryStore, uow: FakeUnitOfWork):
        self._store = store
        self._uow = uow

    async def add(self, note):
        note.id = max(self._store.notes, default=0) + 1
        self._uow.touch("notes", note.id)
        note.created_at = FIXED_NOW
        self._store.notes[note.id] = copy.deepcopy(note)
        return note

    async def get(self, note_id):
        n = self._store.notes.get(note_id)
        return copy.deepcopy(n) if n else None


class FakeActivityLog(ActivityLog):
    def __init__(self, store: InMemoryStore, uow: FakeUnitOfWork):
        self._store = store
        self._uow = uow

    async def append(self, entry):
        entry.id = len(self._store.activities) + 1
        stored = copy.deepcopy(entry)
        self._store.activities.append(stored)
        self._uow.track_activity(stored)
        return entry


_MISSING = object()


class FakeUnitOfWork(UnitOfWork):
    """Row-level undo log over an InMemoryStore.

    Only rows written through this unit of work are restored on rollback, so
    concurrent units of work never undo each other's committed writes.
    """

    def __init__(self, store: InMemoryStore):
        self._store = store
        self._originals: dict[tuple[str, int], object] = {}
        self._activities: list = []
        self._locks: list[asyncio.Lock] = []
        self.assignments = FakeAssignmentRepo(store, self)
        self.events = FakeEventRepo(store)
        self.tariffs = FakeTariffRepo(store, self)
        self.notes = FakeNoteRepo(store, self)
        self.activity = FakeActivityLog(store, self)

    def touch(self, table: str, key: int) -> None:
        """Remember a row's committed value before its first write here."""
        if (table, key) not in self._originals:
            row = getattr(self._store, table).get(key, _MISSING)
            self._originals[(table, key)] = copy.deepcopy(row) if row is not _MISSING else _MISSING

    def track_activity(self, entry) -> None:
        self._activities.append(entry)

    async def acquire(self, lock: asyncio.Lock) -> None:
        await lock.acquire()
        self._locks.append(lock)

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()
        for lock in self._locks:
            lock.release()
        self._locks.clear()

    async def commit(self) -> None:
        self._originals.clear()
        self._activities.clear()
        self._store.commits += 1

    async def rollback(self) -> None:
        for (table, key), row in self._originals.items():
            rows = getattr(self._store, table)
            if row is _MISSING:
                rows.pop(key, None)
            else:
                rows[key] = row
        written = {id(entry) for entry in self._activities}
        self._store.activities[:] = [a for a in self._store.activities if id(a) not in written]
        self._originals.clear()
        self._activities.clear()


def uow_factory_for(store: InMemoryStore):
    return lambda: FakeUnitOfWork(store)


# ─── External collaborators ─────────────────────────────────────────


class FakeDirectory(DirectoryLookup):
    def __init__(self, users=None, fail: bool = False):
        self.users = list(users or [])
        self.fail = fail
        self.calls = 0

    async def list_users(self):
        self.calls += 1
        if self.fail:
            raise ExternalServiceError("directory down")
        return list(self.users)


class FakeSink(NotificationSink):
    """Keeps notifications by idempotency key; can fail the first N calls."""

    def __init__(self, fail_times: int = 0):
        self.by_key: dict[str, object] = {}
        self.fail_times = fail_times
        self.calls = 0

    async def enqueue(self, notification):
        self.calls += 1
        if self.fail_times > 0:
            self.fail_times -= 1
            raise ExternalServiceError("sink down")
        if notification.idempotency_key in self.by_key:
            return False
        notification.id = len(self.by_key) + 1
        self.by_key[notification.idempotency_key] = notification
        return True

    @property
    def notifications(self) -> list:
        return list(self.by_key.values())
