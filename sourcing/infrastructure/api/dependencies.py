"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Header, HTTPException

from sourcing.adapters.directory.http_directory_adapter import HttpDirectoryAdapter
from sourcing.adapters.persistence.database import async_session_factory
from sourcing.adapters.persistence.repositories import SqlDirectoryLookup, SqlNotificationSink
from sourcing.adapters.persistence.unit_of_work import SqlUnitOfWork
from sourcing.application.use_cases.add_note import AddNoteUseCase, NotificationFanout
from sourcing.application.use_cases.award_carrier import (
    AwardCarrierUseCase,
    NotAwardCarrierUseCase,
)
from sourcing.application.use_cases.bulk_apply import BulkApplyUseCase
from sourcing.application.use_cases.change_status import (
    InviteCarrierUseCase,
    QuickStatusChangeUseCase,
)
from sourcing.application.use_cases.stage_gate import StageGateUseCase
from sourcing.config import settings
from sourcing.domain.value_objects.enums import UserRole

logger = logging.getLogger(__name__)


def uow_factory() -> SqlUnitOfWork:
    return SqlUnitOfWork(async_session_factory)


def get_uow_factory():
    """Read-only endpoints open their own unit of work."""
    return uow_factory


# Singleton adapters (stateless or with internal caching)
if settings.directory_backend == "http":
    _directory = HttpDirectoryAdapter()
    logger.info("Using HTTP directory at %s", settings.directory_api_url)
else:
    _directory = SqlDirectoryLookup(async_session_factory)

_fanout = NotificationFanout(
    SqlNotificationSink(async_session_factory),
    retry_attempts=settings.notification_retry_attempts,
)


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: UserRole


def get_actor(
    x_user_id: str = Header(...),
    x_user_role: str = Header(UserRole.BASIC.value),
) -> Actor:
    """Caller identity as forwarded by the authenticating gateway."""
    try:
        role = UserRole(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown role '{x_user_role}'") from None
    return Actor(user_id=x_user_id, role=role)


def get_quick_status_uc() -> QuickStatusChangeUseCase:
    return QuickStatusChangeUseCase(uow_factory)


def get_invite_carrier_uc() -> InviteCarrierUseCase:
    return InviteCarrierUseCase(uow_factory)


def get_award_uc() -> AwardCarrierUseCase:
    return AwardCarrierUseCase(uow_factory, reference_prefix=settings.tariff_reference_prefix)


def get_not_award_uc() -> NotAwardCarrierUseCase:
    return NotAwardCarrierUseCase(uow_factory)


def get_bulk_apply_uc() -> BulkApplyUseCase:
    return BulkApplyUseCase(
        quick_status=get_quick_status_uc(),
        award=get_award_uc(),
        not_award=get_not_award_uc(),
        concurrency=settings.bulk_concurrency,
    )


def get_stage_gate_uc() -> StageGateUseCase:
    return StageGateUseCase(uow_factory)


def get_add_note_uc() -> AddNoteUseCase:
    return AddNoteUseCase(uow_factory, directory=_directory, fanout=_fanout)
