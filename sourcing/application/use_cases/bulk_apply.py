"""BulkApplyUseCase — one action over many assignments, failures isolated per item."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from sourcing.application.use_cases.award_carrier import (
    AwardCarrierUseCase,
    NotAwardCarrierUseCase,
)
from sourcing.application.use_cases.change_status import QuickStatusChangeUseCase
from sourcing.domain.errors import DomainError, ValidationError
from sourcing.domain.value_objects.enums import AssignmentStatus, BulkAction
from sourcing.domain.value_objects.lane_scope import LaneScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkParams:
    awarded_by: str | None = None
    reason: str | None = None
    notes: str | None = None
    lane_scope: LaneScope | None = None
    actor_id: str | None = None


@dataclass
class BulkItemResult:
    """Outcome for one assignment of a batch."""

    assignment_id: int
    ok: bool
    value: Any = None
    error_code: str | None = None
    error: str | None = None


@dataclass
class BulkResult:
    """Per-item outcomes, keyed by assignment id in request order."""

    action: BulkAction
    items: dict[int, BulkItemResult] = field(default_factory=dict)

    @property
    def succeeded(self) -> list[int]:
        return [i for i, r in self.items.items() if r.ok]

    @property
    def failed(self) -> list[int]:
        return [i for i, r in self.items.items() if not r.ok]

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)


class BulkApplyUseCase:
    """Run the single-item operation for every id independently.

    There is no enclosing transaction: each item commits or fails on its own,
    and a failing item never stops the others.
    """

    def __init__(
        self,
        quick_status: QuickStatusChangeUseCase,
        award: AwardCarrierUseCase,
        not_award: NotAwardCarrierUseCase,
        concurrency: int = 5,
    ):
        self._quick_status = quick_status
        self._award = award
        self._not_award = not_award
        self._concurrency = max(1, concurrency)

    async def execute(
        self,
        assignment_ids: list[int],
        action: BulkAction | str,
        params: BulkParams | None = None,
    ) -> BulkResult:
        try:
            action = BulkAction(action)
        except ValueError:
            raise ValidationError(
                f"Unknown bulk action '{action}'; "
                f"expected one of: {', '.join(a.value for a in BulkAction)}"
            ) from None
        params = params or BulkParams()
        self._validate_params(action, params)

        ids = list(dict.fromkeys(assignment_ids))
        logger.info("Bulk %s over %d assignments", action.value, len(ids))

        semaphore = asyncio.Semaphore(self._concurrency)

        async def run(assignment_id: int) -> BulkItemResult:
            async with semaphore:
                return await self._run_one(assignment_id, action, params)

        outcomes = await asyncio.gather(*(run(i) for i in ids))
        result = BulkResult(action=action, items={r.assignment_id: r for r in outcomes})

        logger.info(
            "Bulk %s complete: %d/%d successful",
            action.value, len(result.succeeded), len(ids),
        )
        return result

    @staticmethod
    def _validate_params(action: BulkAction, params: BulkParams) -> None:
        if action == BulkAction.AWARD and not (params.awarded_by or "").strip():
            raise ValidationError("awarded_by is required for a bulk award")
        if action == BulkAction.NOT_AWARD and not (params.reason or "").strip():
            raise ValidationError("A reason is required to mark carriers as not awarded")

    async def _run_one(
        self, assignment_id: int, action: BulkAction, params: BulkParams
    ) -> BulkItemResult:
        try:
            if action == BulkAction.MARK_SUBMITTED:
                value = await self._quick_status.execute(
                    assignment_id, AssignmentStatus.SUBMITTED, actor_id=params.actor_id
                )
            elif action == BulkAction.AWARD:
                value = await self._award.execute(
                    assignment_id,
                    awarded_by=params.awarded_by,
                    lane_scope=params.lane_scope,
                    notes=params.notes,
                )
            else:
                value = await self._not_award.execute(
                    assignment_id,
                    reason=params.reason,
                    notes=params.notes,
                    actor_id=params.actor_id,
                )
            return BulkItemResult(assignment_id=assignment_id, ok=True, value=value)

        except DomainError as e:
            logger.warning("Bulk %s failed for assignment %d: %s", action.value, assignment_id, e)
            return BulkItemResult(
                assignment_id=assignment_id, ok=False, error_code=e.code, error=str(e)
            )
        except Exception as e:
            logger.exception("Bulk %s crashed for assignment %d", action.value, assignment_id)
            return BulkItemResult(
                assignment_id=assignment_id, ok=False, error_code="internal_error", error=str(e)
            )
