"""Seed the database with a demo sourcing event.

Usage:
    python -m sourcing.tools.seed_db
    python -m sourcing.tools.seed_db --drop   # drop existing data first
    python -m sourcing.tools.seed_db --verify # print row counts only
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sourcing.adapters.persistence.database import async_session_factory
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
from sourcing.domain.value_objects.enums import AssignmentStatus, EventStage

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("u-jane", "Jane", "Doe", "jane.doe@example.com", "admin"),
    ("u-john", "John", "Smith", "john.smith@example.com", "elite"),
    ("u-maria", "Maria", "Lopez", "maria.lopez@example.com", "tariff_master"),
    ("u-sam", "Sam", "Lee", "sam.lee@example.com", "basic"),
]

# (carrier_id, status, lane scope)
DEMO_CARRIERS = [
    (101, AssignmentStatus.UNDER_REVIEW, {"mode": "ltl", "origins": ["TX"], "destinations": ["CA"]}),
    (102, AssignmentStatus.REVISION_REQUESTED, None),
    (103, AssignmentStatus.SUBMITTED, {"mode": "ltl", "origin": "IL", "destination": "NY"}),
    (104, AssignmentStatus.INVITED, None),
]

# Children first
_TABLES_IN_DROP_ORDER = [
    NotificationModel,
    ActivityModel,
    AssignmentNoteModel,
    CarrierAssignmentModel,
    TariffModel,
    TariffFamilyModel,
    SourcingEventModel,
    UserProfileModel,
]


async def _drop_data(session: AsyncSession) -> None:
    """Delete all rows, respecting foreign keys."""
    # Assignments reference tariffs and tariffs reference events
    await session.execute(
        CarrierAssignmentModel.__table__.update().values(proposed_tariff_id=None)
    )
    for model in _TABLES_IN_DROP_ORDER:
        await session.execute(delete(model))
    await session.flush()
    logger.info("Existing data dropped")


async def seed(drop: bool = False) -> dict[str, int]:
    """Insert demo users, one event in the award stage and its carriers."""
    now = datetime.now(timezone.utc)
    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        for user_id, first, last, email, role in DEMO_USERS:
            if await session.get(UserProfileModel, user_id) is None:
                session.add(UserProfileModel(
                    id=user_id, first_name=first, last_name=last, email=email, role=role,
                ))

        event = SourcingEventModel(
            title="Q3 LTL Bid",
            customer_id=1,
            stage=EventStage.AWARD_TARIFF_FINALIZATION.value,
            mode="ltl",
        )
        session.add(event)
        await session.flush()

        for carrier_id, status, scope in DEMO_CARRIERS:
            session.add(CarrierAssignmentModel(
                csp_event_id=event.id,
                carrier_id=carrier_id,
                status=status.value,
                invited_at=now,
                submitted_at=now if status != AssignmentStatus.INVITED else None,
                lane_scope_json=scope,
                bid_docs=[],
            ))

        await session.commit()
        logger.info("Seeded event %d with %d carriers", event.id, len(DEMO_CARRIERS))

    return {"users": len(DEMO_USERS), "events": 1, "assignments": len(DEMO_CARRIERS)}


async def _verify_data() -> None:
    async with async_session_factory() as session:
        for model in _TABLES_IN_DROP_ORDER:
            count = (await session.execute(select(func.count()).select_from(model))).scalar()
            logger.info("%-30s %d", model.__tablename__, count)


def main():
    parser = argparse.ArgumentParser(description="Seed the sourcing database with demo data")
    parser.add_argument("--drop", action="store_true", help="Drop existing data before seeding")
    parser.add_argument("--verify", action="store_true", help="Only print table row counts")
    args = parser.parse_args()

    if args.verify:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            counts = await seed(drop=args.drop)
            logger.info("Seed complete: %s", counts)
            await _verify_data()

        asyncio.run(run_all())


if __name__ == "__main__":
    main()
