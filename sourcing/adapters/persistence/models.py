"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sourcing.adapters.persistence.database import Base


class SourcingEventModel(Base):
    __tablename__ = "csp_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str | None] = mapped_column(String(300), nullable=True)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    stage: Mapped[str] = mapped_column(String(50), nullable=False, default="planning")
    mode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    assignments: Mapped[list["CarrierAssignmentModel"]] = relationship(back_populates="event")

    __table_args__ = (Index("idx_csp_events_customer", "customer_id"),)


class CarrierAssignmentModel(Base):
    __tablename__ = "csp_event_carriers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    csp_event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("csp_events.id", ondelete="CASCADE"), nullable=False
    )
    carrier_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="invited")
    invited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    awarded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    awarded_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    not_awarded_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    lane_scope_json: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    bid_docs: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list, server_default=text("'[]'::jsonb")
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    latest_note: Mapped[str | None] = mapped_column(String(120), nullable=True)
    proposed_tariff_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tariffs.id"), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    event: Mapped["SourcingEventModel"] = relationship(back_populates="assignments")

    __table_args__ = (
        UniqueConstraint("csp_event_id", "carrier_id", name="uq_csp_event_carrier"),
        Index("idx_csp_event_carriers_status", "status"),
    )


class TariffFamilyModel(Base):
    __tablename__ = "tariff_families"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    carrier_id: Mapped[int] = mapped_column(Integer, nullable=False)
    ownership_type: Mapped[str] = mapped_column(String(20), nullable=False, default="primary")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        # At most one primary family per (customer, carrier)
        Index(
            "uq_tariff_families_primary",
            "customer_id",
            "carrier_id",
            "ownership_type",
            unique=True,
            postgresql_where=text("ownership_type = 'primary'"),
        ),
    )


class TariffModel(Base):
    __tablename__ = "tariffs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    family_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tariff_families.id"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="proposed")
    carrier_id: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_ids: Mapped[list[int]] = mapped_column(ARRAY(Integer), nullable=False, default=list)
    csp_event_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("csp_events.id"), nullable=True
    )
    # One tariff per awarded assignment
    source_assignment_id: Mapped[int | None] = mapped_column(Integer, unique=True, nullable=True)
    mode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    proposed_effective_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    proposed_expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    tariff_reference_id: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("idx_tariffs_family", "family_id"),
        Index("idx_tariffs_carrier", "carrier_id"),
    )


class AssignmentNoteModel(Base):
    __tablename__ = "assignment_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    csp_event_carrier_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("csp_event_carriers.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[str] = mapped_column(String(100), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("idx_assignment_notes_assignment", "csp_event_carrier_id"),)
    # created_at is read back right after insert
    __mapper_args__ = {"eager_defaults": True}


class ActivityModel(Base):
    __tablename__ = "customer_carrier_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    activity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    customer_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    carrier_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    csp_event_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    csp_event_carrier_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("idx_activities_event", "csp_event_id"),
        Index("idx_activities_assignment", "csp_event_carrier_id"),
    )


class NotificationModel(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str | None] = mapped_column(String(300), nullable=True)
    # "metadata" is reserved on declarative classes
    metadata_json: Mapped[dict[str, Any]] = mapped_column("metadata", JSONB, nullable=False, default=dict)
    idempotency_key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("idx_notifications_user", "user_id"),)


class UserProfileModel(Base):
    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    role: Mapped[str] = mapped_column(String(30), nullable=False, default="basic")
