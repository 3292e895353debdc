"""Initial schema — sourcing events, carrier assignments, tariffs, notes.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )


def upgrade() -> None:
    # Sourcing events
    op.create_table(
        "csp_events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(300), nullable=True),
        sa.Column("customer_id", sa.Integer, nullable=False),
        sa.Column("stage", sa.String(50), nullable=False, server_default="planning"),
        sa.Column("mode", sa.String(20), nullable=True),
        _created_at(),
    )
    op.create_index("idx_csp_events_customer", "csp_events", ["customer_id"])

    # Tariff families
    op.create_table(
        "tariff_families",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("customer_id", sa.Integer, nullable=False),
        sa.Column("carrier_id", sa.Integer, nullable=False),
        sa.Column("ownership_type", sa.String(20), nullable=False, server_default="primary"),
        _created_at(),
    )
    op.create_index(
        "uq_tariff_families_primary",
        "tariff_families",
        ["customer_id", "carrier_id", "ownership_type"],
        unique=True,
        postgresql_where=sa.text("ownership_type = 'primary'"),
    )

    # Tariffs
    op.create_table(
        "tariffs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("family_id", sa.Integer, sa.ForeignKey("tariff_families.id"), nullable=False),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="proposed"),
        sa.Column("carrier_id", sa.Integer, nullable=False),
        sa.Column("customer_ids", ARRAY(sa.Integer), nullable=False, server_default="{}"),
        sa.Column("csp_event_id", sa.Integer, sa.ForeignKey("csp_events.id"), nullable=True),
        sa.Column("source_assignment_id", sa.Integer, unique=True, nullable=True),
        sa.Column("mode", sa.String(20), nullable=True),
        sa.Column("proposed_effective_date", sa.Date, nullable=True),
        sa.Column("proposed_expiry_date", sa.Date, nullable=True),
        sa.Column("tariff_reference_id", sa.String(50), unique=True, nullable=True),
        _created_at(),
    )
    op.create_index("idx_tariffs_family", "tariffs", ["family_id"])
    op.create_index("idx_tariffs_carrier", "tariffs", ["carrier_id"])

    # Carrier assignments
    op.create_table(
        "csp_event_carriers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "csp_event_id",
            sa.Integer,
            sa.ForeignKey("csp_events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("carrier_id", sa.Integer, nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="invited"),
        sa.Column("invited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("awarded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("awarded_by", sa.String(100), nullable=True),
        sa.Column("not_awarded_reason", sa.Text, nullable=True),
        sa.Column("lane_scope_json", JSONB, nullable=True),
        sa.Column("bid_docs", JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("latest_note", sa.String(120), nullable=True),
        sa.Column("proposed_tariff_id", sa.Integer, sa.ForeignKey("tariffs.id"), nullable=True),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("csp_event_id", "carrier_id", name="uq_csp_event_carrier"),
    )
    op.create_index("idx_csp_event_carriers_status", "csp_event_carriers", ["status"])

    # Notes
    op.create_table(
        "assignment_notes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "csp_event_carrier_id",
            sa.Integer,
            sa.ForeignKey("csp_event_carriers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("author_id", sa.String(100), nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        _created_at(),
    )
    op.create_index(
        "idx_assignment_notes_assignment", "assignment_notes", ["csp_event_carrier_id"]
    )

    # Activity log
    op.create_table(
        "customer_carrier_activities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("activity_type", sa.String(50), nullable=False),
        sa.Column("customer_id", sa.Integer, nullable=True),
        sa.Column("carrier_id", sa.Integer, nullable=True),
        sa.Column("csp_event_id", sa.Integer, nullable=True),
        sa.Column("csp_event_carrier_id", sa.Integer, nullable=True),
        sa.Column("user_id", sa.String(100), nullable=True),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("details", sa.Text, nullable=True),
        _created_at(),
    )
    op.create_index("idx_activities_event", "customer_carrier_activities", ["csp_event_id"])
    op.create_index(
        "idx_activities_assignment", "customer_carrier_activities", ["csp_event_carrier_id"]
    )

    # Notifications
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("link", sa.String(300), nullable=True),
        sa.Column("metadata", JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("idempotency_key", sa.String(64), unique=True, nullable=False),
        _created_at(),
    )
    op.create_index("idx_notifications_user", "notifications", ["user_id"])

    # Directory profiles
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("role", sa.String(30), nullable=False, server_default="basic"),
    )


def downgrade() -> None:
    op.drop_table("user_profiles")
    op.drop_table("notifications")
    op.drop_table("customer_carrier_activities")
    op.drop_table("assignment_notes")
    op.drop_table("csp_event_carriers")
    op.drop_table("tariffs")
    op.drop_table("tariff_families")
    op.drop_table("csp_events")
