"""Initial database schema

Revision ID: 000_initial_schema
Revises:
Create Date: 2026-03-01

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "000_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create all tables."""

    # Hotels table
    op.create_table(
        "hotels",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("status", sa.Enum("STANDARD", "PREFERRED", name="hotelstatus"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_hotels_name", "hotels", ["name"], unique=True)

    # Bookings table
    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("hotel_id", sa.Uuid(), sa.ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False),
        sa.Column("booking_reference", sa.String(100), nullable=False, comment="External booking reference"),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "COMPLETED", "CANCELLED", name="bookingstatus"),
            nullable=False,
        ),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_bookings_hotel_id", "bookings", ["hotel_id"])
    op.create_index("ix_bookings_booking_reference", "bookings", ["booking_reference"], unique=True)
    op.create_index("ix_bookings_status", "bookings", ["status"])

    # Commission agreements table
    op.create_table(
        "commission_agreements",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("hotel_id", sa.Uuid(), sa.ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "rate_type",
            sa.Enum("FLAT", "PERCENTAGE", "TIERED", name="commissionratetype"),
            nullable=False,
        ),
        sa.Column("base_rate", sa.Numeric(12, 4), nullable=False),
        sa.Column("preferred_bonus_rate", sa.Numeric(6, 4), nullable=True, comment="Extra rate for PREFERRED hotels"),
        sa.Column("effective_from", sa.DateTime(timezone=True), nullable=False),
        sa.Column("effective_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_commission_agreements_hotel_id", "commission_agreements", ["hotel_id"])
    op.create_index("ix_commission_agreements_is_active", "commission_agreements", ["is_active"])

    # Tier rules table
    op.create_table(
        "tier_rules",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "agreement_id",
            sa.Uuid(),
            sa.ForeignKey("commission_agreements.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), server_default="0", nullable=False),
        sa.Column("min_bookings", sa.Integer(), nullable=False),
        sa.Column("max_bookings", sa.Integer(), nullable=True),
        sa.Column("bonus_rate", sa.Numeric(6, 4), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_tier_rules_agreement_id", "tier_rules", ["agreement_id"])

    # Commission records table
    op.create_table(
        "commission_records",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("booking_id", sa.Uuid(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("agreement_id", sa.Uuid(), sa.ForeignKey("commission_agreements.id"), nullable=False),
        sa.Column("booking_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("base_rate", sa.Numeric(12, 4), nullable=False),
        sa.Column("preferred_bonus", sa.Numeric(6, 4), nullable=False),
        sa.Column("tier_bonus", sa.Numeric(6, 4), nullable=False),
        sa.Column("total_rate", sa.Numeric(12, 4), nullable=False),
        sa.Column("commission_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("calculation_details", sa.JSON(), nullable=False),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("booking_id", name="uq_commission_records_booking_id"),
    )
    op.create_index("ix_commission_records_agreement_id", "commission_records", ["agreement_id"])
    op.create_index("ix_commission_records_calculated_at", "commission_records", ["calculated_at"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("commission_records")
    op.drop_table("tier_rules")
    op.drop_table("commission_agreements")
    op.drop_table("bookings")
    op.drop_table("hotels")

    op.execute("DROP TYPE IF EXISTS commissionratetype")
    op.execute("DROP TYPE IF EXISTS bookingstatus")
    op.execute("DROP TYPE IF EXISTS hotelstatus")
