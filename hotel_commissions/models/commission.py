"""
CommissionRecord model: the persisted result of a calculation.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_commissions.models.base import Base
from hotel_commissions.utils.timeutils import utcnow

if TYPE_CHECKING:
    from hotel_commissions.models.agreement import CommissionAgreement
    from hotel_commissions.models.booking import Booking


class CommissionRecord(Base):
    """
    Commission owed for one completed booking.

    Created exactly once per booking and never updated. Monetary and rate
    columns are a frozen copy taken at calculation time, so later edits to
    the agreement or booking never change a past record.
    """

    __tablename__ = "commission_records"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    # Unique: one record per booking, enforced by the database
    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id"),
        unique=True,
        nullable=False,
    )
    agreement_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("commission_agreements.id"),
        nullable=False,
        index=True,
    )

    # Snapshot
    booking_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
    )
    base_rate: Mapped[Decimal] = mapped_column(
        Numeric(12, 4),
        nullable=False,
    )
    preferred_bonus: Mapped[Decimal] = mapped_column(
        Numeric(6, 4),
        nullable=False,
    )
    tier_bonus: Mapped[Decimal] = mapped_column(
        Numeric(6, 4),
        nullable=False,
    )
    total_rate: Mapped[Decimal] = mapped_column(
        Numeric(12, 4),
        nullable=False,
    )
    commission_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    calculation_details: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        comment="Self-contained audit breakdown of the calculation",
    )
    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking")
    agreement: Mapped["CommissionAgreement"] = relationship("CommissionAgreement")

    def __repr__(self) -> str:
        return (
            f"<CommissionRecord(id={self.id}, booking_id={self.booking_id}, "
            f"amount={self.commission_amount})>"
        )
