"""
Booking model.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_commissions.models.base import BaseModel

if TYPE_CHECKING:
    from hotel_commissions.models.hotel import Hotel


class BookingStatus(str, Enum):
    """Booking lifecycle. COMPLETED and CANCELLED are terminal."""
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Allowed one-way transitions
BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


class Booking(BaseModel):
    """
    A hotel booking.

    Only COMPLETED bookings are eligible for commission calculation.
    """

    __tablename__ = "bookings"

    hotel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    booking_reference: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="External booking reference",
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
    )
    status: Mapped[BookingStatus] = mapped_column(
        SQLAlchemyEnum(
            BookingStatus,
            name="bookingstatus",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=BookingStatus.PENDING,
        nullable=False,
        index=True,
    )
    booking_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    hotel: Mapped["Hotel"] = relationship(
        "Hotel",
        back_populates="bookings",
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, reference='{self.booking_reference}', status={self.status})>"
