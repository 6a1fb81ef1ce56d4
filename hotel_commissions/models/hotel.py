"""
Hotel model.
"""

from enum import Enum
from typing import TYPE_CHECKING, List

from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_commissions.models.base import BaseModel

if TYPE_CHECKING:
    from hotel_commissions.models.agreement import CommissionAgreement
    from hotel_commissions.models.booking import Booking


class HotelStatus(str, Enum):
    """Partner status; PREFERRED hotels qualify for the preferred bonus."""
    STANDARD = "STANDARD"
    PREFERRED = "PREFERRED"


class Hotel(BaseModel):
    """A partner hotel that bookings and commission agreements belong to."""

    __tablename__ = "hotels"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    status: Mapped[HotelStatus] = mapped_column(
        SQLAlchemyEnum(
            HotelStatus,
            name="hotelstatus",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=HotelStatus.STANDARD,
        nullable=False,
    )

    # Relationships
    bookings: Mapped[List["Booking"]] = relationship(
        "Booking",
        back_populates="hotel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    agreements: Mapped[List["CommissionAgreement"]] = relationship(
        "CommissionAgreement",
        back_populates="hotel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name='{self.name}', status={self.status})>"
