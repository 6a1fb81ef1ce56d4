"""
Commission agreement and tier rule models.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_commissions.models.base import BaseModel

if TYPE_CHECKING:
    from hotel_commissions.models.hotel import Hotel


class CommissionRateType(str, Enum):
    """How the base rate is applied to a booking."""
    FLAT = "FLAT"              # base_rate is a fixed monetary amount
    PERCENTAGE = "PERCENTAGE"  # base_rate (+ bonuses) is a fraction of the amount
    TIERED = "TIERED"          # PERCENTAGE plus a volume tier bonus


class CommissionAgreement(BaseModel):
    """
    Commission terms negotiated with a hotel.

    Rates are Decimal fractions (0.10 = 10%), except base_rate on a FLAT
    agreement which is a fixed amount per booking.
    """

    __tablename__ = "commission_agreements"

    hotel_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rate_type: Mapped[CommissionRateType] = mapped_column(
        SQLAlchemyEnum(
            CommissionRateType,
            name="commissionratetype",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    base_rate: Mapped[Decimal] = mapped_column(
        Numeric(12, 4),
        nullable=False,
    )
    preferred_bonus_rate: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(6, 4),
        nullable=True,
        comment="Extra rate for PREFERRED hotels",
    )
    effective_from: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    effective_until: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )

    # Relationships
    hotel: Mapped["Hotel"] = relationship(
        "Hotel",
        back_populates="agreements",
    )
    tier_rules: Mapped[List["TierRule"]] = relationship(
        "TierRule",
        back_populates="agreement",
        cascade="all, delete-orphan",
        order_by="TierRule.position",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<CommissionAgreement(id={self.id}, hotel_id={self.hotel_id}, rate_type={self.rate_type})>"


class TierRule(BaseModel):
    """
    Volume bonus: applies when the hotel's completed booking count lies
    in [min_bookings, max_bookings]. A null max_bookings is open-ended.
    """

    __tablename__ = "tier_rules"

    agreement_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("commission_agreements.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Authored order; first matching rule wins",
    )
    min_bookings: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    max_bookings: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    bonus_rate: Mapped[Decimal] = mapped_column(
        Numeric(6, 4),
        nullable=False,
    )

    # Relationships
    agreement: Mapped["CommissionAgreement"] = relationship(
        "CommissionAgreement",
        back_populates="tier_rules",
    )

    def __repr__(self) -> str:
        return (
            f"<TierRule(id={self.id}, min={self.min_bookings}, "
            f"max={self.max_bookings}, bonus={self.bonus_rate})>"
        )
