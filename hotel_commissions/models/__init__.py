"""
Database models.

All models are exported here for convenient imports:
    from hotel_commissions.models import Hotel, Booking, CommissionRecord, etc.
"""

from hotel_commissions.models.agreement import (
    CommissionAgreement,
    CommissionRateType,
    TierRule,
)
from hotel_commissions.models.base import Base, BaseModel, TimestampMixin
from hotel_commissions.models.booking import BOOKING_TRANSITIONS, Booking, BookingStatus
from hotel_commissions.models.commission import CommissionRecord
from hotel_commissions.models.hotel import Hotel, HotelStatus

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "TimestampMixin",
    # Hotel
    "Hotel",
    "HotelStatus",
    # Booking
    "Booking",
    "BookingStatus",
    "BOOKING_TRANSITIONS",
    # Agreement
    "CommissionAgreement",
    "CommissionRateType",
    "TierRule",
    # Commission
    "CommissionRecord",
]
