"""Booking schemas."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from hotel_commissions.models import BookingStatus
from hotel_commissions.schemas.hotel import HotelResponse


class BookingCreate(BaseModel):
    """Create booking. New bookings always start as PENDING."""

    hotel_id: uuid.UUID
    booking_reference: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    booking_date: datetime


class BookingUpdate(BaseModel):
    """Status transition, optionally with an explicit completion time."""

    status: Optional[BookingStatus] = None
    completed_at: Optional[datetime] = None


class BookingResponse(BaseModel):
    """Booking information."""

    id: uuid.UUID
    hotel_id: uuid.UUID
    booking_reference: str
    amount: Decimal
    currency: str
    status: BookingStatus
    booking_date: datetime
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: Optional[datetime]

    # Related info
    hotel: Optional[HotelResponse] = None

    model_config = {"from_attributes": True}


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: List[BookingResponse]
    total: int
    page: int
    per_page: int
    pages: int
