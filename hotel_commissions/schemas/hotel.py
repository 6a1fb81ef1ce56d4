"""Hotel schemas."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from hotel_commissions.models import HotelStatus


class HotelCreate(BaseModel):
    """Create hotel."""

    name: str = Field(..., min_length=1, max_length=255)
    status: HotelStatus = HotelStatus.STANDARD


class HotelUpdate(BaseModel):
    """Update hotel."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[HotelStatus] = None


class HotelResponse(BaseModel):
    """Hotel information."""

    id: uuid.UUID
    name: str
    status: HotelStatus
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class HotelListResponse(BaseModel):
    """Paginated list of hotels."""

    items: List[HotelResponse]
    total: int
    page: int
    per_page: int
    pages: int
