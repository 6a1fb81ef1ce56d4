"""Commission agreement schemas."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from hotel_commissions.models import CommissionRateType


class TierRuleCreate(BaseModel):
    """Volume tier: inclusive booking-count range and its bonus rate."""

    min_bookings: int = Field(..., ge=0)
    max_bookings: Optional[int] = Field(None, ge=0)
    bonus_rate: Decimal = Field(..., ge=0, max_digits=6, decimal_places=4)

    @model_validator(mode="after")
    def check_range(self) -> "TierRuleCreate":
        if self.max_bookings is not None and self.max_bookings < self.min_bookings:
            raise ValueError("max_bookings must be >= min_bookings")
        return self


class TierRuleResponse(BaseModel):
    id: uuid.UUID
    position: int
    min_bookings: int
    max_bookings: Optional[int]
    bonus_rate: Decimal

    model_config = {"from_attributes": True}


class AgreementCreate(BaseModel):
    """Create commission agreement. TIERED requires at least one tier rule."""

    hotel_id: uuid.UUID
    rate_type: CommissionRateType
    base_rate: Decimal = Field(..., ge=0, max_digits=12, decimal_places=4)
    preferred_bonus_rate: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
    effective_from: Optional[datetime] = None
    effective_until: Optional[datetime] = None
    is_active: bool = True
    tier_rules: Optional[List[TierRuleCreate]] = None


class AgreementUpdate(BaseModel):
    """Update commission agreement. tier_rules, when given, replaces all rules."""

    rate_type: Optional[CommissionRateType] = None
    base_rate: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=4)
    preferred_bonus_rate: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
    effective_from: Optional[datetime] = None
    effective_until: Optional[datetime] = None
    is_active: Optional[bool] = None
    tier_rules: Optional[List[TierRuleCreate]] = None


class AgreementResponse(BaseModel):
    """Commission agreement with its tier rules."""

    id: uuid.UUID
    hotel_id: uuid.UUID
    rate_type: CommissionRateType
    base_rate: Decimal
    preferred_bonus_rate: Optional[Decimal]
    effective_from: datetime
    effective_until: Optional[datetime]
    is_active: bool
    tier_rules: List[TierRuleResponse]
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class AgreementListResponse(BaseModel):
    """Paginated list of agreements."""

    items: List[AgreementResponse]
    total: int
    page: int
    per_page: int
    pages: int
