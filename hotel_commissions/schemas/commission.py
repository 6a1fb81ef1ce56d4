"""Commission calculation and reporting schemas."""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, field_validator

from hotel_commissions.models import CommissionRateType, HotelStatus
from hotel_commissions.utils.timeutils import as_utc

# YYYY-MM with a 01-12 month
MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class ExportFormat(str, Enum):
    """Monthly export formats."""
    JSON = "json"
    CSV = "csv"


class CalculateCommissionRequest(BaseModel):
    """Request a commission calculation for one booking."""

    booking_id: uuid.UUID


class CommissionRecordResponse(BaseModel):
    """Persisted commission record."""

    id: uuid.UUID
    booking_id: uuid.UUID
    agreement_id: uuid.UUID
    booking_amount: Decimal
    currency: str
    base_rate: Decimal
    preferred_bonus: Decimal
    tier_bonus: Decimal
    total_rate: Decimal
    commission_amount: Decimal
    calculation_details: Dict[str, Any]
    calculated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("calculated_at")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class MonthlyPeriod(BaseModel):
    """Inclusive bounds of a reporting month."""

    start: datetime
    end: datetime


class HotelCommissionSummary(BaseModel):
    """Per-hotel totals for a month."""

    hotel_id: uuid.UUID
    hotel_name: str
    hotel_status: HotelStatus
    total_bookings: int = 0
    total_booking_amount: Decimal = Decimal("0")
    total_commission: Decimal = Decimal("0")
    average_rate: Decimal = Decimal("0")


class MonthlyTotals(BaseModel):
    """Grand totals across all hotels for a month."""

    total_hotels: int
    total_bookings: int
    total_booking_amount: Decimal
    total_commission: Decimal
    average_commission_rate: Decimal


class MonthlySummaryResponse(BaseModel):
    """Monthly commission summary with hotel breakdown."""

    month: str
    period: MonthlyPeriod
    summary: MonthlyTotals
    hotels: List[HotelCommissionSummary]


class CommissionExportRow(BaseModel):
    """One flattened commission record for export."""

    id: uuid.UUID
    booking_id: uuid.UUID
    booking_reference: str
    hotel_id: uuid.UUID
    hotel_name: str
    hotel_status: HotelStatus
    booking_amount: Decimal
    currency: str
    rate_type: CommissionRateType
    base_rate: Decimal
    preferred_bonus: Decimal
    tier_bonus: Decimal
    total_rate: Decimal
    commission_amount: Decimal
    calculated_at: datetime


class CommissionExportResponse(BaseModel):
    """JSON export body."""

    month: str
    record_count: int
    records: List[CommissionExportRow]
