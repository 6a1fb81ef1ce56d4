"""Pydantic schemas for request/response validation."""

from hotel_commissions.schemas.agreement import (
    AgreementCreate,
    AgreementListResponse,
    AgreementResponse,
    AgreementUpdate,
    TierRuleCreate,
    TierRuleResponse,
)
from hotel_commissions.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingUpdate,
)
from hotel_commissions.schemas.commission import (
    MONTH_PATTERN,
    CalculateCommissionRequest,
    CommissionExportResponse,
    CommissionExportRow,
    CommissionRecordResponse,
    ExportFormat,
    HotelCommissionSummary,
    MonthlySummaryResponse,
)
from hotel_commissions.schemas.hotel import (
    HotelCreate,
    HotelListResponse,
    HotelResponse,
    HotelUpdate,
)

__all__ = [
    # Hotel
    "HotelCreate",
    "HotelUpdate",
    "HotelResponse",
    "HotelListResponse",
    # Booking
    "BookingCreate",
    "BookingUpdate",
    "BookingResponse",
    "BookingListResponse",
    # Agreement
    "AgreementCreate",
    "AgreementUpdate",
    "AgreementResponse",
    "AgreementListResponse",
    "TierRuleCreate",
    "TierRuleResponse",
    # Commission
    "MONTH_PATTERN",
    "CalculateCommissionRequest",
    "CommissionRecordResponse",
    "CommissionExportRow",
    "CommissionExportResponse",
    "ExportFormat",
    "HotelCommissionSummary",
    "MonthlySummaryResponse",
]
