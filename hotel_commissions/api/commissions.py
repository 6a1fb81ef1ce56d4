"""Commission calculation and reporting endpoints."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Query, Response

from hotel_commissions.api.dependencies import get_store
from hotel_commissions.schemas.commission import (
    MONTH_PATTERN,
    CalculateCommissionRequest,
    CommissionExportRow,
    CommissionRecordResponse,
    ExportFormat,
    MonthlySummaryResponse,
)
from hotel_commissions.services.commission import calculate_commission
from hotel_commissions.services.reporting import (
    export_monthly_records,
    get_monthly_records,
    get_monthly_summary,
)
from hotel_commissions.services.store import CommissionStore

router = APIRouter(prefix="/commissions", tags=["Commissions"])

MonthParam = Annotated[
    str,
    Query(pattern=MONTH_PATTERN, description="Month in YYYY-MM format", examples=["2026-03"]),
]


@router.post("/calculate", response_model=CommissionRecordResponse)
async def calculate(
    data: CalculateCommissionRequest,
    store: CommissionStore = Depends(get_store),
):
    """
    Calculate the commission for a completed booking.

    Returns the existing record if the booking was already calculated.
    404 if the booking or an active agreement is missing, 400 if the
    booking is not completed.
    """
    return await calculate_commission(store, data.booking_id)


@router.get("/summary", response_model=MonthlySummaryResponse)
async def monthly_summary(
    month: MonthParam,
    store: CommissionStore = Depends(get_store),
):
    """Monthly commission summary with hotel breakdown."""
    return await get_monthly_summary(store, month)


@router.get("/records", response_model=List[CommissionExportRow])
async def monthly_records(
    month: MonthParam,
    store: CommissionStore = Depends(get_store),
):
    """Flattened commission records for a month, oldest first."""
    return await get_monthly_records(store, month)


@router.get("/export")
async def export_records(
    month: MonthParam,
    export_format: ExportFormat = Query(ExportFormat.JSON, alias="format"),
    store: CommissionStore = Depends(get_store),
):
    """Download a month's records as JSON or CSV."""
    export = await export_monthly_records(store, month, export_format)
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f"attachment; filename={export.filename}"},
    )
