"""
Monthly commission reporting and export.

Reads persisted commission records only; nothing here recalculates.
Months are calendar months in UTC: [first of month, first of next month).
"""

import csv
import io
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Sequence

from hotel_commissions.models import HotelStatus
from hotel_commissions.schemas.commission import (
    CommissionExportResponse,
    CommissionExportRow,
    ExportFormat,
    HotelCommissionSummary,
    MonthlyPeriod,
    MonthlySummaryResponse,
    MonthlyTotals,
)
from hotel_commissions.services.store import CommissionStore
from hotel_commissions.utils.timeutils import as_utc

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
RATE_PRECISION = Decimal("0.000001")


def month_range(month: str) -> tuple[datetime, datetime]:
    """Half-open UTC range [start, end) for a "YYYY-MM" month."""
    year, month_num = (int(part) for part in month.split("-"))
    start = datetime(year, month_num, 1, tzinfo=timezone.utc)
    if month_num == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month_num + 1, 1, tzinfo=timezone.utc)
    return start, end


def average_rate(total_commission: Decimal, total_booking_amount: Decimal) -> Decimal:
    """Effective rate; zero (not an error) when nothing was booked."""
    if total_booking_amount == ZERO:
        return ZERO
    return (total_commission / total_booking_amount).quantize(
        RATE_PRECISION, rounding=ROUND_HALF_UP
    )


async def get_monthly_summary(store: CommissionStore, month: str) -> MonthlySummaryResponse:
    """Aggregate a month's records per hotel and overall."""
    start, end = month_range(month)
    records = await store.query_commission_records(start, end)

    hotels: Dict[uuid.UUID, HotelCommissionSummary] = {}
    total_booking_amount = ZERO
    total_commission = ZERO

    for record in records:
        booking = record.booking
        hotel = booking.hotel
        summary = hotels.get(booking.hotel_id)
        if summary is None:
            summary = HotelCommissionSummary(
                hotel_id=booking.hotel_id,
                hotel_name=hotel.name if hotel else "Unknown",
                hotel_status=hotel.status if hotel else HotelStatus.STANDARD,
            )
            hotels[booking.hotel_id] = summary

        summary.total_bookings += 1
        summary.total_booking_amount += record.booking_amount
        summary.total_commission += record.commission_amount

        total_booking_amount += record.booking_amount
        total_commission += record.commission_amount

    for summary in hotels.values():
        summary.average_rate = average_rate(
            summary.total_commission,
            summary.total_booking_amount,
        )

    logger.debug(f"Monthly summary {month}: {len(records)} records, {len(hotels)} hotels")

    return MonthlySummaryResponse(
        month=month,
        period=MonthlyPeriod(start=start, end=end - timedelta(microseconds=1)),
        summary=MonthlyTotals(
            total_hotels=len(hotels),
            total_bookings=len(records),
            total_booking_amount=total_booking_amount,
            total_commission=total_commission,
            average_commission_rate=average_rate(total_commission, total_booking_amount),
        ),
        hotels=list(hotels.values()),
    )


async def get_monthly_records(store: CommissionStore, month: str) -> List[CommissionExportRow]:
    """One flattened row per record, oldest calculation first."""
    start, end = month_range(month)
    records = await store.query_commission_records(start, end)

    rows = []
    for record in records:
        booking = record.booking
        hotel = booking.hotel
        rows.append(
            CommissionExportRow(
                id=record.id,
                booking_id=record.booking_id,
                booking_reference=booking.booking_reference,
                hotel_id=booking.hotel_id,
                hotel_name=hotel.name if hotel else "Unknown",
                hotel_status=hotel.status if hotel else HotelStatus.STANDARD,
                booking_amount=record.booking_amount,
                currency=record.currency,
                rate_type=record.agreement.rate_type,
                base_rate=record.base_rate,
                preferred_bonus=record.preferred_bonus,
                tier_bonus=record.tier_bonus,
                total_rate=record.total_rate,
                commission_amount=record.commission_amount,
                calculated_at=as_utc(record.calculated_at),
            )
        )
    return rows


def records_to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """
    Render rows as CSV.

    Header comes from the first row's keys. Fields containing a comma,
    quote or line break are quoted with inner quotes doubled. Lines are
    joined with "\\n". No rows gives an empty string, not a lone header.
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(headers)
    for row in rows:
        writer.writerow([row.get(h) for h in headers])

    return buffer.getvalue().rstrip("\n")


@dataclass(frozen=True)
class ExportFile:
    """Rendered export ready to be sent as an attachment."""

    content: bytes
    media_type: str
    filename: str


async def export_monthly_records(
    store: CommissionStore,
    month: str,
    export_format: ExportFormat = ExportFormat.JSON,
) -> ExportFile:
    """Render a month's records as a JSON or CSV attachment."""
    rows = await get_monthly_records(store, month)

    if export_format == ExportFormat.CSV:
        content = records_to_csv([row.model_dump(mode="json") for row in rows])
        return ExportFile(
            content=content.encode("utf-8"),
            media_type="text/csv",
            filename=f"commissions-{month}.csv",
        )

    body = CommissionExportResponse(month=month, record_count=len(rows), records=rows)
    return ExportFile(
        content=body.model_dump_json().encode("utf-8"),
        media_type="application/json",
        filename=f"commissions-{month}.json",
    )
