"""
Commission calculation for completed bookings.

Rules:
- Only COMPLETED bookings are eligible
- At most one record per booking; repeated calls return the stored record
- The hotel's active agreement supplies base, preferred and tier rates
- FLAT: the base rate is the commission itself (fixed amount)
- PERCENTAGE / TIERED: booking amount x total rate
- Amounts are rounded to cents, half away from zero (ROUND_HALF_UP)
"""

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from hotel_commissions.errors import ConflictError, InvalidStateError, NotFoundError
from hotel_commissions.models import (
    Booking,
    BookingStatus,
    CommissionAgreement,
    CommissionRateType,
    CommissionRecord,
)
from hotel_commissions.services.agreements import find_active_agreement
from hotel_commissions.services.rates import RateBreakdown, compose_rate
from hotel_commissions.services.store import CommissionStore
from hotel_commissions.utils.timeutils import isoformat_utc, utcnow

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def round_amount(amount: Decimal) -> Decimal:
    """Round a monetary amount to 2 places, halves away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_commission_amount(
    rate_type: CommissionRateType,
    booking_amount: Decimal,
    rates: RateBreakdown,
) -> Decimal:
    """Monetary commission for a booking given its composed rates."""
    if rate_type == CommissionRateType.FLAT:
        amount = rates.base_rate
    else:
        amount = Decimal(booking_amount) * rates.total_rate
    return round_amount(amount)


def _decimal_str(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def build_calculation_details(
    booking: Booking,
    agreement: CommissionAgreement,
    rates: RateBreakdown,
    completed_bookings_count: int,
    commission_amount: Decimal,
    calculated_at,
) -> dict[str, Any]:
    """
    Self-contained audit snapshot of a calculation.

    Only JSON primitives: decimals as exact strings, datetimes as
    ISO-8601 UTC strings, ids as strings.
    """
    hotel = booking.hotel
    rule = rates.matched_tier_rule

    return {
        "calculated_at": isoformat_utc(calculated_at),
        "hotel": {
            "id": str(booking.hotel_id),
            "name": hotel.name if hotel else None,
            "status": hotel.status.value if hotel else None,
        },
        "booking": {
            "id": str(booking.id),
            "reference": booking.booking_reference,
            "amount": str(booking.amount),
            "currency": booking.currency,
            "completed_at": isoformat_utc(booking.completed_at),
        },
        "agreement": {
            "id": str(agreement.id),
            "rate_type": agreement.rate_type.value,
            "base_rate": str(agreement.base_rate),
            "preferred_bonus_rate": _decimal_str(agreement.preferred_bonus_rate),
            "effective_from": isoformat_utc(agreement.effective_from),
            "effective_until": isoformat_utc(agreement.effective_until),
        },
        "calculation": {
            "base_rate": str(rates.base_rate),
            "preferred_bonus_applied": rates.preferred_bonus_applied,
            "preferred_bonus": str(rates.preferred_bonus),
            "tier_bonus_applied": rates.tier_bonus_applied,
            "tier_bonus": str(rates.tier_bonus),
            "completed_bookings_count": completed_bookings_count,
            "matched_tier_rule": (
                {
                    "id": str(rule.id),
                    "min_bookings": rule.min_bookings,
                    "max_bookings": rule.max_bookings,
                    "bonus_rate": str(rule.bonus_rate),
                }
                if rule is not None
                else None
            ),
            "total_rate": str(rates.total_rate),
            "commission_amount": str(commission_amount),
        },
    }


async def calculate_commission(
    store: CommissionStore,
    booking_id: uuid.UUID,
) -> CommissionRecord:
    """Calculate and persist the commission for a completed booking.

    Idempotent: if the booking already has a record it is returned as is,
    never recomputed. A concurrent caller that loses the insert race gets
    the winner's record.

    Args:
        store: Storage collaborator bound to the current session
        booking_id: Booking to calculate for

    Returns:
        The booking's CommissionRecord

    Raises:
        NotFoundError: booking missing, or no active agreement for its hotel
        InvalidStateError: booking is not COMPLETED
    """
    booking = await store.get_booking(booking_id)
    if not booking:
        raise NotFoundError(f"Booking with ID \"{booking_id}\" not found")

    if booking.status != BookingStatus.COMPLETED:
        raise InvalidStateError(
            "Commission can only be calculated for completed bookings"
        )

    existing = await store.get_commission_record(booking_id)
    if existing:
        logger.debug(f"Commission for booking {booking_id} already calculated")
        return existing

    agreement = await find_active_agreement(store, booking.hotel_id)
    if not agreement:
        hotel_name = booking.hotel.name if booking.hotel else "Unknown"
        raise NotFoundError(
            f"No active commission agreement found for hotel \"{hotel_name}\""
        )

    completed_count = await store.count_completed_bookings(
        booking.hotel_id,
        excluding_id=booking.id,
    )
    hotel_status = booking.hotel.status if booking.hotel else None
    rates = compose_rate(agreement, hotel_status, completed_count)
    commission_amount = compute_commission_amount(
        agreement.rate_type,
        booking.amount,
        rates,
    )

    calculated_at = utcnow()
    record = CommissionRecord(
        booking_id=booking.id,
        agreement_id=agreement.id,
        booking_amount=booking.amount,
        currency=booking.currency,
        base_rate=rates.base_rate,
        preferred_bonus=rates.preferred_bonus,
        tier_bonus=rates.tier_bonus,
        total_rate=rates.total_rate,
        commission_amount=commission_amount,
        calculation_details=build_calculation_details(
            booking,
            agreement,
            rates,
            completed_count,
            commission_amount,
            calculated_at,
        ),
        calculated_at=calculated_at,
    )
    agreement_id = agreement.id

    try:
        record = await store.create_commission_record(record)
    except ConflictError:
        # Another request inserted the record between our check and insert
        winner = await store.get_commission_record(booking_id)
        if winner is None:
            raise
        logger.warning(
            f"Concurrent commission calculation for booking {booking_id}; "
            f"using existing record {winner.id}"
        )
        return winner

    logger.info(
        f"Commission calculated for booking {booking_id}: "
        f"{commission_amount} {record.currency} (agreement {agreement_id}, "
        f"rate {rates.total_rate})"
    )
    return record
