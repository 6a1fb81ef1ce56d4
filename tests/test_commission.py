"""
Tests for commission calculation.

Covers:
- Rounding of monetary amounts (half away from zero)
- FLAT / PERCENTAGE / TIERED / preferred calculations against the database
- Idempotency: a second call returns the stored record unchanged
- Eligibility and missing-agreement errors leave no record behind
- Lost insert race resolves to the winner's record
- Audit snapshot in calculation_details
"""

import json
import uuid
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from hotel_commissions.errors import ConflictError, InvalidStateError, NotFoundError
from hotel_commissions.models import (
    BookingStatus,
    CommissionRateType,
    CommissionRecord,
    HotelStatus,
)
from hotel_commissions.schemas.commission import CommissionRecordResponse
from hotel_commissions.services.commission import (
    calculate_commission,
    compute_commission_amount,
    round_amount,
)
from hotel_commissions.services.rates import RateBreakdown
from hotel_commissions.services.store import CommissionStore

VOLUME_TIERS = [(0, 4, "0.00"), (5, 9, "0.01"), (10, None, "0.02")]


async def _record_count(db_session) -> int:
    return await db_session.scalar(select(func.count()).select_from(CommissionRecord))


def _rates(total_rate, base_rate=None):
    total = Decimal(total_rate)
    return RateBreakdown(
        base_rate=Decimal(base_rate) if base_rate is not None else total,
        preferred_bonus=Decimal("0"),
        tier_bonus=Decimal("0"),
        total_rate=total,
    )


# ── round_amount / compute_commission_amount ──────────────


class TestRounding:
    def test_half_rounds_up(self):
        assert round_amount(Decimal("0.005")) == Decimal("0.01")
        assert round_amount(Decimal("2.675")) == Decimal("2.68")

    def test_half_rounds_away_from_zero_for_negatives(self):
        assert round_amount(Decimal("-0.005")) == Decimal("-0.01")

    def test_below_half_rounds_down(self):
        assert round_amount(Decimal("10.004999")) == Decimal("10.00")

    def test_result_has_two_places(self):
        assert str(round_amount(Decimal("150"))) == "150.00"

    def test_percentage_boundary(self):
        amount = compute_commission_amount(
            CommissionRateType.PERCENTAGE, Decimal("100.05"), _rates("0.10")
        )
        assert amount == Decimal("10.01")

    def test_tiny_amount_boundary(self):
        amount = compute_commission_amount(
            CommissionRateType.PERCENTAGE, Decimal("0.05"), _rates("0.10")
        )
        assert amount == Decimal("0.01")

    def test_flat_ignores_booking_amount(self):
        amount = compute_commission_amount(
            CommissionRateType.FLAT, Decimal("9999.99"), _rates("50", base_rate="50")
        )
        assert amount == Decimal("50.00")


# ── calculate_commission ──────────────────────────────────


class TestCalculateCommission:
    @pytest.mark.asyncio
    async def test_flat_agreement(self, db_session, make_hotel, make_booking, make_agreement):
        hotel = await make_hotel()
        await make_agreement(hotel, rate_type=CommissionRateType.FLAT, base_rate="50.00")
        booking = await make_booking(hotel, amount="1500.00")

        record = await calculate_commission(CommissionStore(db_session), booking.id)

        assert record.commission_amount == Decimal("50.00")
        assert record.booking_amount == Decimal("1500.00")
        assert record.currency == "CHF"

    @pytest.mark.asyncio
    async def test_percentage_agreement(self, db_session, make_hotel, make_booking, make_agreement):
        hotel = await make_hotel()
        agreement = await make_agreement(hotel, base_rate="0.10")
        booking = await make_booking(hotel, amount="1500.00")

        record = await calculate_commission(CommissionStore(db_session), booking.id)

        assert record.commission_amount == Decimal("150.00")
        assert record.total_rate == Decimal("0.10")
        assert record.agreement_id == agreement.id
        assert record.booking_id == booking.id

    @pytest.mark.asyncio
    async def test_preferred_hotel_bonus(self, db_session, make_hotel, make_booking, make_agreement):
        hotel = await make_hotel(status=HotelStatus.PREFERRED)
        await make_agreement(hotel, base_rate="0.10", preferred_bonus_rate="0.02")
        booking = await make_booking(hotel, amount="1500.00")

        record = await calculate_commission(CommissionStore(db_session), booking.id)

        assert record.preferred_bonus == Decimal("0.02")
        assert record.total_rate == Decimal("0.12")
        assert record.commission_amount == Decimal("180.00")

    @pytest.mark.asyncio
    async def test_standard_hotel_skips_preferred_bonus(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel(status=HotelStatus.STANDARD)
        await make_agreement(hotel, base_rate="0.10", preferred_bonus_rate="0.02")
        booking = await make_booking(hotel, amount="1500.00")

        record = await calculate_commission(CommissionStore(db_session), booking.id)

        assert record.preferred_bonus == Decimal("0")
        assert record.commission_amount == Decimal("150.00")

    @pytest.mark.asyncio
    async def test_tiered_counts_other_completed_bookings(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel()
        await make_agreement(
            hotel,
            rate_type=CommissionRateType.TIERED,
            base_rate="0.10",
            tiers=VOLUME_TIERS,
        )
        for _ in range(5):
            await make_booking(hotel)
        # Not completed, so not counted
        await make_booking(hotel, status=BookingStatus.PENDING)
        await make_booking(hotel, status=BookingStatus.CANCELLED)
        booking = await make_booking(hotel, amount="1000.00")

        record = await calculate_commission(CommissionStore(db_session), booking.id)

        assert record.tier_bonus == Decimal("0.01")
        assert record.total_rate == Decimal("0.11")
        assert record.commission_amount == Decimal("110.00")
        calc = record.calculation_details["calculation"]
        assert calc["completed_bookings_count"] == 5
        assert calc["tier_bonus_applied"] is True
        assert calc["matched_tier_rule"]["min_bookings"] == 5

    @pytest.mark.asyncio
    async def test_tiered_excludes_booking_itself(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel()
        await make_agreement(
            hotel,
            rate_type=CommissionRateType.TIERED,
            base_rate="0.10",
            tiers=VOLUME_TIERS,
        )
        for _ in range(4):
            await make_booking(hotel)
        booking = await make_booking(hotel, amount="1000.00")

        record = await calculate_commission(CommissionStore(db_session), booking.id)

        assert record.tier_bonus == Decimal("0")
        assert record.commission_amount == Decimal("100.00")
        assert record.calculation_details["calculation"]["completed_bookings_count"] == 4

    @pytest.mark.asyncio
    async def test_other_hotels_bookings_not_counted(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel()
        other = await make_hotel()
        await make_agreement(
            hotel,
            rate_type=CommissionRateType.TIERED,
            base_rate="0.10",
            tiers=VOLUME_TIERS,
        )
        for _ in range(6):
            await make_booking(other)
        booking = await make_booking(hotel, amount="1000.00")

        record = await calculate_commission(CommissionStore(db_session), booking.id)

        assert record.calculation_details["calculation"]["completed_bookings_count"] == 0
        assert record.tier_bonus == Decimal("0")

    @pytest.mark.asyncio
    async def test_rounding_boundary_through_storage(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel()
        await make_agreement(hotel, base_rate="0.10")
        booking = await make_booking(hotel, amount="100.05")

        record = await calculate_commission(CommissionStore(db_session), booking.id)

        assert record.commission_amount == Decimal("10.01")

    # ── idempotency ──

    @pytest.mark.asyncio
    async def test_second_call_returns_same_record(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel()
        await make_agreement(hotel, base_rate="0.10")
        booking = await make_booking(hotel, amount="1500.00")
        store = CommissionStore(db_session)

        first = await calculate_commission(store, booking.id)
        first_view = CommissionRecordResponse.model_validate(first).model_dump()
        second = await calculate_commission(store, booking.id)

        assert CommissionRecordResponse.model_validate(second).model_dump() == first_view
        assert await _record_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_agreement_change_does_not_recompute(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel()
        agreement = await make_agreement(hotel, base_rate="0.10")
        booking = await make_booking(hotel, amount="1500.00")
        store = CommissionStore(db_session)

        await calculate_commission(store, booking.id)
        agreement.base_rate = Decimal("0.50")
        await db_session.flush()
        again = await calculate_commission(store, booking.id)

        assert again.commission_amount == Decimal("150.00")
        assert again.total_rate == Decimal("0.10")

    # ── errors ──

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [BookingStatus.PENDING, BookingStatus.CANCELLED])
    async def test_not_completed_is_rejected(
        self, db_session, make_hotel, make_booking, make_agreement, status
    ):
        hotel = await make_hotel()
        await make_agreement(hotel)
        booking = await make_booking(hotel, status=status)

        with pytest.raises(InvalidStateError) as exc_info:
            await calculate_commission(CommissionStore(db_session), booking.id)

        assert "completed bookings" in exc_info.value.message
        assert await _record_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_missing_booking(self, db_session):
        with pytest.raises(NotFoundError):
            await calculate_commission(CommissionStore(db_session), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_no_active_agreement(self, db_session, make_hotel, make_booking):
        hotel = await make_hotel(name="Seehof Lucerne")
        booking = await make_booking(hotel)

        with pytest.raises(NotFoundError) as exc_info:
            await calculate_commission(CommissionStore(db_session), booking.id)

        assert "Seehof Lucerne" in exc_info.value.message
        assert await _record_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_inactive_agreement_only(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel()
        await make_agreement(hotel, is_active=False)
        booking = await make_booking(hotel)

        with pytest.raises(NotFoundError):
            await calculate_commission(CommissionStore(db_session), booking.id)

    # ── concurrency ──

    @pytest.mark.asyncio
    async def test_lost_insert_race_returns_winner(
        self, db_session, make_hotel, make_booking, make_agreement, monkeypatch
    ):
        hotel = await make_hotel()
        await make_agreement(hotel, base_rate="0.10")
        booking = await make_booking(hotel, amount="1500.00")
        booking_id = booking.id
        await db_session.commit()

        store = CommissionStore(db_session)
        winner = await calculate_commission(store, booking_id)
        await db_session.commit()
        winner_view = CommissionRecordResponse.model_validate(winner).model_dump()

        # Second caller checked for a record before the winner committed
        real_get = store.get_commission_record
        calls = {"n": 0}

        async def stale_get(bid):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return await real_get(bid)

        monkeypatch.setattr(store, "get_commission_record", stale_get)
        loser = await calculate_commission(store, booking_id)

        assert calls["n"] == 2
        assert CommissionRecordResponse.model_validate(loser).model_dump() == winner_view
        assert await _record_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_conflict_without_winner_is_raised(
        self, db_session, make_hotel, make_booking, make_agreement, monkeypatch
    ):
        hotel = await make_hotel()
        await make_agreement(hotel)
        booking = await make_booking(hotel)
        store = CommissionStore(db_session)

        async def conflicting_create(record):
            raise ConflictError("duplicate")

        monkeypatch.setattr(store, "create_commission_record", conflicting_create)

        with pytest.raises(ConflictError):
            await calculate_commission(store, booking.id)

    # ── audit snapshot ──

    @pytest.mark.asyncio
    async def test_calculation_details_snapshot(
        self, db_session, make_hotel, make_booking, make_agreement
    ):
        hotel = await make_hotel(name="Grand Alpine", status=HotelStatus.PREFERRED)
        agreement = await make_agreement(hotel, base_rate="0.10", preferred_bonus_rate="0.02")
        booking = await make_booking(hotel, amount="1500.00", reference="GA-0001")

        record = await calculate_commission(CommissionStore(db_session), booking.id)
        details = record.calculation_details

        assert details["hotel"]["name"] == "Grand Alpine"
        assert details["hotel"]["status"] == "PREFERRED"
        assert details["booking"]["reference"] == "GA-0001"
        assert details["booking"]["id"] == str(booking.id)
        assert details["agreement"]["id"] == str(agreement.id)
        assert details["agreement"]["rate_type"] == "PERCENTAGE"
        assert details["calculation"]["preferred_bonus_applied"] is True
        assert details["calculation"]["tier_bonus_applied"] is False
        assert details["calculation"]["matched_tier_rule"] is None
        assert Decimal(details["calculation"]["total_rate"]) == Decimal("0.12")
        assert Decimal(details["calculation"]["commission_amount"]) == Decimal("180.00")
        assert details["calculated_at"].endswith("+00:00")
        # Serializable as plain JSON, decimals kept as strings
        assert json.loads(json.dumps(details)) == details
