"""
Pytest configuration and fixtures.
"""

import os
import uuid
from datetime import timedelta
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("IS_PRODUCTION", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from hotel_commissions.db import get_db
from hotel_commissions.main import app
from hotel_commissions.models import (
    Base,
    Booking,
    BookingStatus,
    CommissionAgreement,
    CommissionRateType,
    CommissionRecord,
    Hotel,
    HotelStatus,
    TierRule,
)
from hotel_commissions.utils.timeutils import utcnow


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    """HTTP client against the app, sharing the test session."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ── Factories ─────────────────────────────────────────────


@pytest.fixture
def make_hotel(db_session):
    async def _make(name=None, status=HotelStatus.STANDARD):
        hotel = Hotel(name=name or f"Hotel {uuid.uuid4().hex[:8]}", status=status)
        db_session.add(hotel)
        await db_session.flush()
        return hotel

    return _make


@pytest.fixture
def make_booking(db_session):
    async def _make(
        hotel,
        amount="1000.00",
        status=BookingStatus.COMPLETED,
        currency="CHF",
        reference=None,
    ):
        booking = Booking(
            hotel=hotel,
            booking_reference=reference or f"BK-{uuid.uuid4().hex[:10]}",
            amount=Decimal(amount),
            currency=currency,
            status=status,
            booking_date=utcnow() - timedelta(days=3),
            completed_at=utcnow() if status == BookingStatus.COMPLETED else None,
        )
        db_session.add(booking)
        await db_session.flush()
        return booking

    return _make


@pytest.fixture
def make_agreement(db_session):
    async def _make(
        hotel,
        rate_type=CommissionRateType.PERCENTAGE,
        base_rate="0.10",
        preferred_bonus_rate=None,
        tiers=(),
        effective_from=None,
        effective_until=None,
        is_active=True,
        created_at=None,
    ):
        agreement = CommissionAgreement(
            hotel=hotel,
            rate_type=rate_type,
            base_rate=Decimal(base_rate),
            preferred_bonus_rate=(
                Decimal(preferred_bonus_rate) if preferred_bonus_rate is not None else None
            ),
            effective_from=effective_from or utcnow() - timedelta(days=30),
            effective_until=effective_until,
            is_active=is_active,
            tier_rules=[
                TierRule(
                    position=position,
                    min_bookings=low,
                    max_bookings=high,
                    bonus_rate=Decimal(bonus),
                )
                for position, (low, high, bonus) in enumerate(tiers)
            ],
        )
        if created_at is not None:
            agreement.created_at = created_at
        db_session.add(agreement)
        await db_session.flush()
        return agreement

    return _make


@pytest.fixture
def make_record(db_session):
    """Insert a commission record directly, with a chosen calculated_at."""

    async def _make(booking, agreement, commission_amount, calculated_at, total_rate="0.10"):
        record = CommissionRecord(
            booking=booking,
            agreement=agreement,
            booking_amount=booking.amount,
            currency=booking.currency,
            base_rate=Decimal(total_rate),
            preferred_bonus=Decimal("0"),
            tier_bonus=Decimal("0"),
            total_rate=Decimal(total_rate),
            commission_amount=Decimal(commission_amount),
            calculation_details={},
            calculated_at=calculated_at,
        )
        db_session.add(record)
        await db_session.flush()
        return record

    return _make
