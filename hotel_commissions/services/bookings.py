"""
Booking CRUD and status transitions.

Status is a one-way state machine: PENDING -> COMPLETED | CANCELLED.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_commissions.config import settings
from hotel_commissions.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from hotel_commissions.models import BOOKING_TRANSITIONS, Booking, BookingStatus, Hotel
from hotel_commissions.schemas.booking import BookingCreate, BookingUpdate
from hotel_commissions.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


def validate_status_transition(current: BookingStatus, new: BookingStatus) -> None:
    """Raise InvalidStateError unless current -> new is allowed."""
    if new not in BOOKING_TRANSITIONS[current]:
        raise InvalidStateError(
            f"Cannot transition booking from {current.value} to {new.value}"
        )


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    """Booking with its hotel; NotFoundError if absent."""
    result = await db.execute(
        select(Booking)
        .options(selectinload(Booking.hotel))
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError(f"Booking with ID \"{booking_id}\" not found")
    return booking


async def list_bookings(
    db: AsyncSession,
    hotel_id: Optional[uuid.UUID] = None,
    status: Optional[BookingStatus] = None,
    search: Optional[str] = None,
    page: int = 1,
    per_page: int = 20,
) -> tuple[List[Booking], int]:
    """Page of bookings (newest first) and the total count."""
    query = select(Booking)
    if hotel_id:
        query = query.where(Booking.hotel_id == hotel_id)
    if status:
        query = query.where(Booking.status == status)
    if search:
        query = query.where(Booking.booking_reference.ilike(f"%{search}%"))

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    query = (
        query.options(selectinload(Booking.hotel))
        .order_by(Booking.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total or 0


async def create_booking(db: AsyncSession, data: BookingCreate) -> Booking:
    """Create a PENDING booking for an existing hotel."""
    hotel = await db.get(Hotel, data.hotel_id)
    if not hotel:
        raise ValidationFailedError(f"Hotel with ID \"{data.hotel_id}\" does not exist")

    booking = Booking(
        hotel_id=data.hotel_id,
        booking_reference=data.booking_reference,
        amount=data.amount,
        currency=(data.currency or settings.default_currency).upper(),
        status=BookingStatus.PENDING,
        booking_date=data.booking_date,
    )
    db.add(booking)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(
            f"Booking with reference \"{data.booking_reference}\" already exists"
        ) from e

    logger.info(f"Created booking {booking.id} ({booking.booking_reference}) for hotel {hotel.id}")
    return await get_booking(db, booking.id)


async def update_booking(
    db: AsyncSession,
    booking_id: uuid.UUID,
    data: BookingUpdate,
) -> Booking:
    """Apply a status transition; completing stamps completed_at if not given."""
    booking = await get_booking(db, booking_id)

    if data.status is not None:
        validate_status_transition(booking.status, data.status)
        booking.status = data.status
        if data.status == BookingStatus.COMPLETED:
            booking.completed_at = data.completed_at or utcnow()
        logger.info(f"Booking {booking_id} -> {data.status.value}")
    elif data.completed_at is not None:
        booking.completed_at = data.completed_at

    await db.flush()
    return await get_booking(db, booking_id)


async def complete_booking(
    db: AsyncSession,
    booking_id: uuid.UUID,
    completed_at: Optional[datetime] = None,
) -> Booking:
    return await update_booking(
        db, booking_id, BookingUpdate(status=BookingStatus.COMPLETED, completed_at=completed_at)
    )


async def cancel_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    return await update_booking(db, booking_id, BookingUpdate(status=BookingStatus.CANCELLED))


async def delete_booking(db: AsyncSession, booking_id: uuid.UUID) -> None:
    booking = await get_booking(db, booking_id)
    await db.delete(booking)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(
            "Booking has a commission record and cannot be deleted"
        ) from e
