"""Hotel CRUD."""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_commissions.errors import ConflictError, NotFoundError
from hotel_commissions.models import Hotel
from hotel_commissions.schemas.hotel import HotelCreate, HotelUpdate

logger = logging.getLogger(__name__)


async def _flush_unique_name(db: AsyncSession, name: Optional[str]) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(f"Hotel with name \"{name}\" already exists") from e


async def get_hotel(db: AsyncSession, hotel_id: uuid.UUID) -> Hotel:
    hotel = await db.get(Hotel, hotel_id)
    if not hotel:
        raise NotFoundError(f"Hotel with ID \"{hotel_id}\" not found")
    return hotel


async def list_hotels(
    db: AsyncSession,
    search: Optional[str] = None,
    page: int = 1,
    per_page: int = 20,
) -> tuple[List[Hotel], int]:
    """Page of hotels (newest first) and the total count."""
    query = select(Hotel)
    if search:
        query = query.where(Hotel.name.ilike(f"%{search}%"))

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    query = query.order_by(Hotel.created_at.desc())
    query = query.offset((page - 1) * per_page).limit(per_page)
    result = await db.execute(query)
    return list(result.scalars().all()), total or 0


async def create_hotel(db: AsyncSession, data: HotelCreate) -> Hotel:
    hotel = Hotel(name=data.name, status=data.status)
    db.add(hotel)
    await _flush_unique_name(db, data.name)
    logger.info(f"Created hotel {hotel.id} ({hotel.name})")
    return hotel


async def update_hotel(db: AsyncSession, hotel_id: uuid.UUID, data: HotelUpdate) -> Hotel:
    hotel = await get_hotel(db, hotel_id)
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(hotel, field, value)
    await _flush_unique_name(db, data.name)
    return hotel


async def delete_hotel(db: AsyncSession, hotel_id: uuid.UUID) -> None:
    hotel = await get_hotel(db, hotel_id)
    await db.delete(hotel)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(
            "Hotel has commission records and cannot be deleted"
        ) from e
