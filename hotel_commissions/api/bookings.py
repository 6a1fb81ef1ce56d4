"""Booking API endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_commissions.api.dependencies import page_count
from hotel_commissions.db import get_db
from hotel_commissions.models import BookingStatus
from hotel_commissions.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingUpdate,
)
from hotel_commissions.services import bookings as booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a booking (status PENDING). References are unique."""
    return await booking_service.create_booking(db, data)


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    db: AsyncSession = Depends(get_db),
    hotel_id: Optional[uuid.UUID] = Query(None),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
):
    """List bookings with filters."""
    bookings, total = await booking_service.list_bookings(
        db,
        hotel_id=hotel_id,
        status=booking_status,
        search=search,
        page=page,
        per_page=per_page,
    )
    return BookingListResponse(
        items=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.get_booking(db, booking_id)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: uuid.UUID,
    data: BookingUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a booking, including status transitions."""
    return await booking_service.update_booking(db, booking_id, data)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.complete_booking(db, booking_id)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.cancel_booking(db, booking_id)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    await booking_service.delete_booking(db, booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
