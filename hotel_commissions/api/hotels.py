"""Hotel API endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_commissions.api.dependencies import get_store, page_count
from hotel_commissions.db import get_db
from hotel_commissions.schemas.agreement import AgreementResponse
from hotel_commissions.schemas.hotel import (
    HotelCreate,
    HotelListResponse,
    HotelResponse,
    HotelUpdate,
)
from hotel_commissions.services import hotels as hotel_service
from hotel_commissions.services.agreements import find_active_agreement
from hotel_commissions.services.store import CommissionStore

router = APIRouter(prefix="/hotels", tags=["Hotels"])


@router.post("", response_model=HotelResponse, status_code=status.HTTP_201_CREATED)
async def create_hotel(
    data: HotelCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a hotel. Names are unique."""
    return await hotel_service.create_hotel(db, data)


@router.get("", response_model=HotelListResponse)
async def list_hotels(
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
):
    """List hotels, optionally filtered by name."""
    hotels, total = await hotel_service.list_hotels(db, search=search, page=page, per_page=per_page)
    return HotelListResponse(
        items=[HotelResponse.model_validate(h) for h in hotels],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get("/{hotel_id}", response_model=HotelResponse)
async def get_hotel(
    hotel_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await hotel_service.get_hotel(db, hotel_id)


@router.get("/{hotel_id}/commission-agreement", response_model=Optional[AgreementResponse])
async def get_active_agreement(
    hotel_id: uuid.UUID,
    store: CommissionStore = Depends(get_store),
):
    """Agreement currently in force for the hotel (null if none)."""
    await hotel_service.get_hotel(store.db, hotel_id)
    return await find_active_agreement(store, hotel_id)


@router.patch("/{hotel_id}", response_model=HotelResponse)
async def update_hotel(
    hotel_id: uuid.UUID,
    data: HotelUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await hotel_service.update_hotel(db, hotel_id, data)


@router.delete("/{hotel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_hotel(
    hotel_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    await hotel_service.delete_hotel(db, hotel_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
