"""Commission agreement API endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_commissions.api.dependencies import page_count
from hotel_commissions.db import get_db
from hotel_commissions.schemas.agreement import (
    AgreementCreate,
    AgreementListResponse,
    AgreementResponse,
    AgreementUpdate,
)
from hotel_commissions.services import agreements as agreement_service

router = APIRouter(prefix="/commission-agreements", tags=["Commission Agreements"])


@router.post("", response_model=AgreementResponse, status_code=status.HTTP_201_CREATED)
async def create_agreement(
    data: AgreementCreate,
    db: AsyncSession = Depends(get_db),
):
    return await agreement_service.create_agreement(db, data)


@router.get("", response_model=AgreementListResponse)
async def list_agreements(
    db: AsyncSession = Depends(get_db),
    hotel_id: Optional[uuid.UUID] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
):
    agreements, total = await agreement_service.list_agreements(
        db, hotel_id=hotel_id, page=page, per_page=per_page
    )
    return AgreementListResponse(
        items=[AgreementResponse.model_validate(a) for a in agreements],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get("/{agreement_id}", response_model=AgreementResponse)
async def get_agreement(
    agreement_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await agreement_service.get_agreement(db, agreement_id)


@router.patch("/{agreement_id}", response_model=AgreementResponse)
async def update_agreement(
    agreement_id: uuid.UUID,
    data: AgreementUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await agreement_service.update_agreement(db, agreement_id, data)


@router.delete("/{agreement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_agreement(
    agreement_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    await agreement_service.delete_agreement(db, agreement_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
