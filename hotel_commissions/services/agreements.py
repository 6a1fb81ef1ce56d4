"""
Commission agreements: active-agreement resolution and CRUD.
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_commissions.errors import ConflictError, NotFoundError, ValidationFailedError
from hotel_commissions.models import (
    CommissionAgreement,
    CommissionRateType,
    Hotel,
    TierRule,
)
from hotel_commissions.schemas.agreement import (
    AgreementCreate,
    AgreementUpdate,
    TierRuleCreate,
)
from hotel_commissions.services.store import CommissionStore
from hotel_commissions.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

# Fields that may not be cleared to null on update
_REQUIRED_FIELDS = frozenset({"rate_type", "base_rate", "effective_from", "is_active"})


async def find_active_agreement(
    store: CommissionStore,
    hotel_id: uuid.UUID,
    now: Optional[datetime] = None,
) -> Optional[CommissionAgreement]:
    """
    Return the agreement currently in force for a hotel, or None.

    None is a normal outcome; callers decide whether it is an error.
    """
    return await store.get_active_agreement(hotel_id, as_of=now or utcnow())


def _build_tier_rules(rules: Optional[List[TierRuleCreate]]) -> List[TierRule]:
    return [
        TierRule(
            position=position,
            min_bookings=rule.min_bookings,
            max_bookings=rule.max_bookings,
            bonus_rate=rule.bonus_rate,
        )
        for position, rule in enumerate(rules or [])
    ]


def _check_tiered_has_rules(rate_type: CommissionRateType, rule_count: int) -> None:
    if rate_type == CommissionRateType.TIERED and rule_count == 0:
        raise ValidationFailedError("Tiered rate type requires at least one tier rule")


async def get_agreement(db: AsyncSession, agreement_id: uuid.UUID) -> CommissionAgreement:
    """Agreement with tier rules; NotFoundError if absent."""
    result = await db.execute(
        select(CommissionAgreement)
        .options(selectinload(CommissionAgreement.tier_rules))
        .where(CommissionAgreement.id == agreement_id)
        .execution_options(populate_existing=True)
    )
    agreement = result.scalar_one_or_none()
    if not agreement:
        raise NotFoundError(f"Commission agreement with ID \"{agreement_id}\" not found")
    return agreement


async def list_agreements(
    db: AsyncSession,
    hotel_id: Optional[uuid.UUID] = None,
    page: int = 1,
    per_page: int = 20,
) -> tuple[List[CommissionAgreement], int]:
    """Page of agreements (newest first) and the total count."""
    query = select(CommissionAgreement)
    if hotel_id:
        query = query.where(CommissionAgreement.hotel_id == hotel_id)

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    query = (
        query.options(selectinload(CommissionAgreement.tier_rules))
        .order_by(CommissionAgreement.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total or 0


async def create_agreement(db: AsyncSession, data: AgreementCreate) -> CommissionAgreement:
    """Create an agreement with its tier rules."""
    _check_tiered_has_rules(data.rate_type, len(data.tier_rules or []))

    hotel = await db.get(Hotel, data.hotel_id)
    if not hotel:
        raise NotFoundError(f"Hotel with ID \"{data.hotel_id}\" not found")

    agreement = CommissionAgreement(
        hotel_id=data.hotel_id,
        rate_type=data.rate_type,
        base_rate=data.base_rate,
        preferred_bonus_rate=data.preferred_bonus_rate,
        effective_from=data.effective_from or utcnow(),
        effective_until=data.effective_until,
        is_active=data.is_active,
        tier_rules=_build_tier_rules(data.tier_rules),
    )
    db.add(agreement)
    await db.flush()

    logger.info(
        f"Created {agreement.rate_type.value} agreement {agreement.id} for hotel {agreement.hotel_id}"
    )
    return await get_agreement(db, agreement.id)


async def update_agreement(
    db: AsyncSession,
    agreement_id: uuid.UUID,
    data: AgreementUpdate,
) -> CommissionAgreement:
    """
    Update agreement fields. Supplying tier_rules replaces the whole set.

    Existing commission records are snapshots and are not affected.
    """
    agreement = await get_agreement(db, agreement_id)
    changes = data.model_dump(exclude_unset=True, exclude={"tier_rules"})

    for field, value in changes.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(agreement, field, value)

    if data.tier_rules is not None:
        agreement.tier_rules = _build_tier_rules(data.tier_rules)

    _check_tiered_has_rules(agreement.rate_type, len(agreement.tier_rules))

    await db.flush()
    return await get_agreement(db, agreement_id)


async def delete_agreement(db: AsyncSession, agreement_id: uuid.UUID) -> None:
    """Delete an agreement and its tier rules."""
    agreement = await get_agreement(db, agreement_id)
    await db.delete(agreement)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(
            "Agreement is referenced by commission records and cannot be deleted"
        ) from e
