"""
Storage access for the commission engine.

Every read and write the engine needs goes through CommissionStore, so the
calculator and reporting code never build queries themselves. Writes are
flushed inside the caller's transaction; committing is left to the session
owner (the request dependency).
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_commissions.errors import ConflictError
from hotel_commissions.models import (
    Booking,
    BookingStatus,
    CommissionAgreement,
    CommissionRecord,
)

logger = logging.getLogger(__name__)


class CommissionStore:
    """AsyncSession-backed storage collaborator."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_booking(self, booking_id: uuid.UUID) -> Optional[Booking]:
        """Booking with its hotel loaded, or None."""
        result = await self.db.execute(
            select(Booking)
            .options(selectinload(Booking.hotel))
            .where(Booking.id == booking_id)
        )
        return result.scalar_one_or_none()

    async def get_active_agreement(
        self,
        hotel_id: uuid.UUID,
        as_of: datetime,
    ) -> Optional[CommissionAgreement]:
        """
        Agreement in force for a hotel at ``as_of``.

        Active flag set, effective_from <= as_of, effective_until null or
        >= as_of. If several qualify the most recently created wins.
        Tier rules are loaded in authored order.
        """
        result = await self.db.execute(
            select(CommissionAgreement)
            .options(selectinload(CommissionAgreement.tier_rules))
            .where(
                CommissionAgreement.hotel_id == hotel_id,
                CommissionAgreement.is_active.is_(True),
                CommissionAgreement.effective_from <= as_of,
                or_(
                    CommissionAgreement.effective_until.is_(None),
                    CommissionAgreement.effective_until >= as_of,
                ),
            )
            .order_by(CommissionAgreement.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count_completed_bookings(
        self,
        hotel_id: uuid.UUID,
        excluding_id: uuid.UUID,
    ) -> int:
        """Completed bookings of a hotel, not counting ``excluding_id``."""
        count = await self.db.scalar(
            select(func.count())
            .select_from(Booking)
            .where(
                Booking.hotel_id == hotel_id,
                Booking.status == BookingStatus.COMPLETED,
                Booking.id != excluding_id,
            )
        )
        return count or 0

    async def get_commission_record(
        self,
        booking_id: uuid.UUID,
    ) -> Optional[CommissionRecord]:
        result = await self.db.execute(
            select(CommissionRecord).where(CommissionRecord.booking_id == booking_id)
        )
        return result.scalar_one_or_none()

    async def create_commission_record(
        self,
        record: CommissionRecord,
    ) -> CommissionRecord:
        """
        Insert a new record.

        Raises ConflictError if a record for the same booking already
        exists. The session is rolled back in that case, since a failed
        INSERT leaves the transaction unusable on PostgreSQL.
        """
        self.db.add(record)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(
                f"Commission record for booking \"{record.booking_id}\" already exists"
            ) from e
        # Reload so the returned values match what later reads will see
        await self.db.refresh(record)
        return record

    async def query_commission_records(
        self,
        start: datetime,
        end: datetime,
    ) -> List[CommissionRecord]:
        """Records calculated in [start, end), oldest first, with joins loaded."""
        result = await self.db.execute(
            select(CommissionRecord)
            .options(
                selectinload(CommissionRecord.booking).selectinload(Booking.hotel),
                selectinload(CommissionRecord.agreement),
            )
            .where(
                CommissionRecord.calculated_at >= start,
                CommissionRecord.calculated_at < end,
            )
            .order_by(CommissionRecord.calculated_at.asc())
        )
        return list(result.scalars().all())
