"""
FastAPI dependencies shared by the routers.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_commissions.db import get_db
from hotel_commissions.services.store import CommissionStore


async def get_store(db: AsyncSession = Depends(get_db)) -> CommissionStore:
    """Commission store bound to the request's session."""
    return CommissionStore(db)


def page_count(total: int, per_page: int) -> int:
    return (total + per_page - 1) // per_page if total else 0
