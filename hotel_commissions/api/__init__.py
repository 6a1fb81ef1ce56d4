"""API router aggregation."""

from fastapi import APIRouter

from hotel_commissions.api.agreements import router as agreements_router
from hotel_commissions.api.bookings import router as bookings_router
from hotel_commissions.api.commissions import router as commissions_router
from hotel_commissions.api.health import router as health_router
from hotel_commissions.api.hotels import router as hotels_router
from hotel_commissions.config import settings

# Main API router (for /api/* endpoints)
api_router = APIRouter(prefix=settings.api_prefix)

api_router.include_router(health_router)
api_router.include_router(hotels_router)
api_router.include_router(bookings_router)
api_router.include_router(agreements_router)
api_router.include_router(commissions_router)

__all__ = ["api_router"]
