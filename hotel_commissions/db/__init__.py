"""Database engine and session helpers."""

from hotel_commissions.db.session import (
    AsyncSessionLocal,
    engine,
    get_db,
)

__all__ = [
    "AsyncSessionLocal",
    "engine",
    "get_db",
]
