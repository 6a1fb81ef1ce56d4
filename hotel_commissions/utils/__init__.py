"""Utility functions."""

from hotel_commissions.utils.timeutils import as_utc, isoformat_utc, utcnow

__all__ = [
    "as_utc",
    "isoformat_utc",
    "utcnow",
]
