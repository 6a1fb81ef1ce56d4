"""Business logic services."""

from hotel_commissions.services.agreements import find_active_agreement
from hotel_commissions.services.commission import calculate_commission
from hotel_commissions.services.rates import RateBreakdown, compose_rate
from hotel_commissions.services.reporting import (
    export_monthly_records,
    get_monthly_records,
    get_monthly_summary,
    records_to_csv,
)
from hotel_commissions.services.store import CommissionStore

__all__ = [
    "CommissionStore",
    "RateBreakdown",
    "calculate_commission",
    "compose_rate",
    "export_monthly_records",
    "find_active_agreement",
    "get_monthly_records",
    "get_monthly_summary",
    "records_to_csv",
]
