"""
Rate composition.

A commission rate is built from three parts:
- base rate from the agreement (always applied)
- preferred bonus, only for PREFERRED hotels and only if the agreement sets one
- tier bonus, only for TIERED agreements, picked by the hotel's completed
  booking volume (first matching rule in authored order wins)

Everything here is pure Decimal arithmetic; no I/O, no exceptions.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence

from hotel_commissions.models.agreement import CommissionRateType
from hotel_commissions.models.hotel import HotelStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class RateBreakdown:
    """Result of composing a rate."""

    base_rate: Decimal
    preferred_bonus: Decimal
    tier_bonus: Decimal
    total_rate: Decimal
    matched_tier_rule: Optional[Any] = None

    @property
    def preferred_bonus_applied(self) -> bool:
        return self.preferred_bonus != ZERO

    @property
    def tier_bonus_applied(self) -> bool:
        return self.tier_bonus != ZERO


def resolve_preferred_bonus(agreement, hotel_status: Optional[HotelStatus]) -> Decimal:
    """Preferred bonus for the hotel's status, or zero."""
    if hotel_status == HotelStatus.PREFERRED and agreement.preferred_bonus_rate:
        return Decimal(agreement.preferred_bonus_rate)
    return ZERO


def match_tier_rule(tier_rules: Sequence[Any], completed_booking_count: int):
    """
    First rule whose inclusive [min_bookings, max_bookings] range contains
    the count. Overlapping rules are not validated; order decides.
    """
    for rule in tier_rules:
        if rule.min_bookings > completed_booking_count:
            continue
        if rule.max_bookings is not None and rule.max_bookings < completed_booking_count:
            continue
        return rule
    return None


def compose_rate(
    agreement,
    hotel_status: Optional[HotelStatus],
    completed_booking_count: int,
) -> RateBreakdown:
    """Compose base, preferred and tier rates for an agreement.

    Args:
        agreement: CommissionAgreement (or anything with the same attributes)
            with its tier_rules loaded
        hotel_status: Partner status of the booking's hotel
        completed_booking_count: Completed bookings of the hotel, excluding
            the booking being calculated

    Returns:
        RateBreakdown with every component as a Decimal
    """
    base_rate = Decimal(agreement.base_rate)
    preferred_bonus = resolve_preferred_bonus(agreement, hotel_status)

    tier_bonus = ZERO
    matched_rule = None
    if agreement.rate_type == CommissionRateType.TIERED:
        matched_rule = match_tier_rule(agreement.tier_rules or (), completed_booking_count)
        if matched_rule is not None:
            tier_bonus = Decimal(matched_rule.bonus_rate)

    return RateBreakdown(
        base_rate=base_rate,
        preferred_bonus=preferred_bonus,
        tier_bonus=tier_bonus,
        total_rate=base_rate + preferred_bonus + tier_bonus,
        matched_tier_rule=matched_rule,
    )
