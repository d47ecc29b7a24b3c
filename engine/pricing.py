"""
Tiered rental pricing.

A tier's multiplier turns the base daily rate into the total price for the
whole stay (3 days at multiplier 2.7 costs 2.7x the daily rate, not 8.1x).
Stays longer than the longest tier pay that tier's total plus an overflow
rate per extra day. Products without tiers fall back to a flat daily rate
with a long-stay percentage discount.

All amounts are integer minor currency units. Rounding is half-up and is
applied to each product separately, never to an accumulated sum.
"""

import logging
import math
from collections.abc import Iterable, Mapping

from models.rental import PricingTier
from models.results import PriceQuote

from .exceptions import InvalidRangeError, InvalidRateError
from .intervals import DayLike, days_between

logger = logging.getLogger(__name__)

DEFAULT_OVERFLOW_MULTIPLIER = 1.0
DEFAULT_LEGACY_THRESHOLD_DAYS = 7
DEFAULT_LEGACY_DISCOUNT_PERCENT = 10.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def _check_amount(field: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRateError(field, value)
    if not math.isfinite(value) or value < 0:
        raise InvalidRateError(field, value)


def sort_tiers(tiers: Iterable[PricingTier | Mapping]) -> list[PricingTier]:
    """Validate tier rows and order them by ascending tier_days."""
    normalized = [t if isinstance(t, PricingTier) else PricingTier.model_validate(t) for t in tiers]
    return sorted(normalized, key=lambda t: t.tier_days)


def match_tier(sorted_tiers: list[PricingTier], days: int) -> PricingTier | None:
    """Largest tier the stay qualifies for, or None when it is shorter than all tiers."""
    matched = None
    for tier in sorted_tiers:
        if tier.tier_days > days:
            break
        matched = tier
    return matched


def _flat_subtotal(
    days: int,
    base_daily_rate: int,
    legacy_threshold_days: int,
    legacy_discount_percent: float,
) -> int:
    if days > legacy_threshold_days:
        applied_rate = round_half_up(base_daily_rate * (1 - legacy_discount_percent / 100))
    else:
        applied_rate = base_daily_rate
    return days * applied_rate


def calculate_price(
    start_date: DayLike,
    end_date: DayLike,
    base_daily_rate: int,
    deposit_amount: int,
    tiers: Iterable[PricingTier | Mapping] | None = None,
    overflow_multiplier: float = DEFAULT_OVERFLOW_MULTIPLIER,
    legacy_threshold_days: int = DEFAULT_LEGACY_THRESHOLD_DAYS,
    legacy_discount_percent: float = DEFAULT_LEGACY_DISCOUNT_PERCENT,
) -> PriceQuote:
    """
    Price a rental of [start_date, end_date].

    Raises:
        InvalidRangeError: end_date is not after start_date.
        InvalidRateError: a rate, deposit or multiplier is negative or non-finite.
    """
    days = days_between(start_date, end_date)
    if days <= 0:
        raise InvalidRangeError(start_date, end_date)
    _check_amount("base_daily_rate", base_daily_rate)
    _check_amount("deposit_amount", deposit_amount)
    _check_amount("overflow_multiplier", overflow_multiplier)

    sorted_tiers = sort_tiers(tiers or [])
    matched = match_tier(sorted_tiers, days) if sorted_tiers else None

    if not sorted_tiers:
        rental_subtotal = _flat_subtotal(
            days, base_daily_rate, legacy_threshold_days, legacy_discount_percent
        )
    elif matched is None:
        # Stay is shorter than the smallest tier: base rate, no discount
        logger.warning(
            f"No pricing tier covers {days} day(s) (smallest tier is "
            f"{sorted_tiers[0].tier_days}); charging the base daily rate"
        )
        rental_subtotal = days * base_daily_rate
    else:
        longest = sorted_tiers[-1]
        if days <= longest.tier_days:
            rental_subtotal = round_half_up(base_daily_rate * matched.multiplier)
        else:
            extra_days = days - longest.tier_days
            rental_subtotal = round_half_up(base_daily_rate * longest.multiplier) + round_half_up(
                base_daily_rate * overflow_multiplier * extra_days
            )

    return PriceQuote(
        days=days,
        effective_daily_rate=round_half_up(rental_subtotal / days),
        rental_subtotal=rental_subtotal,
        deposit=deposit_amount,
        total=rental_subtotal + deposit_amount,
        tier_matched=matched is not None,
        matched_tier=matched,
    )
