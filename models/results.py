"""
Transient value objects returned by the rental engine.
None of these are persisted by the engine; callers store what they need
(chosen unit, rental and deposit totals) on their own order records.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from engine.intervals import coalesce_days

from .enums import DayStatus
from .rental import Booking, PricingTier


@dataclass(frozen=True)
class BufferWindow:
    """Logistics days reserved before and after a core rental span."""

    before: int = 0
    after: int = 0


@dataclass
class AvailabilityResult:
    """Outcome of an availability check for one product and range."""

    available: bool
    blocked_start: date
    blocked_end: date
    available_unit_ids: list[str] = field(default_factory=list)
    conflicted_unit_ids: list[str] = field(default_factory=list)
    conflicting_bookings: list[Booking] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "available": self.available,
            "blocked_start": self.blocked_start.isoformat(),
            "blocked_end": self.blocked_end.isoformat(),
            "available_unit_ids": list(self.available_unit_ids),
            "conflicted_unit_ids": list(self.conflicted_unit_ids),
            "conflicting_booking_ids": [b.booking_id for b in self.conflicting_bookings],
        }


@dataclass(frozen=True)
class PriceQuote:
    """Rental price breakdown in minor currency units."""

    days: int
    effective_daily_rate: int  # Display only
    rental_subtotal: int
    deposit: int
    total: int
    tier_matched: bool
    matched_tier: PricingTier | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": self.days,
            "effective_daily_rate": self.effective_daily_rate,
            "rental_subtotal": self.rental_subtotal,
            "deposit": self.deposit,
            "total": self.total,
            "tier_matched": self.tier_matched,
            "matched_tier_days": self.matched_tier.tier_days if self.matched_tier else None,
        }


@dataclass
class OccupancyDay:
    """Units occupied on one calendar day, split by core span and buffer."""

    day: date
    total_units: int
    occupied_unit_ids: set[str] = field(default_factory=set)
    core_unit_ids: set[str] = field(default_factory=set)

    @property
    def is_blocked(self) -> bool:
        """No unit at all is left on this day."""
        return self.total_units > 0 and len(self.occupied_unit_ids) >= self.total_units

    @property
    def status(self) -> DayStatus:
        if self.is_blocked:
            if len(self.core_unit_ids) >= self.total_units:
                return DayStatus.FULLY_BOOKED
            return DayStatus.BUFFER_ONLY
        if self.occupied_unit_ids and not self.core_unit_ids:
            return DayStatus.BUFFER_ONLY
        return DayStatus.FREE


@dataclass
class ProductAvailability:
    """Per-product stock summary for a date range (admin product picker)."""

    product_id: str
    name: str
    base_daily_rate: int
    deposit_amount: int
    total_stock: int
    available_unit_ids: list[str] = field(default_factory=list)
    unit_availability: dict[str, bool] = field(default_factory=dict)

    @property
    def available_count(self) -> int:
        return len(self.available_unit_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "base_daily_rate": self.base_daily_rate,
            "deposit_amount": self.deposit_amount,
            "total_stock": self.total_stock,
            "available_count": self.available_count,
            "available_unit_ids": list(self.available_unit_ids),
            "units": [
                {"unit_id": unit_id, "available": available}
                for unit_id, available in self.unit_availability.items()
            ],
        }


@dataclass
class OccupancyMap:
    """
    Per-day occupancy for one product, covering every day touched by a
    blocking booking or its buffer. Advisory only: the booking flow decides
    availability per range, never from this map.
    """

    product_id: str
    total_units: int
    days: dict[date, OccupancyDay] = field(default_factory=dict)

    def status_on(self, day: date) -> DayStatus:
        entry = self.days.get(day)
        return entry.status if entry else DayStatus.FREE

    def days_with_status(self, status: DayStatus) -> list[date]:
        return sorted(d for d, entry in self.days.items() if entry.status == status)

    def blocked_days(self) -> list[date]:
        return sorted(d for d, entry in self.days.items() if entry.is_blocked)

    def blocked_ranges(self) -> list[tuple[date, date]]:
        """Contiguous ranges on which no unit is left (calendar gray-out)."""
        return coalesce_days(self.blocked_days())

    def fully_booked_ranges(self) -> list[tuple[date, date]]:
        return coalesce_days(self.days_with_status(DayStatus.FULLY_BOOKED))

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "total_units": self.total_units,
            "days": [
                {
                    "date": d.isoformat(),
                    "status": entry.status.value,
                    "occupied": len(entry.occupied_unit_ids),
                    "core_occupied": len(entry.core_unit_ids),
                }
                for d, entry in sorted(self.days.items())
            ],
            "blocked_ranges": [
                {"start": start.isoformat(), "end": end.isoformat()}
                for start, end in self.blocked_ranges()
            ],
        }
