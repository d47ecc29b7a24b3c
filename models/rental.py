"""
Data models for the rental catalog: products, their physical stock units,
bookings against those units, and pricing tiers.
"""

from collections.abc import Collection
from datetime import date

from pydantic import BaseModel, Field, field_validator, model_validator

from engine.exceptions import InvalidRangeError
from engine.intervals import to_day

from .enums import OrderStatus


class Product(BaseModel):
    """A rentable product. Monetary amounts are in minor currency units (cents)."""

    product_id: str
    name: str = ""
    base_daily_rate: int = Field(default=0, ge=0)
    deposit_amount: int = Field(default=0, ge=0)
    # None means "use the caller's default buffer"
    buffer_before_days: int | None = Field(default=None, ge=0)
    buffer_after_days: int | None = Field(default=None, ge=0)
    overflow_multiplier: float | None = Field(default=None, ge=0)


class StockUnit(BaseModel):
    """One physical, interchangeable instance of a product."""

    unit_id: str
    product_id: str
    serial_number: str | None = None
    # Maintenance blackout; an unset bound is open-ended in that direction
    unavailable_from: date | None = None
    unavailable_to: date | None = None

    @field_validator("unavailable_from", "unavailable_to", mode="before")
    @classmethod
    def _normalize_day(cls, value):
        if value is None or value == "":
            return None
        return to_day(value)


class Booking(BaseModel):
    """A reservation of a stock unit for an inclusive day range."""

    booking_id: str
    product_id: str
    stock_unit_id: str | None = None  # Unassigned until a unit is chosen
    start_date: date
    end_date: date
    order_status: OrderStatus = OrderStatus.PENDING
    # Buffers in effect when the booking was made; only read when frozen buffers are enabled
    buffer_before_days: int | None = Field(default=None, ge=0)
    buffer_after_days: int | None = Field(default=None, ge=0)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_day(cls, value):
        return to_day(value)

    @model_validator(mode="after")
    def _check_range(self) -> "Booking":
        if self.end_date <= self.start_date:
            raise InvalidRangeError(self.start_date, self.end_date)
        return self

    def is_blocking(self, blocking_statuses: Collection[OrderStatus]) -> bool:
        """True when this booking's status holds its unit."""
        return self.order_status in blocking_statuses


class PricingTier(BaseModel):
    """
    Pricing bracket keyed by a minimum day count.

    `multiplier` times the base daily rate is the total price for the whole
    stay, not a per-day rate.
    """

    tier_days: int = Field(ge=1)
    multiplier: float = Field(ge=0)
    label: str | None = None
    product_id: str | None = None

    @property
    def display_label(self) -> str:
        return self.label or f"{self.tier_days} days"
