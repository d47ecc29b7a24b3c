"""
Configuration classes for the rental availability and pricing engine.
Holds the defaults that used to be scattered through call sites (buffer
days, blocking statuses, legacy discount) in one type-safe place.
"""

import os
from dataclasses import dataclass, field

from models.enums import DEFAULT_BLOCKING_STATUSES, OrderStatus
from utils import load_project_dotenv

DEFAULT_BUFFER_DAYS = 2


def parse_buffer_days(raw: str | int | None, fallback: int = DEFAULT_BUFFER_DAYS) -> int:
    """
    Interpret a stored buffer-days setting.
    Missing or unparseable values use `fallback`; negatives clamp to zero.
    """
    if raw is None:
        return fallback
    try:
        value = int(str(raw).strip())
    except ValueError:
        return fallback
    return max(0, value)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AvailabilityConfig:
    default_buffer_days: int = DEFAULT_BUFFER_DAYS
    blocking_statuses: frozenset[OrderStatus] = field(
        default_factory=lambda: frozenset(DEFAULT_BLOCKING_STATUSES)
    )
    # Keep the buffers recorded on a booking instead of the product's current ones
    freeze_booking_buffers: bool = False

    def __post_init__(self):
        if self.default_buffer_days < 0:
            raise ValueError("default_buffer_days must be non-negative")
        self.blocking_statuses = frozenset(OrderStatus(s) for s in self.blocking_statuses)


@dataclass
class PricingConfig:
    overflow_multiplier: float = 1.0
    legacy_threshold_days: int = 7
    legacy_discount_percent: float = 10.0


@dataclass
class RentalEngineConfig:
    availability: AvailabilityConfig = field(default_factory=AvailabilityConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)

    @classmethod
    def from_env(cls) -> "RentalEngineConfig":
        """Build a config from RENTAL_* environment variables, after loading the project .env."""
        load_project_dotenv()
        availability = AvailabilityConfig(
            default_buffer_days=parse_buffer_days(os.getenv("RENTAL_BUFFER_DAYS")),
            freeze_booking_buffers=_env_flag("RENTAL_FREEZE_BOOKING_BUFFERS", False),
        )
        pricing = PricingConfig(
            legacy_threshold_days=int(os.getenv("RENTAL_LEGACY_THRESHOLD_DAYS", "7")),
            legacy_discount_percent=float(os.getenv("RENTAL_LEGACY_DISCOUNT_PERCENT", "10")),
        )
        return cls(availability=availability, pricing=pricing)


# Example usage:
# config = RentalEngineConfig.from_env()
# service = RentalAvailabilityService(store, config)
