"""
Rental availability and pricing facade.

Composes interval math, buffer resolution, maintenance filtering, conflict
resolution and pricing into the operations used by the storefront calendar,
the checkout submission path and the admin manual-order form. Each call reads
one fresh snapshot from the store; nothing is cached between calls.
"""

import logging
from collections.abc import Iterable, Mapping

from config.config import RentalEngineConfig
from connectors.rental_store import RentalStore
from models.enums import OrderStatus
from models.rental import Booking, PricingTier, Product
from models.results import (
    AvailabilityResult,
    BufferWindow,
    OccupancyMap,
    PriceQuote,
    ProductAvailability,
)

from . import pricing
from .buffers import expand_range, resolve_buffers
from .conflicts import resolve_conflicts
from .exceptions import (
    InsufficientStockError,
    InvalidRangeError,
    ProductNotFoundError,
    UnitAlreadyClaimedError,
    UnitUnavailableError,
)
from .intervals import DayLike, days_between, to_day
from .maintenance import filter_serviceable_units
from .occupancy import build_occupancy_map

logger = logging.getLogger(__name__)


class RentalAvailabilityService:
    """Entry point for availability checks, calendars, quotes and reservations."""

    def __init__(self, store: RentalStore, config: RentalEngineConfig | None = None):
        self.store = store
        self.config = config or RentalEngineConfig()

    def _default_buffer(self, default_buffer_days: int | None) -> int:
        if default_buffer_days is None:
            return self.config.availability.default_buffer_days
        return default_buffer_days

    def check_availability(
        self,
        product_id: str,
        start_date: DayLike,
        end_date: DayLike,
        default_buffer_days: int | None = None,
    ) -> AvailabilityResult:
        """
        Find the stock units free for [start_date, end_date] plus the product's
        buffers. Storage errors propagate unchanged.

        Raises:
            InvalidRangeError: end_date is not after start_date.
        """
        start = to_day(start_date)
        end = to_day(end_date)
        if end <= start:
            raise InvalidRangeError(start, end)

        settings = self.config.availability
        product = self.store.get_product(product_id)
        if product is None:
            logger.debug(f"Product {product_id} not found; using default buffers")
        buffers = resolve_buffers(product, self._default_buffer(default_buffer_days))
        blocked_start, blocked_end = expand_range(start, end, buffers)

        units = filter_serviceable_units(self.store.list_stock_units(product_id), start, end)
        if not units:
            logger.info(f"Product {product_id}: no serviceable units for {start} -> {end}")
            return AvailabilityResult(
                available=False, blocked_start=blocked_start, blocked_end=blocked_end
            )

        # Frozen buffers may reach further than the product's; fetch by core range then
        query_range = None if settings.freeze_booking_buffers else (blocked_start, blocked_end)
        bookings = self.store.list_bookings(
            product_id=product_id,
            statuses=settings.blocking_statuses,
            overlapping=query_range,
        )
        resolution = resolve_conflicts(
            units,
            bookings,
            start,
            end,
            buffers,
            settings.blocking_statuses,
            freeze_booking_buffers=settings.freeze_booking_buffers,
        )
        logger.info(
            f"Product {product_id} {start} -> {end} (blocked {blocked_start} -> {blocked_end}): "
            f"{len(resolution.available_unit_ids)} free, {len(resolution.conflicted_unit_ids)} conflicted"
        )
        return AvailabilityResult(
            available=resolution.available,
            blocked_start=blocked_start,
            blocked_end=blocked_end,
            available_unit_ids=resolution.available_unit_ids,
            conflicted_unit_ids=resolution.conflicted_unit_ids,
            conflicting_bookings=resolution.conflicting_bookings,
        )

    def calculate_price(
        self,
        start_date: DayLike,
        end_date: DayLike,
        base_daily_rate: int,
        deposit_amount: int,
        tiers: Iterable[PricingTier | Mapping] | None = None,
        overflow_multiplier: float | None = None,
        legacy_threshold_days: int | None = None,
        legacy_discount_percent: float | None = None,
    ) -> PriceQuote:
        """Price a stay; unset policy arguments come from the pricing config."""
        settings = self.config.pricing
        return pricing.calculate_price(
            start_date,
            end_date,
            base_daily_rate,
            deposit_amount,
            tiers=tiers,
            overflow_multiplier=(
                settings.overflow_multiplier if overflow_multiplier is None else overflow_multiplier
            ),
            legacy_threshold_days=(
                settings.legacy_threshold_days if legacy_threshold_days is None else legacy_threshold_days
            ),
            legacy_discount_percent=(
                settings.legacy_discount_percent
                if legacy_discount_percent is None
                else legacy_discount_percent
            ),
        )

    def quote(self, product_id: str, start_date: DayLike, end_date: DayLike) -> PriceQuote:
        """Price a stay from the product's stored rate, deposit and tier table."""
        product = self._require_product(product_id)
        return self.calculate_price(
            start_date,
            end_date,
            product.base_daily_rate,
            product.deposit_amount,
            tiers=self.store.list_pricing_tiers(product_id),
            overflow_multiplier=product.overflow_multiplier,
        )

    def occupancy_map(self, product_id: str, default_buffer_days: int | None = None) -> OccupancyMap:
        """Per-day occupancy of every unit of a product, for calendar rendering."""
        settings = self.config.availability
        product = self.store.get_product(product_id)
        buffers = resolve_buffers(product, self._default_buffer(default_buffer_days))
        unit_ids = {u.unit_id for u in self.store.list_stock_units(product_id)}
        bookings = self.store.list_bookings(product_id=product_id, statuses=settings.blocking_statuses)
        return build_occupancy_map(
            product_id,
            bookings,
            total_units=len(unit_ids),
            buffers=buffers,
            blocking_statuses=settings.blocking_statuses,
            freeze_booking_buffers=settings.freeze_booking_buffers,
            unit_ids=unit_ids,
        )

    def allocate_units(
        self,
        product_id: str,
        start_date: DayLike,
        end_date: DayLike,
        quantity: int,
        default_buffer_days: int | None = None,
    ) -> list[str]:
        """
        Pick `quantity` free units for one order line, first free units first.

        Raises:
            ValueError: quantity is below one.
            InsufficientStockError: fewer units are free than requested.
        """
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        result = self.check_availability(product_id, start_date, end_date, default_buffer_days)
        if len(result.available_unit_ids) < quantity:
            raise InsufficientStockError(product_id, quantity, len(result.available_unit_ids))
        return result.available_unit_ids[:quantity]

    def summarize_products(
        self,
        start_date: DayLike | None = None,
        end_date: DayLike | None = None,
        default_buffer_days: int | None = None,
    ) -> list[ProductAvailability]:
        """
        Stock summary for every product. Without a date range all units count
        as available.
        """
        summaries = []
        for product in self.store.list_products():
            unit_ids = [u.unit_id for u in self.store.list_stock_units(product.product_id)]
            if start_date is not None and end_date is not None:
                result = self.check_availability(
                    product.product_id, start_date, end_date, default_buffer_days
                )
                free = set(result.available_unit_ids)
            else:
                free = set(unit_ids)
            summaries.append(
                ProductAvailability(
                    product_id=product.product_id,
                    name=product.name,
                    base_daily_rate=product.base_daily_rate,
                    deposit_amount=product.deposit_amount,
                    total_stock=len(unit_ids),
                    available_unit_ids=[uid for uid in unit_ids if uid in free],
                    unit_availability={uid: uid in free for uid in unit_ids},
                )
            )
        return summaries

    def reserve(
        self,
        product_id: str,
        start_date: DayLike,
        end_date: DayLike,
        booking_id: str,
        order_status: OrderStatus = OrderStatus.PENDING,
        default_buffer_days: int | None = None,
    ) -> Booking:
        """
        Re-check availability and claim a unit through the store.

        If a concurrent caller claims the chosen unit first, the next free unit
        is tried.

        Raises:
            UnitUnavailableError: no unit could be claimed.
            DuplicateBookingError: booking_id is already stored.
        """
        result = self.check_availability(product_id, start_date, end_date, default_buffer_days)
        # Record exactly the buffers the check just applied
        buffers = BufferWindow(
            before=days_between(result.blocked_start, start_date),
            after=days_between(end_date, result.blocked_end),
        )

        for unit_id in result.available_unit_ids:
            booking = Booking(
                booking_id=booking_id,
                product_id=product_id,
                stock_unit_id=unit_id,
                start_date=start_date,
                end_date=end_date,
                order_status=order_status,
                buffer_before_days=buffers.before,
                buffer_after_days=buffers.after,
            )
            try:
                return self.store.claim_unit(booking, self.config.availability.blocking_statuses)
            except UnitAlreadyClaimedError as e:
                logger.warning(f"Lost claim race for unit {unit_id}: {e}; trying next unit")

        raise UnitUnavailableError(product_id, result.blocked_start, result.blocked_end)

    def _require_product(self, product_id: str) -> Product:
        product = self.store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product
