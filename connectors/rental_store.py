"""
Module: connectors.rental_store

Storage boundary for the rental engine. `RentalStore` is the read interface
the engine queries ("fetch rows matching filters") plus the transactional
unit claim that closes the check-then-act race between an availability check
and persisting the booking. `InMemoryRentalStore` implements it for tests,
demos and single-process deployments.
"""

import logging
import threading
from collections.abc import Collection, Iterable
from datetime import date
from typing import Protocol

from engine.buffers import expand_range
from engine.exceptions import DuplicateBookingError, UnitAlreadyClaimedError
from engine.intervals import overlaps
from models.enums import OrderStatus
from models.rental import Booking, PricingTier, Product, StockUnit
from models.results import BufferWindow

logger = logging.getLogger(__name__)


class RentalStore(Protocol):
    def get_product(self, product_id: str) -> Product | None: ...

    def list_products(self) -> list[Product]: ...

    def list_stock_units(self, product_id: str) -> list[StockUnit]: ...

    def list_bookings(
        self,
        product_id: str | None = None,
        statuses: Collection[OrderStatus] | None = None,
        overlapping: tuple[date, date] | None = None,
    ) -> list[Booking]: ...

    def list_pricing_tiers(self, product_id: str) -> list[PricingTier]: ...

    def claim_unit(self, booking: Booking, blocking_statuses: Collection[OrderStatus]) -> Booking: ...


class InMemoryRentalStore:
    """
    Dict-backed rental store. Reads return copies, so callers always work on
    a snapshot; writes go through a single lock.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        stock_units: Iterable[StockUnit] = (),
        bookings: Iterable[Booking] = (),
        pricing_tiers: Iterable[PricingTier] = (),
    ):
        self._lock = threading.Lock()
        self._products: dict[str, Product] = {}
        self._units: dict[str, StockUnit] = {}
        self._bookings: dict[str, Booking] = {}
        self._tiers: dict[str, list[PricingTier]] = {}
        for product in products:
            self.add_product(product)
        for unit in stock_units:
            self.add_stock_unit(unit)
        for booking in bookings:
            self.add_booking(booking)
        for tier in pricing_tiers:
            self.add_pricing_tier(tier)

    # --- Seeding --- #

    def add_product(self, product: Product) -> None:
        with self._lock:
            self._products[product.product_id] = product

    def add_stock_unit(self, unit: StockUnit) -> None:
        with self._lock:
            self._units[unit.unit_id] = unit

    def add_booking(self, booking: Booking) -> None:
        """Insert or replace a booking without any conflict check."""
        with self._lock:
            self._bookings[booking.booking_id] = booking

    def add_pricing_tier(self, tier: PricingTier) -> None:
        if tier.product_id is None:
            raise ValueError("Pricing tiers stored per product need a product_id")
        with self._lock:
            self._tiers.setdefault(tier.product_id, []).append(tier)

    def replace_pricing_tiers(self, product_id: str, tiers: Iterable[PricingTier]) -> None:
        """Delete-and-insert a product's tier table."""
        rows = [t.model_copy(update={"product_id": product_id}) for t in tiers]
        with self._lock:
            self._tiers[product_id] = rows

    # --- Queries --- #

    def _snapshot(self, table: dict) -> list:
        with self._lock:
            return list(table.values())

    def get_product(self, product_id: str) -> Product | None:
        product = self._products.get(product_id)
        return product.model_copy() if product else None

    def list_products(self) -> list[Product]:
        return [p.model_copy() for p in sorted(self._snapshot(self._products), key=lambda p: p.name)]

    def list_stock_units(self, product_id: str) -> list[StockUnit]:
        return [u.model_copy() for u in self._snapshot(self._units) if u.product_id == product_id]

    def list_bookings(
        self,
        product_id: str | None = None,
        statuses: Collection[OrderStatus] | None = None,
        overlapping: tuple[date, date] | None = None,
    ) -> list[Booking]:
        results = []
        for booking in self._snapshot(self._bookings):
            if product_id is not None and booking.product_id != product_id:
                continue
            if statuses is not None and booking.order_status not in statuses:
                continue
            if overlapping is not None and not overlaps(
                booking.start_date, booking.end_date, overlapping[0], overlapping[1]
            ):
                continue
            results.append(booking.model_copy())
        return results

    def list_pricing_tiers(self, product_id: str) -> list[PricingTier]:
        with self._lock:
            tiers = list(self._tiers.get(product_id, []))
        return [t.model_copy() for t in tiers]

    # --- Transactional claim --- #

    def claim_unit(self, booking: Booking, blocking_statuses: Collection[OrderStatus]) -> Booking:
        """
        Persist `booking` only if its unit has no overlapping blocking booking.

        The booking's recorded buffers widen its range for the check, so a
        claim also fails when it would eat into another booking's turnaround.
        A claim never replaces a stored booking with the same id.
        """
        if booking.stock_unit_id is None:
            raise ValueError(f"Booking {booking.booking_id} has no stock unit to claim")
        window = BufferWindow(booking.buffer_before_days or 0, booking.buffer_after_days or 0)
        blocked_start, blocked_end = expand_range(booking.start_date, booking.end_date, window)

        with self._lock:
            if booking.booking_id in self._bookings:
                raise DuplicateBookingError(booking.booking_id)
            for existing in self._bookings.values():
                if existing.stock_unit_id != booking.stock_unit_id:
                    continue
                if existing.order_status not in blocking_statuses:
                    continue
                if overlaps(existing.start_date, existing.end_date, blocked_start, blocked_end):
                    logger.warning(
                        f"Claim of unit {booking.stock_unit_id} for booking {booking.booking_id} "
                        f"rejected: overlaps booking {existing.booking_id}"
                    )
                    raise UnitAlreadyClaimedError(booking.stock_unit_id, existing.booking_id)
            self._bookings[booking.booking_id] = booking
        logger.info(f"Unit {booking.stock_unit_id} claimed by booking {booking.booking_id}")
        return booking.model_copy()
