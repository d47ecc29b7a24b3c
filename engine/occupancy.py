"""
Occupancy map builder for calendar rendering.

Works over every blocking booking of a product at once and answers, per day,
"is anything left at all". This is deliberately not the availability check:
a multi-day request can fail even when no single day is blocked, because no
one unit is free for the whole span.
"""

import logging
from collections.abc import Collection, Iterable

from models.enums import OrderStatus
from models.rental import Booking
from models.results import BufferWindow, OccupancyDay, OccupancyMap

from .buffers import booking_buffers, expand_range
from .intervals import iter_days

logger = logging.getLogger(__name__)


def build_occupancy_map(
    product_id: str,
    bookings: Iterable[Booking],
    total_units: int,
    buffers: BufferWindow,
    blocking_statuses: Collection[OrderStatus],
    freeze_booking_buffers: bool = False,
    unit_ids: Collection[str] | None = None,
) -> OccupancyMap:
    """
    Count distinct occupied units per day, separating the core rental span
    from its buffer extension.

    When `unit_ids` is given, bookings on units outside it (retired or moved
    to another product) are ignored. A product without units yields an empty map.
    """
    occupancy = OccupancyMap(product_id=product_id, total_units=total_units)
    if total_units <= 0:
        return occupancy

    def entry_for(day):
        entry = occupancy.days.get(day)
        if entry is None:
            entry = OccupancyDay(day=day, total_units=total_units)
            occupancy.days[day] = entry
        return entry

    counted = 0
    for booking in bookings:
        if not booking.is_blocking(blocking_statuses) or booking.stock_unit_id is None:
            continue
        if unit_ids is not None and booking.stock_unit_id not in unit_ids:
            continue
        counted += 1
        unit_id = booking.stock_unit_id
        window = booking_buffers(booking, buffers, freeze=freeze_booking_buffers)
        extended_start, extended_end = expand_range(booking.start_date, booking.end_date, window)

        for day in iter_days(extended_start, extended_end):
            entry = entry_for(day)
            entry.occupied_unit_ids.add(unit_id)
            if booking.start_date <= day <= booking.end_date:
                entry.core_unit_ids.add(unit_id)

    logger.debug(
        f"Occupancy for {product_id}: {counted} blocking booking(s), "
        f"{len(occupancy.days)} day(s) touched, {len(occupancy.blocked_days())} blocked"
    )
    return occupancy
