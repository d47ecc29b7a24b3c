"""
Booking conflict resolution: which stock units are already held by a
blocking booking that overlaps a candidate's blocked range.
"""

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from datetime import date

from models.enums import OrderStatus
from models.rental import Booking, StockUnit
from models.results import BufferWindow

from .buffers import booking_buffers, expand_range
from .intervals import overlaps

logger = logging.getLogger(__name__)


@dataclass
class ConflictResolution:
    """Split of a product's serviceable units into free and conflicted."""

    available_unit_ids: list[str] = field(default_factory=list)
    conflicted_unit_ids: list[str] = field(default_factory=list)
    conflicting_bookings: list[Booking] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return len(self.available_unit_ids) > 0


def booking_overlaps(booking: Booking, blocked_start: date, blocked_end: date) -> bool:
    """
    Inclusive overlap of a booking's own core range with a blocked range.
    The buffer is already folded into the blocked range.
    """
    return overlaps(booking.start_date, booking.end_date, blocked_start, blocked_end)


def resolve_conflicts(
    units: Iterable[StockUnit],
    bookings: Iterable[Booking],
    candidate_start: date,
    candidate_end: date,
    buffers: BufferWindow,
    blocking_statuses: Collection[OrderStatus],
    freeze_booking_buffers: bool = False,
) -> ConflictResolution:
    """
    Mark every unit held by an overlapping blocking booking as conflicted and
    return the remaining units as available, in snapshot order.

    `buffers` are the product's current buffers. With `freeze_booking_buffers`
    a booking that recorded its own buffers is tested with those instead.
    """
    unit_ids = [unit.unit_id for unit in units]
    if not unit_ids:
        return ConflictResolution()

    blocked_start, blocked_end = expand_range(candidate_start, candidate_end, buffers)
    conflicted: set[str] = set()
    conflicting_bookings: list[Booking] = []

    for booking in bookings:
        if not booking.is_blocking(blocking_statuses):
            continue
        if freeze_booking_buffers:
            window = booking_buffers(booking, buffers, freeze=True)
            start, end = expand_range(candidate_start, candidate_end, window)
        else:
            start, end = blocked_start, blocked_end
        if not booking_overlaps(booking, start, end):
            continue

        conflicting_bookings.append(booking)
        if booking.stock_unit_id is None:
            logger.debug(f"Booking {booking.booking_id} overlaps but has no unit assigned")
            continue
        conflicted.add(booking.stock_unit_id)

    return ConflictResolution(
        available_unit_ids=[uid for uid in unit_ids if uid not in conflicted],
        conflicted_unit_ids=[uid for uid in unit_ids if uid in conflicted],
        conflicting_bookings=conflicting_bookings,
    )
