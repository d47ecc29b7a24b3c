"""
Buffer resolution: widens a core rental span by the logistics days a unit
needs for shipping and inspection before and after it.
"""

import logging
from datetime import date

from models.rental import Booking, Product
from models.results import BufferWindow

from .intervals import DayLike, shift_days

logger = logging.getLogger(__name__)


def resolve_buffers(product: Product | None, default_buffer_days: int) -> BufferWindow:
    """
    Return the product's buffer window, falling back to `default_buffer_days`
    for each side the product leaves unset.
    """
    if product is None:
        return BufferWindow(default_buffer_days, default_buffer_days)
    before = product.buffer_before_days
    after = product.buffer_after_days
    if before is None or after is None:
        logger.debug(
            f"Product {product.product_id} has no buffer override on "
            f"{'both sides' if before is None and after is None else 'one side'}; "
            f"using default of {default_buffer_days} day(s)"
        )
    return BufferWindow(
        before=default_buffer_days if before is None else before,
        after=default_buffer_days if after is None else after,
    )


def booking_buffers(booking: Booking, product_buffers: BufferWindow, freeze: bool = False) -> BufferWindow:
    """
    Buffers that apply to an existing booking.

    By default every booking follows the product's current settings. With
    `freeze` set, a booking that recorded its own buffers keeps them.
    """
    if not freeze:
        return product_buffers
    return BufferWindow(
        before=product_buffers.before if booking.buffer_before_days is None else booking.buffer_before_days,
        after=product_buffers.after if booking.buffer_after_days is None else booking.buffer_after_days,
    )


def expand_range(start: DayLike, end: DayLike, buffers: BufferWindow) -> tuple[date, date]:
    """Return (blocked_start, blocked_end) for a core span."""
    return shift_days(start, -buffers.before), shift_days(end, buffers.after)
