"""
Maintenance blackout filtering for stock units.

A blackout is a hard exclusion that is independent of bookings and buffers,
so it is always tested against the candidate range itself.
"""

import logging
from collections.abc import Iterable
from datetime import date

from models.rental import StockUnit

logger = logging.getLogger(__name__)


def is_under_maintenance(unit: StockUnit, range_start: date, range_end: date) -> bool:
    """True when the unit's blackout window touches [range_start, range_end]."""
    unavailable_from = unit.unavailable_from
    unavailable_to = unit.unavailable_to

    if unavailable_from is None and unavailable_to is None:
        return False
    if unavailable_from is not None and unavailable_to is not None:
        return range_start <= unavailable_to and range_end >= unavailable_from
    if unavailable_from is not None:
        # Out of service from this day onward
        return range_end >= unavailable_from
    # Out of service up to and including this day
    return range_start <= unavailable_to


def filter_serviceable_units(
    units: Iterable[StockUnit], range_start: date, range_end: date
) -> list[StockUnit]:
    """Drop units whose blackout overlaps the candidate range, keeping order."""
    serviceable = []
    for unit in units:
        if is_under_maintenance(unit, range_start, range_end):
            logger.debug(
                f"Unit {unit.unit_id} excluded by maintenance "
                f"({unit.unavailable_from} -> {unit.unavailable_to})"
            )
            continue
        serviceable.append(unit)
    return serviceable
