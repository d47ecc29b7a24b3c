from datetime import date

import pytest

from engine.maintenance import filter_serviceable_units, is_under_maintenance
from models.rental import StockUnit

START = date(2025, 6, 10)
END = date(2025, 6, 15)


def make_unit(unit_id="U1", unavailable_from=None, unavailable_to=None) -> StockUnit:
    return StockUnit(
        unit_id=unit_id,
        product_id="P1",
        unavailable_from=unavailable_from,
        unavailable_to=unavailable_to,
    )


@pytest.mark.parametrize(
    "range_start, range_end",
    [
        (date(2000, 1, 1), date(2000, 1, 2)),
        (START, END),
        (date(2099, 12, 1), date(2099, 12, 31)),
    ],
)
def test_unit_without_blackout_is_never_excluded(range_start, range_end):
    assert not is_under_maintenance(make_unit(), range_start, range_end)


@pytest.mark.parametrize(
    "unavailable_from, unavailable_to, excluded",
    [
        ("2025-06-01", "2025-06-09", False),  # ends the day before
        ("2025-06-01", "2025-06-10", True),  # touches first day
        ("2025-06-12", "2025-06-13", True),  # inside
        ("2025-06-15", "2025-06-20", True),  # touches last day
        ("2025-06-16", "2025-06-20", False),  # starts the day after
    ],
)
def test_bounded_blackout(unavailable_from, unavailable_to, excluded):
    unit = make_unit(unavailable_from=unavailable_from, unavailable_to=unavailable_to)
    assert is_under_maintenance(unit, START, END) is excluded


@pytest.mark.parametrize(
    "unavailable_from, excluded",
    [("2025-06-16", False), ("2025-06-15", True), ("2025-01-01", True)],
)
def test_open_ended_blackout_from(unavailable_from, excluded):
    unit = make_unit(unavailable_from=unavailable_from)
    assert is_under_maintenance(unit, START, END) is excluded


@pytest.mark.parametrize(
    "unavailable_to, excluded",
    [("2025-06-09", False), ("2025-06-10", True), ("2030-01-01", True)],
)
def test_open_ended_blackout_to(unavailable_to, excluded):
    unit = make_unit(unavailable_to=unavailable_to)
    assert is_under_maintenance(unit, START, END) is excluded


def test_filter_serviceable_units_keeps_order():
    units = [
        make_unit("U1"),
        make_unit("U2", unavailable_from="2025-06-01", unavailable_to="2025-06-30"),
        make_unit("U3", unavailable_to="2025-06-01"),
    ]
    serviceable = filter_serviceable_units(units, START, END)
    assert [u.unit_id for u in serviceable] == ["U1", "U3"]
