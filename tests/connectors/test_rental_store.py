from datetime import date

import pytest

from connectors.rental_store import InMemoryRentalStore
from engine.exceptions import DuplicateBookingError, UnitAlreadyClaimedError
from models.enums import DEFAULT_BLOCKING_STATUSES, OrderStatus
from models.rental import Booking, PricingTier, Product, StockUnit


def make_booking(booking_id, unit_id, start, end, status=OrderStatus.PAID, **kwargs) -> Booking:
    return Booking(
        booking_id=booking_id,
        product_id="P1",
        stock_unit_id=unit_id,
        start_date=start,
        end_date=end,
        order_status=status,
        **kwargs,
    )


@pytest.fixture
def store() -> InMemoryRentalStore:
    """Provides a seeded InMemoryRentalStore for testing."""
    return InMemoryRentalStore(
        products=[Product(product_id="P2", name="Router"), Product(product_id="P1", name="Dish")],
        stock_units=[
            StockUnit(unit_id="U1", product_id="P1"),
            StockUnit(unit_id="U2", product_id="P1"),
            StockUnit(unit_id="R1", product_id="P2"),
        ],
        bookings=[
            make_booking("B1", "U1", "2025-06-01", "2025-06-05"),
            make_booking("B2", "U2", "2025-06-10", "2025-06-12", status=OrderStatus.CANCELLED),
        ],
        pricing_tiers=[PricingTier(product_id="P1", tier_days=1, multiplier=1)],
    )


# --- Queries --- #


def test_get_product(store):
    assert store.get_product("P1").name == "Dish"
    assert store.get_product("NOPE") is None


def test_list_products_sorted_by_name(store):
    assert [p.product_id for p in store.list_products()] == ["P1", "P2"]


def test_list_stock_units_filters_by_product(store):
    assert [u.unit_id for u in store.list_stock_units("P1")] == ["U1", "U2"]
    assert store.list_stock_units("NOPE") == []


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({}, ["B1", "B2"]),
        ({"statuses": DEFAULT_BLOCKING_STATUSES}, ["B1"]),
        ({"overlapping": (date(2025, 6, 5), date(2025, 6, 9))}, ["B1"]),
        ({"overlapping": (date(2025, 6, 6), date(2025, 6, 9))}, []),
        ({"product_id": "P2"}, []),
    ],
)
def test_list_bookings_filters(store, kwargs, expected):
    assert sorted(b.booking_id for b in store.list_bookings(**kwargs)) == expected


def test_reads_return_copies(store):
    product = store.get_product("P1")
    product.name = "Changed"
    assert store.get_product("P1").name == "Dish"


def test_pricing_tiers_require_product_id(store):
    with pytest.raises(ValueError):
        store.add_pricing_tier(PricingTier(tier_days=3, multiplier=2.5))


def test_replace_pricing_tiers(store):
    store.replace_pricing_tiers("P1", [PricingTier(tier_days=3, multiplier=2.5), PricingTier(tier_days=1, multiplier=1)])
    tiers = store.list_pricing_tiers("P1")
    assert [t.tier_days for t in tiers] == [3, 1]
    assert all(t.product_id == "P1" for t in tiers)


# --- Claims --- #


def test_claim_free_unit(store):
    booking = make_booking("B3", "U1", "2025-06-08", "2025-06-10", buffer_before_days=1, buffer_after_days=1)
    store.claim_unit(booking, DEFAULT_BLOCKING_STATUSES)
    assert "B3" in {b.booking_id for b in store.list_bookings()}


def test_claim_rejects_overlap(store):
    booking = make_booking("B3", "U1", "2025-06-04", "2025-06-07")
    with pytest.raises(UnitAlreadyClaimedError) as excinfo:
        store.claim_unit(booking, DEFAULT_BLOCKING_STATUSES)
    assert excinfo.value.conflicting_booking_id == "B1"
    assert "B3" not in {b.booking_id for b in store.list_bookings()}


def test_claim_respects_recorded_buffers(store):
    booking = make_booking("B3", "U1", "2025-06-07", "2025-06-09", buffer_before_days=2, buffer_after_days=0)
    with pytest.raises(UnitAlreadyClaimedError):
        store.claim_unit(booking, DEFAULT_BLOCKING_STATUSES)


def test_claim_ignores_non_blocking_bookings(store):
    booking = make_booking("B3", "U2", "2025-06-10", "2025-06-12")
    store.claim_unit(booking, DEFAULT_BLOCKING_STATUSES)


def test_claim_requires_unit(store):
    with pytest.raises(ValueError):
        store.claim_unit(make_booking("B3", None, "2025-06-10", "2025-06-12"), DEFAULT_BLOCKING_STATUSES)


def test_claim_never_replaces_existing_booking(store):
    booking = make_booking("B1", "U2", "2025-07-01", "2025-07-03")
    with pytest.raises(DuplicateBookingError):
        store.claim_unit(booking, DEFAULT_BLOCKING_STATUSES)
    (kept,) = [b for b in store.list_bookings() if b.booking_id == "B1"]
    assert kept.stock_unit_id == "U1"
    assert kept.start_date == date(2025, 6, 1)
