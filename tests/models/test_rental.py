from datetime import date

import pytest
from pydantic import ValidationError

from models.enums import DEFAULT_BLOCKING_STATUSES, OrderStatus
from models.rental import Booking, PricingTier, Product, StockUnit
from models.results import AvailabilityResult, OccupancyDay, PriceQuote


def test_product_optional_fields_default_to_none():
    product = Product(product_id="P1", base_daily_rate=1500, deposit_amount=100000)
    assert product.buffer_before_days is None
    assert product.buffer_after_days is None
    assert product.overflow_multiplier is None


@pytest.mark.parametrize(
    "field, value",
    [("base_daily_rate", -1), ("deposit_amount", -100), ("buffer_before_days", -2)],
)
def test_product_rejects_negative_values(field, value):
    with pytest.raises(ValidationError):
        Product(product_id="P1", **{field: value})


def test_stock_unit_parses_blackout_bounds():
    unit = StockUnit(unit_id="U1", product_id="P1", unavailable_from="2025-06-01T00:00:00Z", unavailable_to="")
    assert unit.unavailable_from == date(2025, 6, 1)
    assert unit.unavailable_to is None


def test_booking_parses_dates_and_status():
    booking = Booking(
        booking_id="B1",
        product_id="P1",
        start_date="2025-06-01",
        end_date="2025-06-05",
        order_status="paid",
    )
    assert booking.start_date == date(2025, 6, 1)
    assert booking.order_status is OrderStatus.PAID
    assert booking.stock_unit_id is None
    assert booking.is_blocking(DEFAULT_BLOCKING_STATUSES)


@pytest.mark.parametrize("end", ["2025-06-01", "2025-05-20"])
def test_booking_rejects_empty_or_negative_range(end):
    with pytest.raises(ValidationError, match="end date must be after start date"):
        Booking(booking_id="B1", product_id="P1", start_date="2025-06-01", end_date=end)


def test_booking_rejects_unknown_status():
    with pytest.raises(ValidationError):
        Booking(
            booking_id="B1",
            product_id="P1",
            start_date="2025-06-01",
            end_date="2025-06-02",
            order_status="lost",
        )


@pytest.mark.parametrize("status", [OrderStatus.CANCELLED, OrderStatus.REFUNDED])
def test_cancelled_and_refunded_never_block(status):
    booking = Booking(
        booking_id="B1", product_id="P1", start_date="2025-06-01", end_date="2025-06-02", order_status=status
    )
    assert not booking.is_blocking(DEFAULT_BLOCKING_STATUSES)


def test_pricing_tier_validation_and_label():
    assert PricingTier(tier_days=3, multiplier=2.7).display_label == "3 days"
    assert PricingTier(tier_days=7, multiplier=5.5, label="Tydzień").display_label == "Tydzień"
    with pytest.raises(ValidationError):
        PricingTier(tier_days=0, multiplier=1)
    with pytest.raises(ValidationError):
        PricingTier(tier_days=1, multiplier=-1)


def test_result_serialization():
    result = AvailabilityResult(
        available=True,
        blocked_start=date(2025, 6, 6),
        blocked_end=date(2025, 6, 11),
        available_unit_ids=["U1"],
    )
    assert result.to_dict() == {
        "available": True,
        "blocked_start": "2025-06-06",
        "blocked_end": "2025-06-11",
        "available_unit_ids": ["U1"],
        "conflicted_unit_ids": [],
        "conflicting_booking_ids": [],
    }
    quote = PriceQuote(
        days=3, effective_daily_rate=900, rental_subtotal=2700, deposit=0, total=2700, tier_matched=True
    )
    assert quote.to_dict()["matched_tier_days"] is None


def test_occupancy_day_status_rules():
    day = OccupancyDay(day=date(2025, 3, 9), total_units=2, occupied_unit_ids={"A"})
    assert not day.is_blocked
    assert day.status.value == "buffer_only"
    day.core_unit_ids.add("A")
    assert day.status.value == "free"
