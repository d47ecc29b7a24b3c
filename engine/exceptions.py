"""
Exception hierarchy for the rental availability and pricing engine.
"""


class RentalEngineError(Exception):
    """Base class for all errors raised by the rental engine."""


class InvalidRangeError(RentalEngineError, ValueError):
    """Raised when a date range does not end strictly after it starts."""

    def __init__(self, start=None, end=None, message: str | None = None):
        self.start = start
        self.end = end
        if message is None:
            message = "Invalid date range: end date must be after start date"
            if start is not None and end is not None:
                message = f"{message} (got {start} -> {end})"
        super().__init__(message)


class InvalidRateError(RentalEngineError, ValueError):
    """Raised for negative or non-finite monetary inputs."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")


class ProductNotFoundError(RentalEngineError, LookupError):
    """Raised when a product id does not resolve to a product."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InsufficientStockError(RentalEngineError):
    """Raised when fewer units are free than an order line asks for."""

    def __init__(self, product_id: str, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Product {product_id}: requested {requested} unit(s), only {available} available"
        )


class UnitUnavailableError(RentalEngineError):
    """Raised when a reservation could not claim any unit of a product."""

    def __init__(self, product_id: str, blocked_start=None, blocked_end=None):
        self.product_id = product_id
        self.blocked_start = blocked_start
        self.blocked_end = blocked_end
        super().__init__(f"Product {product_id} unavailable for the requested dates")


class UnitAlreadyClaimedError(RentalEngineError):
    """Raised by a store when a unit already holds an overlapping blocking booking."""

    def __init__(self, unit_id: str, conflicting_booking_id: str | None = None):
        self.unit_id = unit_id
        self.conflicting_booking_id = conflicting_booking_id
        detail = f" (conflicts with booking {conflicting_booking_id})" if conflicting_booking_id else ""
        super().__init__(f"Stock unit {unit_id} is already claimed{detail}")


class DuplicateBookingError(RentalEngineError, ValueError):
    """Raised by a store when a claimed booking id is already stored."""

    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} already exists")
