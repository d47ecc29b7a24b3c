"""
Centralized Enum definitions for the project.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Payment/order states a booking can be in"""

    PENDING = "pending"
    PAID = "paid"
    MANUAL = "manual"  # Entered by staff, paid outside the checkout
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


# Statuses that hold a stock unit; cancelled/refunded never block
DEFAULT_BLOCKING_STATUSES = frozenset(
    {
        OrderStatus.PENDING,
        OrderStatus.PAID,
        OrderStatus.MANUAL,
        OrderStatus.COMPLETED,
    }
)


class DayStatus(str, Enum):
    """Calendar classification of a single day for a product"""

    FREE = "free"
    BUFFER_ONLY = "buffer_only"  # Occupied only through buffer extensions
    FULLY_BOOKED = "fully_booked"  # Every unit physically rented out
