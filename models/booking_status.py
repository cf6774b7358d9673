"""
Booking status state machine.

Statuses are an explicit enumeration; the default "advance" path is a
transition table, so an undefined next step is a lookup returning None
rather than a string comparison scattered across callers.
"""

from enum import Enum

from utils.errors import ValidationError
from utils.messages import get_message


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    ACTIVE = 'active'
    COMPLETED = 'completed'
    OVERTIME = 'overtime'
    CANCELLED = 'cancelled'

    def __str__(self):
        return self.value


class CameraStatus(str, Enum):
    """Resource catalog status."""

    ACTIVE = 'active'
    MAINTENANCE = 'maintenance'
    RETIRED = 'retired'

    def __str__(self):
        return self.value


# Default forward path; statuses missing here are terminal for advance()
NEXT_STATUS = {
    BookingStatus.PENDING: BookingStatus.CONFIRMED,
    BookingStatus.CONFIRMED: BookingStatus.ACTIVE,
    BookingStatus.ACTIVE: BookingStatus.COMPLETED,
}

INITIAL_STATUS = BookingStatus.PENDING

# Only these hold a unit in the cached availability counter
CAPACITY_HOLDING_STATUSES = frozenset({BookingStatus.CONFIRMED})

STATUS_LABELS = {
    BookingStatus.PENDING: 'Pending',
    BookingStatus.CONFIRMED: 'Confirmed',
    BookingStatus.ACTIVE: 'Renting',
    BookingStatus.COMPLETED: 'Completed',
    BookingStatus.OVERTIME: 'Overdue',
    BookingStatus.CANCELLED: 'Cancelled',
}


def coerce_status(value) -> BookingStatus:
    """
    Read a status from user input.

    Raises:
        ValidationError: If the value is not one of the six statuses
    """
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(get_message('invalid_status', status=value), status=value) from None


def next_status(status) -> BookingStatus | None:
    """Next status on the default path, or None when advance is not defined."""
    return NEXT_STATUS.get(coerce_status(status))


def can_advance(status) -> bool:
    return next_status(status) is not None
