"""
Booking data access functions.

This module re-exports the booking functions from the split modules:
- booking_status.py: Status enumeration and transition table
- booking_crud.py: Create, read, delete operations
- booking_state.py: Status transitions and history
- availability.py: Live availability calculation
- capacity.py: Cached availability reconciliation
- calendar.py: Calendar projection
- booking_stats.py: Dashboard statistics
"""

# Status machine
from .booking_status import (
    BookingStatus,
    CameraStatus,
    NEXT_STATUS,
    STATUS_LABELS,
    coerce_status,
    next_status,
    can_advance,
)

# CRUD operations
from .booking_crud import (
    calculate_total_days,
    calculate_total_amount,
    get_all_bookings,
    get_booking_by_id,
    require_booking,
    validate_booking_request,
    create_booking,
    check_overbooking,
    delete_booking,
    serialize_booking,
    serialize_status_log,
)

# State transitions
from .booking_state import (
    set_booking_status,
    advance_booking,
    cancel_booking,
    mark_overtime,
    get_status_history,
    status_entered_at,
)

# Availability
from .availability import (
    available,
    counts_against_capacity,
    availability_by_camera,
    is_offerable,
    is_overbooked,
)

# Reconciliation
from .capacity import (
    compute_cached_available,
    reconcile_camera,
    reconcile_all,
)

# Projection and statistics
from .calendar import events_for_day, month_grid, serialize_event
from .booking_stats import get_booking_stats

__all__ = [
    'BookingStatus', 'CameraStatus', 'NEXT_STATUS', 'STATUS_LABELS',
    'coerce_status', 'next_status', 'can_advance',
    'calculate_total_days', 'calculate_total_amount',
    'get_all_bookings', 'get_booking_by_id', 'require_booking',
    'validate_booking_request', 'create_booking', 'check_overbooking',
    'delete_booking', 'serialize_booking', 'serialize_status_log',
    'set_booking_status', 'advance_booking', 'cancel_booking', 'mark_overtime',
    'get_status_history', 'status_entered_at',
    'available', 'counts_against_capacity', 'availability_by_camera',
    'is_offerable', 'is_overbooked',
    'compute_cached_available', 'reconcile_camera', 'reconcile_all',
    'events_for_day', 'month_grid', 'serialize_event',
    'get_booking_stats',
]
