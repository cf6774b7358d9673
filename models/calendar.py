"""
Calendar projection of bookings.

Derives per-day delivery, return and occupancy events from the booking
set and its status logs. Nothing is stored: every call recomputes from the
snapshot it is given.
"""

import calendar as _calendar
from datetime import date, timedelta

from utils.datetime_helpers import to_day, parse_hour, at_hour
from .booking_status import BookingStatus
from .booking_state import status_entered_at

EVENT_DELIVERY = 'delivery'
EVENT_RETURN = 'return'
EVENT_OCCUPANCY = 'occupancy'

DEFAULT_DELIVERY_HOUR = 9
DEFAULT_RETURN_HOUR = 18


def _event(booking: dict, event_type: str, time=None, projected: bool = False) -> dict:
    suffix = f'{event_type}-projected' if projected else event_type
    return {
        'id': f'{booking["id"]}-{suffix}',
        'booking_id': booking['id'],
        'type': event_type,
        'time': time,
        'all_day': time is None,
        'projected': projected,
        'customer_name': booking['customer_name'],
        'camera_name': booking['camera_name'],
        'status': booking['status'],
    }


def _sort_key(event: dict):
    # All-day first, then by time, untimed events after timed ones
    if event['type'] == EVENT_OCCUPANCY:
        return (0, 0, '')
    if event['time'] is None:
        return (2, 0, event['id'])
    return (1, event['time'].hour * 3600 + event['time'].minute * 60 + event['time'].second,
            event['id'])


def events_for_day(
    day,
    bookings: list,
    tz=None,
    delivery_hour: int = DEFAULT_DELIVERY_HOUR,
    return_hour: int = DEFAULT_RETURN_HOUR
) -> list:
    """
    Events implied by ``bookings`` on ``day``.

    For each booking overlapping the day:
    - delivery: the time it entered 'active' if that happened on this day,
      else a projected delivery on its start date (start_time hour, or
      ``delivery_hour``)
    - return: the time it entered 'completed' if that happened on this day,
      else a projected return on its end date (end_time hour, or
      ``return_hour``)
    - occupancy: one all-day event strictly between start and end dates

    Args:
        day: Calendar day (date, datetime or 'YYYY-MM-DD')
        bookings: Booking dicts with 'status_change_logs'
        tz: Timezone log timestamps are read in
        delivery_hour: Default hour for projected deliveries
        return_hour: Default hour for projected returns

    Returns:
        list: Event dicts, occupancy first then ascending by time
    """
    day = to_day(day)
    events = []

    for booking in bookings:
        start = to_day(booking['start_date'])
        end = to_day(booking['end_date'])
        if start > day or end < day:
            continue

        delivered_at = status_entered_at(booking, BookingStatus.ACTIVE, tz)
        if delivered_at is not None and delivered_at.date() == day:
            events.append(_event(booking, EVENT_DELIVERY, delivered_at))
        elif day == start:
            hour = parse_hour(booking.get('start_time'), delivery_hour)
            events.append(_event(booking, EVENT_DELIVERY, at_hour(day, hour, tz), projected=True))

        returned_at = status_entered_at(booking, BookingStatus.COMPLETED, tz)
        if returned_at is not None and returned_at.date() == day:
            events.append(_event(booking, EVENT_RETURN, returned_at))
        elif day == end:
            hour = parse_hour(booking.get('end_time'), return_hour)
            events.append(_event(booking, EVENT_RETURN, at_hour(day, hour, tz), projected=True))

        if start < day < end:
            events.append(_event(booking, EVENT_OCCUPANCY))

    events.sort(key=_sort_key)
    return events


def bookings_on_day(day, bookings: list) -> list:
    """Bookings whose inclusive date range contains ``day``."""
    day = to_day(day)
    return [
        b for b in bookings
        if to_day(b['start_date']) <= day <= to_day(b['end_date'])
    ]


def month_grid(year: int, month: int, bookings: list) -> list:
    """
    Calendar weeks covering a month, Sunday first.

    Returns:
        list: Weeks, each a list of 7 day dicts
              {date, is_current_month, bookings}
    """
    first = date(year, month, 1)
    last = date(year, month, _calendar.monthrange(year, month)[1])

    # Python weekday(): Monday=0 .. Sunday=6
    grid_start = first - timedelta(days=(first.weekday() + 1) % 7)
    grid_end = last + timedelta(days=(5 - last.weekday()) % 7)

    weeks = []
    current = grid_start
    while current <= grid_end:
        week = []
        for _ in range(7):
            week.append({
                'date': current,
                'is_current_month': current.month == month,
                'bookings': bookings_on_day(current, bookings),
            })
            current += timedelta(days=1)
        weeks.append(week)
    return weeks


def serialize_event(event: dict) -> dict:
    return {
        'id': event['id'],
        'bookingId': event['booking_id'],
        'type': event['type'],
        'time': event['time'].isoformat() if event['time'] else None,
        'allDay': event['all_day'],
        'projected': event['projected'],
        'customerName': event['customer_name'],
        'cameraName': event['camera_name'],
        'status': event['status'],
    }
