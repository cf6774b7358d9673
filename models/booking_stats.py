"""Dashboard statistics over a booking snapshot."""

from datetime import date

from utils.datetime_helpers import parse_timestamp
from .booking_status import BookingStatus


def get_booking_stats(bookings: list, today: date) -> dict:
    """
    Counts per status plus revenue.

    Revenue only counts completed bookings; monthly revenue is restricted
    to bookings created in the month of ``today``.
    """
    by_status = {status.value: 0 for status in BookingStatus}
    total_revenue = 0.0
    monthly_revenue = 0.0

    for booking in bookings:
        by_status[booking['status']] = by_status.get(booking['status'], 0) + 1
        if booking['status'] != BookingStatus.COMPLETED:
            continue

        amount = float(booking['total_amount'] or 0)
        total_revenue += amount
        created = parse_timestamp(booking['created_at'])
        if created.year == today.year and created.month == today.month:
            monthly_revenue += amount

    return {
        'total': len(bookings),
        'by_status': by_status,
        'total_revenue': total_revenue,
        'monthly_revenue': monthly_revenue,
    }
