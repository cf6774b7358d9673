"""
Calendar API routes: day events and month grid.
"""

from flask import request

from models.booking import (
    get_all_bookings, serialize_booking, month_grid, serialize_event
)
from utils.api_response import api_success
from utils.datetime_helpers import get_timezone, get_today
from utils.errors import ValidationError
from extensions import get_live_view
from blueprints.api.helpers import get_date_arg


def register_routes(bp):
    """Register calendar API routes on the blueprint."""

    @bp.route('/calendar/day')
    def calendar_day():
        """
        Delivery, return and occupancy events for one day.

        Query params:
            date: Day (optional, default today)
        """
        day = get_date_arg()
        events = get_live_view().events_for_day(day, tz=get_timezone())
        return api_success(data={
            'date': day.isoformat(),
            'events': [serialize_event(e) for e in events],
        })

    @bp.route('/calendar/month')
    def calendar_month():
        """
        Sunday-first weeks covering a month with the bookings on each day.

        Query params:
            year, month: Month to show (optional, default current month)
        """
        today = get_today()
        year = request.args.get('year', today.year, type=int)
        month = request.args.get('month', today.month, type=int)
        if not 1 <= month <= 12:
            raise ValidationError('month must be between 1 and 12', errors={'month': month})
        if not 1 < year < 9999:
            raise ValidationError('year out of range', errors={'year': year})

        weeks = month_grid(year, month, get_all_bookings())
        return api_success(data={
            'year': year,
            'month': month,
            'weeks': [[{
                'date': day['date'].isoformat(),
                'isCurrentMonth': day['is_current_month'],
                'bookings': [serialize_booking(b) for b in day['bookings']],
            } for day in week] for week in weeks],
        })
