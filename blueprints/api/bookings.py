"""
Booking API routes: creation, lifecycle transitions, history and stats.
"""

from flask import request

from models.booking import (
    get_all_bookings, require_booking, create_booking, delete_booking,
    serialize_booking, serialize_status_log,
    set_booking_status, advance_booking, get_status_history,
    get_booking_stats, STATUS_LABELS, coerce_status
)
from utils.api_response import api_success
from utils.datetime_helpers import get_today
from utils.errors import ValidationError
from utils.messages import get_message
from utils.notifications import get_notifier
from blueprints.api.helpers import get_json_body, get_actor, get_revision, pick

BOOKING_KEYS = {
    'customerName': 'customer_name',
    'customerEmail': 'customer_email',
    'customerPhone': 'customer_phone',
    'resourceId': 'camera_id',
    'cameraId': 'camera_id',
    'startDate': 'start_date',
    'endDate': 'end_date',
    'startTime': 'start_time',
    'endTime': 'end_time',
    'notes': 'notes',
}


def _transition_response(booking_id: int, result: dict):
    label = STATUS_LABELS[coerce_status(result['new_status'])]
    message = get_message('booking_status_updated', id=booking_id, status=label)
    get_notifier().notify('success', message, booking_id=booking_id)
    return api_success(data=serialize_booking(require_booking(booking_id)), message=message)


def register_routes(bp):
    """Register booking API routes on the blueprint."""

    @bp.route('/bookings')
    def list_bookings():
        """
        Bookings with their status logs, newest first.

        Query params:
            cameraId: Filter by camera (optional)
            status: Filter by status (optional)
        """
        status = request.args.get('status')
        if status:
            status = coerce_status(status).value
        bookings = get_all_bookings(camera_id=request.args.get('cameraId', type=int),
                                    status=status)
        data = [serialize_booking(b) for b in bookings]
        return api_success(data=data, count=len(data))

    @bp.route('/bookings', methods=['POST'])
    def create_booking_route():
        """
        Create a pending booking.

        A soft overbooking detected after the write is returned as 'warning'.
        """
        data = get_json_body()
        booking, warning = create_booking(pick(data, BOOKING_KEYS), actor=get_actor(data))
        message = get_message('booking_created', customer=booking['customer_name'],
                              camera=booking['camera_name'])
        get_notifier().notify('success', message, booking_id=booking['id'])

        extra = {'overbooked': warning.to_dict()} if warning else {}
        return api_success(
            data=serialize_booking(booking),
            message=message,
            warning=str(warning) if warning else None,
            status=201,
            **extra
        )

    @bp.route('/bookings/stats')
    def booking_stats():
        """Counts per status and revenue from completed bookings."""
        stats = get_booking_stats(get_all_bookings(), get_today())
        return api_success(data={
            'total': stats['total'],
            'byStatus': stats['by_status'],
            'totalRevenue': stats['total_revenue'],
            'monthlyRevenue': stats['monthly_revenue'],
        })

    @bp.route('/bookings/<int:booking_id>')
    def booking_detail(booking_id):
        """Single booking with its status log."""
        return api_success(data=serialize_booking(require_booking(booking_id)))

    @bp.route('/bookings/<int:booking_id>', methods=['DELETE'])
    def delete_booking_route(booking_id):
        """Hard delete; releases any capacity the booking held."""
        booking = delete_booking(booking_id, actor=get_actor(get_json_body()))
        message = get_message('booking_deleted', id=booking_id)
        get_notifier().notify('success', message, booking_id=booking_id)
        return api_success(data=serialize_booking(booking), message=message)

    @bp.route('/bookings/<int:booking_id>/advance', methods=['POST'])
    def advance_booking_route(booking_id):
        """Move to the next status on the default path."""
        data = get_json_body()
        result = advance_booking(booking_id, get_actor(data), note=data.get('notes'),
                                 expected_revision=get_revision(data))
        return _transition_response(booking_id, result)

    @bp.route('/bookings/<int:booking_id>/status', methods=['POST'])
    def set_status_route(booking_id):
        """Operator override to any status."""
        data = get_json_body()
        if not data.get('status'):
            raise ValidationError(get_message('missing_fields'),
                                  errors={'status': 'status is required'})
        result = set_booking_status(booking_id, data['status'], get_actor(data),
                                    note=data.get('notes'),
                                    expected_revision=get_revision(data))
        return _transition_response(booking_id, result)

    @bp.route('/bookings/<int:booking_id>/history')
    def booking_history(booking_id):
        """Status change log, oldest first."""
        history = get_status_history(booking_id)
        return api_success(data=[serialize_status_log(h) for h in history],
                           count=len(history))
