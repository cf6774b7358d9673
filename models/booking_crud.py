"""
Booking CRUD operations.
Handles create, read and delete for bookings and their status logs.
"""

import logging
from datetime import date

from flask import current_app

from database import get_db, transaction, mark_changed
from utils.errors import ValidationError, NotFoundError, OverbookedWarning
from utils.messages import get_message
from utils.datetime_helpers import get_now, get_today, to_day
from utils.notifications import get_notifier
from utils.validators import (
    validate_email, validate_phone, validate_date, validate_time,
    validate_date_range, validate_required_fields, sanitize_string
)
from .availability import available, is_overbooked, count_committed
from .booking_status import CameraStatus, INITIAL_STATUS, can_advance
from .camera import require_camera
from .capacity import reconcile_camera

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('customer_name', 'customer_email', 'customer_phone',
                   'camera_id', 'start_date', 'end_date')


# =============================================================================
# PRICING
# =============================================================================

def calculate_total_days(start_date, end_date) -> int:
    """Inclusive day count: a same-day booking lasts one day."""
    return (to_day(end_date) - to_day(start_date)).days + 1


def calculate_total_amount(total_days: int, daily_rate: float) -> float:
    return total_days * daily_rate


# =============================================================================
# READ
# =============================================================================

def _load_logs(cursor, booking_ids: list) -> dict:
    """Status logs grouped by booking id, each list in write order."""
    logs = {booking_id: [] for booking_id in booking_ids}
    if not booking_ids:
        return logs

    placeholders = ','.join('?' * len(booking_ids))
    cursor.execute(f'''
        SELECT * FROM booking_status_logs
        WHERE booking_id IN ({placeholders})
        ORDER BY booking_id, id
    ''', booking_ids)
    for row in cursor.fetchall():
        logs[row['booking_id']].append(dict(row))
    return logs


def get_all_bookings(camera_id: int = None, status: str = None) -> list:
    """
    Get bookings with their status logs.

    Args:
        camera_id: Optional camera filter
        status: Optional status filter

    Returns:
        List of booking dicts (newest first), each with 'status_change_logs'
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM bookings WHERE 1=1'
    params = []
    if camera_id is not None:
        query += ' AND camera_id = ?'
        params.append(camera_id)
    if status:
        query += ' AND status = ?'
        params.append(status)
    query += ' ORDER BY created_at DESC, id DESC'

    cursor.execute(query, params)
    bookings = [dict(row) for row in cursor.fetchall()]

    logs = _load_logs(cursor, [b['id'] for b in bookings])
    for booking in bookings:
        booking['status_change_logs'] = logs[booking['id']]
    return bookings


def get_booking_by_id(booking_id: int) -> dict:
    """
    Get booking by ID with its status logs.

    Returns:
        Booking dict or None
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM bookings WHERE id = ?', (booking_id,))
    row = cursor.fetchone()
    if not row:
        return None

    booking = dict(row)
    booking['status_change_logs'] = _load_logs(cursor, [booking_id])[booking_id]
    return booking


def require_booking(booking_id: int) -> dict:
    """Get booking by ID or raise NotFoundError."""
    booking = get_booking_by_id(booking_id)
    if not booking:
        raise NotFoundError(get_message('booking_not_found'), booking_id=booking_id)
    return booking


# =============================================================================
# VALIDATION
# =============================================================================

def validate_booking_request(data: dict) -> dict:
    """
    Validate and normalize a booking request.

    Args:
        data: Request fields (snake_case)

    Returns:
        dict: Cleaned fields

    Raises:
        ValidationError: With an 'errors' dict naming every bad field
    """
    errors = validate_required_fields(data, REQUIRED_FIELDS)

    email = sanitize_string(data.get('customer_email'), max_length=120)
    if email and not validate_email(email):
        errors['customer_email'] = get_message('invalid_email')

    phone = sanitize_string(data.get('customer_phone'), max_length=30)
    if phone and not validate_phone(phone):
        errors['customer_phone'] = get_message('invalid_phone')

    start_date = data.get('start_date')
    end_date = data.get('end_date')
    for field, value in (('start_date', start_date), ('end_date', end_date)):
        if value and not validate_date(value):
            errors[field] = get_message('invalid_date')

    if ('start_date' not in errors and 'end_date' not in errors
            and not validate_date_range(start_date, end_date)):
        errors['end_date'] = get_message('invalid_date_range')

    for field in ('start_time', 'end_time'):
        value = data.get(field)
        if value and not validate_time(value):
            errors[field] = get_message('invalid_time')

    camera_id = data.get('camera_id')
    if camera_id is not None and 'camera_id' not in errors:
        try:
            camera_id = int(camera_id)
        except (TypeError, ValueError):
            errors['camera_id'] = 'camera_id must be an integer'

    if errors:
        raise ValidationError(get_message('missing_fields'), errors=errors)

    return {
        'customer_name': sanitize_string(data['customer_name'], max_length=120),
        'customer_email': email,
        'customer_phone': phone,
        'camera_id': camera_id,
        'start_date': start_date,
        'end_date': end_date,
        'start_time': data.get('start_time') or None,
        'end_time': data.get('end_time') or None,
        'notes': sanitize_string(data.get('notes')),
    }


# =============================================================================
# CREATE
# =============================================================================

def create_booking(request: dict, actor: str = 'customer', as_of: date = None) -> tuple:
    """
    Create a booking in the initial status.

    The availability check reads a snapshot before the write and is not
    atomic with it. After the write the camera is checked again; a
    resulting overbooking is tolerated but reported.

    Args:
        request: Booking request fields (see validate_booking_request)
        actor: Who created the booking (recorded in the first log entry)
        as_of: Availability query date (default: today)

    Returns:
        tuple: (booking dict, OverbookedWarning or None)

    Raises:
        ValidationError: Bad fields, or camera not offerable
        NotFoundError: Unknown camera
    """
    fields = validate_booking_request(request)
    camera = require_camera(fields['camera_id'])
    as_of = as_of or get_today()
    horizon_days = current_app.config.get('AVAILABILITY_HORIZON_DAYS', 14)

    snapshot = get_all_bookings(camera_id=camera['id'])
    if (camera['status'] != CameraStatus.ACTIVE
            or available(camera, snapshot, as_of, horizon_days) <= 0):
        raise ValidationError(get_message('camera_unavailable', name=camera['name']),
                              camera_id=camera['id'])

    total_days = calculate_total_days(fields['start_date'], fields['end_date'])
    total_amount = calculate_total_amount(total_days, camera['daily_rate'])
    created_at = get_now().isoformat()

    with transaction() as cursor:
        cursor.execute('''
            INSERT INTO bookings (
                camera_id, camera_name, customer_name, customer_email, customer_phone,
                start_date, end_date, start_time, end_time,
                total_days, daily_rate, total_amount, status,
                notes, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            camera['id'], camera['name'], fields['customer_name'],
            fields['customer_email'], fields['customer_phone'],
            fields['start_date'], fields['end_date'], fields['start_time'], fields['end_time'],
            total_days, camera['daily_rate'], total_amount, INITIAL_STATUS.value,
            fields['notes'], created_at, created_at
        ))
        booking_id = cursor.lastrowid

        cursor.execute('''
            INSERT INTO booking_status_logs (booking_id, old_status, new_status, actor, changed_at)
            VALUES (?, NULL, ?, ?, ?)
        ''', (booking_id, INITIAL_STATUS.value, actor, created_at))

        reconcile_camera(camera['id'])
        mark_changed('bookings')

    logger.info(f'Booking {booking_id} created: camera {camera["id"]}, '
                f'{fields["start_date"]}..{fields["end_date"]} ({total_days} days)')

    warning = check_overbooking(camera['id'], as_of)
    return get_booking_by_id(booking_id), warning


def check_overbooking(camera_id: int, as_of: date = None) -> OverbookedWarning | None:
    """
    Compensating check run after a write.

    Returns:
        OverbookedWarning (also sent to the notifier) or None
    """
    camera = require_camera(camera_id)
    as_of = as_of or get_today()
    horizon_days = current_app.config.get('AVAILABILITY_HORIZON_DAYS', 14)
    bookings = get_all_bookings(camera_id=camera_id)

    if not is_overbooked(camera, bookings, as_of, horizon_days):
        return None

    warning = OverbookedWarning(
        camera_id=camera['id'],
        camera_name=camera['name'],
        total_units=camera['total_units'],
        committed=count_committed(camera, bookings, as_of, horizon_days)
    )
    logger.warning(str(warning))
    get_notifier().notify(
        'warning',
        get_message('overbooked', name=camera['name'],
                    committed=warning.committed, units=warning.total_units),
        camera_id=camera['id']
    )
    return warning


# =============================================================================
# DELETE
# =============================================================================

def delete_booking(booking_id: int, actor: str = 'staff') -> dict:
    """
    Hard-delete a booking and its status log.

    Capacity it was holding is released by reconciling its camera in the
    same transaction.

    Returns:
        The deleted booking dict

    Raises:
        NotFoundError: If the booking does not exist
    """
    booking = require_booking(booking_id)

    with transaction() as cursor:
        cursor.execute('DELETE FROM booking_status_logs WHERE booking_id = ?', (booking_id,))
        cursor.execute('DELETE FROM bookings WHERE id = ?', (booking_id,))
        if cursor.rowcount == 0:
            raise NotFoundError(get_message('booking_not_found'), booking_id=booking_id)

        reconcile_camera(booking['camera_id'])
        mark_changed('bookings')

    logger.info(f'Booking {booking_id} ({booking["status"]}) deleted by {actor}')
    return booking


# =============================================================================
# SERIALIZATION
# =============================================================================

def serialize_status_log(entry: dict) -> dict:
    return {
        'oldStatus': entry['old_status'],
        'newStatus': entry['new_status'],
        'actor': entry['actor'],
        'changedAt': entry['changed_at'],
        'notes': entry.get('notes'),
    }


def serialize_booking(booking: dict) -> dict:
    """External (camelCase) representation of a booking record."""
    return {
        'id': booking['id'],
        'customerName': booking['customer_name'],
        'customerEmail': booking['customer_email'],
        'customerPhone': booking['customer_phone'],
        'resourceId': booking['camera_id'],
        'resourceName': booking['camera_name'],
        'startDate': booking['start_date'],
        'endDate': booking['end_date'],
        'startTime': booking.get('start_time'),
        'endTime': booking.get('end_time'),
        'totalDays': booking['total_days'],
        'dailyRate': booking['daily_rate'],
        'totalAmount': booking['total_amount'],
        'status': booking['status'],
        'createdAt': booking['created_at'],
        'notes': booking.get('notes'),
        'adminNotes': booking.get('admin_notes'),
        'revision': booking['revision'],
        'canAdvance': can_advance(booking['status']),
        'statusChangeLogs': [
            serialize_status_log(entry) for entry in booking.get('status_change_logs', [])
        ],
    }
