"""
Booking status transitions.

Every transition updates the booking row, appends exactly one status log
entry and reconciles the camera's cached availability inside a single
transaction, so readers never observe one without the others.
"""

import logging
from datetime import datetime

from database import get_db, transaction, mark_changed
from utils.errors import NotFoundError, InvalidTransitionError, ConcurrencyConflictError
from utils.messages import get_message
from utils.datetime_helpers import get_now, parse_timestamp
from utils.validators import sanitize_string
from .booking_status import BookingStatus, coerce_status, next_status
from .capacity import reconcile_camera

logger = logging.getLogger(__name__)


# =============================================================================
# STATE TRANSITIONS
# =============================================================================

def _fetch_for_update(cursor, booking_id: int):
    cursor.execute('''
        SELECT id, camera_id, status, revision
        FROM bookings WHERE id = ?
    ''', (booking_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError(get_message('booking_not_found'), booking_id=booking_id)
    return row


def _next_log_timestamp(cursor, booking_id: int) -> str:
    """Now, but never earlier than the booking's last log entry."""
    now = get_now()
    cursor.execute('''
        SELECT changed_at FROM booking_status_logs
        WHERE booking_id = ? ORDER BY id DESC LIMIT 1
    ''', (booking_id,))
    row = cursor.fetchone()
    if row:
        last = parse_timestamp(row['changed_at'])
        if last.tzinfo is None:
            last = last.replace(tzinfo=now.tzinfo)
        if last > now:
            now = last
    return now.isoformat()


def set_booking_status(
    booking_id: int,
    new_status,
    actor: str,
    note: str = None,
    expected_revision: int = None
) -> dict:
    """
    Operator override: move a booking to any status.

    Always appends one log entry, even when the status does not change.
    A non-empty note is also kept as the booking's admin notes.

    Args:
        booking_id: Booking ID
        new_status: Target status (BookingStatus or its value)
        actor: Username making the change
        note: Optional note for the log entry
        expected_revision: Revision the caller read; None skips the check

    Returns:
        dict: {booking_id, old_status, new_status, revision, changed_at}

    Raises:
        ValidationError: Unknown status
        NotFoundError: Unknown booking
        ConcurrencyConflictError: The booking changed since it was read
    """
    target = coerce_status(new_status)
    note = sanitize_string(note)
    actor = sanitize_string(actor) or 'system'

    with transaction() as cursor:
        row = _fetch_for_update(cursor, booking_id)
        old_status = row['status']
        revision = row['revision']

        if expected_revision is not None and int(expected_revision) != revision:
            raise ConcurrencyConflictError(
                get_message('stale_booking', id=booking_id),
                booking_id=booking_id, attempted=f'{old_status}->{target.value}',
                expected_revision=expected_revision, revision=revision
            )

        changed_at = _next_log_timestamp(cursor, booking_id)

        cursor.execute('''
            UPDATE bookings
            SET status = ?,
                admin_notes = COALESCE(?, admin_notes),
                revision = revision + 1,
                updated_at = ?
            WHERE id = ? AND revision = ?
        ''', (target.value, note, changed_at, booking_id, revision))
        if cursor.rowcount == 0:
            raise ConcurrencyConflictError(
                get_message('stale_booking', id=booking_id),
                booking_id=booking_id, attempted=f'{old_status}->{target.value}',
                revision=revision
            )

        cursor.execute('''
            INSERT INTO booking_status_logs
            (booking_id, old_status, new_status, actor, changed_at, notes)
            VALUES (?, ?, ?, ?, ?, ?)
        ''', (booking_id, old_status, target.value, actor, changed_at, note))

        reconcile_camera(row['camera_id'])
        mark_changed('bookings')

    logger.info(f'Booking {booking_id}: {old_status} -> {target.value} by {actor}')
    return {
        'booking_id': booking_id,
        'old_status': old_status,
        'new_status': target.value,
        'revision': revision + 1,
        'changed_at': changed_at,
    }


def advance_booking(booking_id: int, actor: str, note: str = None,
                    expected_revision: int = None) -> dict:
    """
    Move a booking one step along pending -> confirmed -> active -> completed.

    Raises:
        InvalidTransitionError: If the current status has no next status
        NotFoundError, ConcurrencyConflictError: As set_booking_status
    """
    with transaction() as cursor:
        row = _fetch_for_update(cursor, booking_id)
        target = next_status(row['status'])
        if target is None:
            raise InvalidTransitionError(
                get_message('no_next_status', id=booking_id, status=row['status']),
                booking_id=booking_id, status=row['status']
            )
        return set_booking_status(booking_id, target, actor, note,
                                  expected_revision=expected_revision)


def cancel_booking(booking_id: int, actor: str, note: str = None) -> dict:
    """Shortcut for the cancelled override."""
    return set_booking_status(booking_id, BookingStatus.CANCELLED, actor, note)


def mark_overtime(booking_id: int, actor: str, note: str = None) -> dict:
    """Shortcut for the overtime override (equipment not returned on time)."""
    return set_booking_status(booking_id, BookingStatus.OVERTIME, actor, note)


# =============================================================================
# HISTORY
# =============================================================================

def get_status_history(booking_id: int) -> list:
    """
    Get status change history for a booking.

    Returns:
        list: Log entries in write order (oldest first)

    Raises:
        NotFoundError: If the booking does not exist
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT id FROM bookings WHERE id = ?', (booking_id,))
    if not cursor.fetchone():
        raise NotFoundError(get_message('booking_not_found'), booking_id=booking_id)

    cursor.execute('''
        SELECT * FROM booking_status_logs
        WHERE booking_id = ?
        ORDER BY id
    ''', (booking_id,))
    return [dict(r) for r in cursor.fetchall()]


def status_entered_at(booking: dict, status, tz=None) -> datetime | None:
    """
    When the booking first entered ``status``, read from its status log.

    Args:
        booking: Booking dict with 'status_change_logs'
        status: Status to look for
        tz: Timezone aware timestamps are converted to

    Returns:
        datetime or None if the log has no such entry
    """
    status = coerce_status(status)
    for entry in booking.get('status_change_logs') or []:
        if entry['new_status'] == status and entry.get('changed_at'):
            return parse_timestamp(entry['changed_at'], tz)
    return None
