"""
Capacity reconciliation.

``cameras.cached_available`` is a materialized view of the booking table:
the number of units not held by a ``confirmed`` booking. It is never
authoritative and never used to decide whether a booking may be taken
(see models/availability.py for that); it exists for fast admin display.

The only way it changes is a recompute from scratch, which makes every
call idempotent and self-healing:

    cached_available = clamp(total_units - confirmed_count, 0, total_units)

Reconciliations for the same camera are serialized by the SQLite write
lock taken in ``transaction()``; callers already inside a transaction
(status changes, deletes) reconcile as part of that same atomic unit.
"""

import logging

from database import transaction, mark_changed
from utils.errors import NotFoundError, ConcurrencyConflictError
from utils.datetime_helpers import get_now
from .booking_status import CAPACITY_HOLDING_STATUSES

logger = logging.getLogger(__name__)


def compute_cached_available(total_units: int, holding_count: int) -> int:
    """Free units, clamped to [0, total_units]."""
    total_units = max(0, int(total_units))
    return max(0, min(total_units, total_units - int(holding_count)))


def count_holding_bookings(cursor, camera_id: int) -> int:
    """Number of the camera's bookings that hold a unit (confirmed)."""
    statuses = sorted(s.value for s in CAPACITY_HOLDING_STATUSES)
    placeholders = ','.join('?' * len(statuses))
    cursor.execute(f'''
        SELECT COUNT(*) AS holding
        FROM bookings
        WHERE camera_id = ? AND status IN ({placeholders})
    ''', [camera_id] + statuses)
    return cursor.fetchone()['holding']


def reconcile_camera(camera_id: int) -> dict:
    """
    Recompute and persist one camera's cached availability.

    Args:
        camera_id: Camera ID

    Returns:
        dict: {camera_id, previous, cached_available, changed}

    Raises:
        NotFoundError: If the camera does not exist
        ConcurrencyConflictError: If the camera row changed under us
    """
    with transaction() as cursor:
        cursor.execute('''
            SELECT id, total_units, cached_available, revision
            FROM cameras WHERE id = ?
        ''', (camera_id,))
        camera = cursor.fetchone()
        if not camera:
            raise NotFoundError('Camera not found', camera_id=camera_id)

        holding = count_holding_bookings(cursor, camera_id)
        previous = camera['cached_available']
        new_value = compute_cached_available(camera['total_units'], holding)

        if new_value != previous:
            cursor.execute('''
                UPDATE cameras
                SET cached_available = ?,
                    revision = revision + 1,
                    updated_at = ?
                WHERE id = ? AND revision = ?
            ''', (new_value, get_now().isoformat(), camera_id, camera['revision']))
            if cursor.rowcount == 0:
                raise ConcurrencyConflictError(
                    'Camera changed during reconciliation',
                    camera_id=camera_id, revision=camera['revision']
                )
            mark_changed('cameras')
            logger.info(f'Camera {camera_id}: cached_available {previous} -> {new_value} '
                        f'({holding} holding of {camera["total_units"]})')

    return {
        'camera_id': camera_id,
        'previous': previous,
        'cached_available': new_value,
        'changed': new_value != previous,
    }


def reconcile_all() -> list:
    """
    Repair pass over every camera.

    Returns:
        list: One reconcile_camera() result per camera
    """
    with transaction() as cursor:
        cursor.execute('SELECT id FROM cameras ORDER BY id')
        camera_ids = [row['id'] for row in cursor.fetchall()]
        results = [reconcile_camera(camera_id) for camera_id in camera_ids]

    drift = [r for r in results if r['changed']]
    if drift:
        logger.warning(f'Reconciliation corrected {len(drift)} of {len(results)} cameras')
    return results
