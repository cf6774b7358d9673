"""
Camera catalog data access functions.

Handles camera CRUD for the catalog and the list of cameras that can be
offered for new bookings.
"""

import logging

from database import get_db, transaction, mark_changed
from utils.errors import ValidationError, NotFoundError, ConcurrencyConflictError
from utils.messages import get_message
from utils.datetime_helpers import get_now
from utils.validators import sanitize_string
from .booking_status import CameraStatus
from .capacity import reconcile_camera

logger = logging.getLogger(__name__)

CAMERA_FIELDS = ('name', 'category', 'daily_rate', 'total_units', 'status',
                 'description', 'specifications')


# =============================================================================
# READ
# =============================================================================

def get_all_cameras(status: str = None) -> list:
    """
    Get all cameras.

    Args:
        status: Optional status filter ('active', 'maintenance', 'retired')

    Returns:
        List of camera dicts ordered by name
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM cameras'
    params = []
    if status:
        query += ' WHERE status = ?'
        params.append(status)
    query += ' ORDER BY name, id'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_camera_by_id(camera_id: int) -> dict:
    """
    Get camera by ID.

    Args:
        camera_id: Camera ID

    Returns:
        Camera dict or None
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM cameras WHERE id = ?', (camera_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def require_camera(camera_id: int) -> dict:
    """Get camera by ID or raise NotFoundError."""
    camera = get_camera_by_id(camera_id)
    if not camera:
        raise NotFoundError(get_message('camera_not_found'), camera_id=camera_id)
    return camera


# =============================================================================
# VALIDATION
# =============================================================================

def _clean_camera_fields(data: dict, partial: bool = False) -> dict:
    """Validate catalog fields; raises ValidationError listing every problem."""
    errors = {}
    cleaned = {}

    if 'name' in data or not partial:
        name = sanitize_string(data.get('name'), max_length=120)
        if not name:
            errors['name'] = 'name is required'
        cleaned['name'] = name

    if 'category' in data:
        cleaned['category'] = sanitize_string(data.get('category'), max_length=60)

    if 'daily_rate' in data or not partial:
        try:
            rate = float(data.get('daily_rate', 0))
            if rate < 0:
                raise ValueError
            cleaned['daily_rate'] = rate
        except (TypeError, ValueError):
            errors['daily_rate'] = get_message('invalid_rate')

    if 'total_units' in data or not partial:
        units = data.get('total_units', 1)
        if isinstance(units, bool) or not isinstance(units, (int, str)):
            errors['total_units'] = get_message('invalid_units')
        else:
            try:
                units = int(units)
                if units < 0:
                    raise ValueError
                cleaned['total_units'] = units
            except ValueError:
                errors['total_units'] = get_message('invalid_units')

    if 'status' in data or not partial:
        status = data.get('status') or CameraStatus.ACTIVE.value
        try:
            cleaned['status'] = CameraStatus(status).value
        except ValueError:
            errors['status'] = get_message('invalid_camera_status', status=status)

    for field in ('description', 'specifications'):
        if field in data:
            cleaned[field] = sanitize_string(data.get(field))

    if errors:
        raise ValidationError(get_message('missing_fields'), errors=errors)
    return cleaned


# =============================================================================
# CREATE / UPDATE / DELETE
# =============================================================================

def create_camera(data: dict) -> dict:
    """
    Add a camera to the catalog.

    Args:
        data: name, daily_rate, total_units, optional category, status,
              description, specifications

    Returns:
        The created camera dict

    Raises:
        ValidationError: If fields are missing or malformed
    """
    fields = _clean_camera_fields(data)

    with transaction() as cursor:
        cursor.execute('''
            INSERT INTO cameras (name, category, daily_rate, total_units, cached_available,
                                 status, description, specifications, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            fields['name'], fields.get('category'), fields['daily_rate'],
            fields['total_units'], fields['total_units'], fields['status'],
            fields.get('description'), fields.get('specifications'),
            get_now().isoformat(), get_now().isoformat()
        ))
        camera_id = cursor.lastrowid
        mark_changed('cameras')

    logger.info(f'Camera {camera_id} created: {fields["name"]} x{fields["total_units"]}')
    return get_camera_by_id(camera_id)


def update_camera(camera_id: int, data: dict, expected_revision: int = None) -> dict:
    """
    Update catalog fields of a camera.

    Changing total_units reconciles the cached availability in the same
    transaction.

    Args:
        camera_id: Camera ID
        data: Fields to change (subset of CAMERA_FIELDS)
        expected_revision: Revision the caller read; None skips the check

    Returns:
        The updated camera dict

    Raises:
        NotFoundError, ValidationError, ConcurrencyConflictError
    """
    updates = _clean_camera_fields({k: v for k, v in data.items() if k in CAMERA_FIELDS},
                                   partial=True)

    with transaction() as cursor:
        cursor.execute('SELECT revision FROM cameras WHERE id = ?', (camera_id,))
        row = cursor.fetchone()
        if not row:
            raise NotFoundError(get_message('camera_not_found'), camera_id=camera_id)

        revision = row['revision']
        if expected_revision is not None and int(expected_revision) != revision:
            raise ConcurrencyConflictError(
                get_message('stale_camera', id=camera_id),
                camera_id=camera_id, expected_revision=expected_revision, revision=revision
            )

        if updates:
            assignments = [f'{field} = ?' for field in updates]
            params = list(updates.values())
            if 'total_units' in updates:
                # Keep the row inside its CHECK constraint on shrink;
                # the reconcile below sets the real value.
                assignments.append('cached_available = MIN(cached_available, ?)')
                params.append(updates['total_units'])

            cursor.execute(f'''
                UPDATE cameras
                SET {', '.join(assignments)}, revision = revision + 1, updated_at = ?
                WHERE id = ? AND revision = ?
            ''', params + [get_now().isoformat(), camera_id, revision])
            if cursor.rowcount == 0:
                raise ConcurrencyConflictError(
                    get_message('stale_camera', id=camera_id),
                    camera_id=camera_id, revision=revision
                )
            mark_changed('cameras')

        if 'total_units' in updates:
            reconcile_camera(camera_id)

    logger.info(f'Camera {camera_id} updated: {sorted(updates)}')
    return get_camera_by_id(camera_id)


def delete_camera(camera_id: int) -> dict:
    """
    Remove a camera from the catalog.

    Raises:
        NotFoundError: If the camera does not exist
        ValidationError: If bookings still reference it
    """
    with transaction() as cursor:
        cursor.execute('SELECT * FROM cameras WHERE id = ?', (camera_id,))
        row = cursor.fetchone()
        if not row:
            raise NotFoundError(get_message('camera_not_found'), camera_id=camera_id)

        cursor.execute('SELECT COUNT(*) AS total FROM bookings WHERE camera_id = ?', (camera_id,))
        if cursor.fetchone()['total'] > 0:
            raise ValidationError(get_message('camera_has_bookings'), camera_id=camera_id)

        cursor.execute('DELETE FROM cameras WHERE id = ?', (camera_id,))
        mark_changed('cameras')

    logger.info(f'Camera {camera_id} deleted')
    return dict(row)


def serialize_camera(camera: dict, available: int = None) -> dict:
    """External (camelCase) representation of a camera record."""
    data = {
        'id': camera['id'],
        'name': camera['name'],
        'category': camera.get('category'),
        'dailyRate': camera['daily_rate'],
        'totalUnits': camera['total_units'],
        'cachedAvailable': camera['cached_available'],
        'status': camera['status'],
        'description': camera.get('description'),
        'specifications': camera.get('specifications'),
        'revision': camera['revision'],
    }
    if available is not None:
        data['available'] = available
    return data
