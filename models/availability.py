"""
Live availability calculation.

Pure functions over a snapshot of cameras and bookings. Nothing here reads
the database or the cached ``cached_available`` column, so results can be
re-derived at any time from the full booking set.

A booking counts against a camera's capacity when either:
- its status is ``confirmed`` (any dates), or
- its date window overlaps the near-term horizon [as_of, as_of + N days],
  whatever its status. This keeps pending requests from being overbooked.
"""

from datetime import date, timedelta

from utils.datetime_helpers import to_day
from .booking_status import BookingStatus, CameraStatus

DEFAULT_HORIZON_DAYS = 14


def overlaps(start, end, window_start, window_end) -> bool:
    """Inclusive whole-day overlap test between [start, end] and the window."""
    return to_day(start) <= to_day(window_end) and to_day(end) >= to_day(window_start)


def counts_against_capacity(booking: dict, as_of: date, horizon_days: int = DEFAULT_HORIZON_DAYS) -> bool:
    """True if ``booking`` holds a unit for an availability query made on ``as_of``."""
    if booking['status'] == BookingStatus.CONFIRMED:
        return True

    as_of = to_day(as_of)
    horizon_end = as_of + timedelta(days=horizon_days)
    return overlaps(booking['start_date'], booking['end_date'], as_of, horizon_end)


def bookings_for_camera(camera_id: int, bookings: list) -> list:
    return [b for b in bookings if b['camera_id'] == camera_id]


def count_committed(camera: dict, bookings: list, as_of: date,
                    horizon_days: int = DEFAULT_HORIZON_DAYS) -> int:
    """Number of the camera's bookings counting against its capacity."""
    return sum(
        1 for b in bookings_for_camera(camera['id'], bookings)
        if counts_against_capacity(b, as_of, horizon_days)
    )


def available(camera: dict, bookings: list, as_of: date,
              horizon_days: int = DEFAULT_HORIZON_DAYS) -> int:
    """
    Units of ``camera`` free for a request made on ``as_of``.

    Args:
        camera: Camera record (needs id, total_units)
        bookings: Full booking snapshot (any camera)
        as_of: Query date; time of day is ignored
        horizon_days: Length of the near-term horizon

    Returns:
        int in [0, total_units]
    """
    total_units = max(0, int(camera['total_units']))
    committed = count_committed(camera, bookings, as_of, horizon_days)
    return max(0, total_units - committed)


def is_offerable(camera: dict, bookings: list, as_of: date,
                 horizon_days: int = DEFAULT_HORIZON_DAYS) -> bool:
    """Active cameras with at least one free unit can take new bookings."""
    return (camera['status'] == CameraStatus.ACTIVE
            and available(camera, bookings, as_of, horizon_days) > 0)


def availability_by_camera(cameras: list, bookings: list, as_of: date,
                           horizon_days: int = DEFAULT_HORIZON_DAYS) -> dict:
    """Map camera id -> live available units."""
    return {
        camera['id']: available(camera, bookings, as_of, horizon_days)
        for camera in cameras
    }


def is_overbooked(camera: dict, bookings: list, as_of: date,
                  horizon_days: int = DEFAULT_HORIZON_DAYS) -> bool:
    """True if more bookings count against the camera than it has units."""
    return count_committed(camera, bookings, as_of, horizon_days) > int(camera['total_units'])
