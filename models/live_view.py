"""
Live join of the camera catalog and the booking set.

Subscribes to both store paths independently, keeps the latest snapshot of
each, and recomputes derived data (per-camera availability, calendar
events) lazily after either changes. Derived values are cached until the
next change notification and never patched incrementally.
"""

import logging
import threading
from datetime import date

from .availability import availability_by_camera, is_offerable, DEFAULT_HORIZON_DAYS
from .calendar import events_for_day, DEFAULT_DELIVERY_HOUR, DEFAULT_RETURN_HOUR

logger = logging.getLogger(__name__)


class LiveBookingView:
    """
    Read-through view over the 'cameras' and 'bookings' change streams.

    Usage:
        with LiveBookingView(feed) as view:
            view.cameras_with_availability(today)

    Must be created inside an app context: subscribing delivers the
    current snapshots immediately.
    """

    def __init__(self, feed, horizon_days: int = DEFAULT_HORIZON_DAYS,
                 delivery_hour: int = DEFAULT_DELIVERY_HOUR,
                 return_hour: int = DEFAULT_RETURN_HOUR):
        self._lock = threading.Lock()
        self._horizon_days = horizon_days
        self._delivery_hour = delivery_hour
        self._return_hour = return_hour
        self._cameras = []
        self._bookings = []
        self._derived = {}
        self.version = 0
        self._unsubscribers = [
            feed.subscribe('cameras', self._on_cameras),
            feed.subscribe('bookings', self._on_bookings),
        ]

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def _on_cameras(self, snapshot: list) -> None:
        with self._lock:
            self._cameras = list(snapshot)
            self._invalidate()

    def _on_bookings(self, snapshot: list) -> None:
        with self._lock:
            self._bookings = list(snapshot)
            self._invalidate()

    def _invalidate(self) -> None:
        self._derived.clear()
        self.version += 1
        logger.debug(f'Live view invalidated (version {self.version})')

    def close(self) -> None:
        """Release both subscriptions. Safe to call more than once."""
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()

    @property
    def closed(self) -> bool:
        return not self._unsubscribers

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _cached(self, key, compute):
        with self._lock:
            if key not in self._derived:
                self._derived[key] = compute(self._cameras, self._bookings)
            return self._derived[key]

    @property
    def cameras(self) -> list:
        with self._lock:
            return list(self._cameras)

    @property
    def bookings(self) -> list:
        with self._lock:
            return list(self._bookings)

    def availability(self, as_of: date) -> dict:
        """Camera id -> live available units on ``as_of``."""
        return self._cached(
            ('availability', as_of),
            lambda cameras, bookings: availability_by_camera(
                cameras, bookings, as_of, self._horizon_days)
        )

    def cameras_with_availability(self, as_of: date) -> list:
        """Each camera dict extended with its live 'available' count."""
        counts = self.availability(as_of)
        return [dict(camera, available=counts.get(camera['id'], 0)) for camera in self.cameras]

    def offerable_cameras(self, as_of: date) -> list:
        """Active cameras with at least one free unit on ``as_of``."""
        return self._cached(
            ('offerable', as_of),
            lambda cameras, bookings: [
                c for c in cameras if is_offerable(c, bookings, as_of, self._horizon_days)
            ]
        )

    def events_for_day(self, day: date, tz=None) -> list:
        return self._cached(
            ('events', day, str(tz)),
            lambda cameras, bookings: events_for_day(
                day, bookings, tz, self._delivery_hour, self._return_hour)
        )
