"""
Application extensions initialization.
Extensions are created here and then initialized with the app in app.py.
"""

import threading

from database.changes import ChangeFeed
from utils.notifications import Notifier

# Store change notifications ('cameras', 'bookings' snapshots)
change_feed = ChangeFeed()

# Notification surface for staff-facing outcomes
notifier = Notifier()

_live_view_lock = threading.Lock()


def register_snapshot_loaders(feed):
    """
    Register the full-snapshot loaders for each store path.

    Imported lazily: models depend on the database package, which must not
    import models back.
    """
    from models.camera import get_all_cameras
    from models.booking_crud import get_all_bookings

    feed.register_loader('cameras', get_all_cameras)
    feed.register_loader('bookings', get_all_bookings)


def get_live_view():
    """
    The application's LiveBookingView, created on first use.

    One view per app, subscribed to both store paths for the app's lifetime.
    Must be called inside an app context.
    """
    from flask import current_app
    from models.live_view import LiveBookingView

    with _live_view_lock:
        view = current_app.extensions.get('live_view')
        if view is None or view.closed:
            view = LiveBookingView(
                change_feed,
                horizon_days=current_app.config['AVAILABILITY_HORIZON_DAYS'],
                delivery_hour=current_app.config['DEFAULT_DELIVERY_HOUR'],
                return_hour=current_app.config['DEFAULT_RETURN_HOUR'],
            )
            current_app.extensions['live_view'] = view
        return view


def close_live_view(app):
    """Close and forget the app's live view, if one was created."""
    with _live_view_lock:
        view = app.extensions.pop('live_view', None)
    if view is not None:
        view.close()
