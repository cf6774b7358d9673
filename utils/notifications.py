"""
Notification surface for reporting outcomes to staff.

Plays the role of the toast area of the admin screens: every operation
outcome worth telling a person about goes through ``notify(kind, message)``.
Notifications are logged and kept in a bounded buffer the API exposes.
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone

from flask import current_app

logger = logging.getLogger(__name__)

NOTIFICATION_KINDS = ('success', 'info', 'warning', 'error')

_LOG_LEVELS = {
    'success': logging.INFO,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


class Notifier:
    """Bounded, thread-safe notification buffer."""

    def __init__(self, maxlen: int = 100):
        self._lock = threading.Lock()
        self._buffer = deque(maxlen=maxlen)

    def init_app(self, app):
        """Bind to an application; starts with an empty buffer."""
        with self._lock:
            self._buffer = deque(maxlen=app.config.get('NOTIFICATION_BUFFER_SIZE', 100))
        app.extensions['notifier'] = self

    def notify(self, kind: str, message: str, **context) -> dict:
        """
        Record a notification.

        Args:
            kind: One of NOTIFICATION_KINDS
            message: Human readable text
            **context: Extra fields (booking id, camera id, ...)

        Returns:
            The stored notification dict
        """
        if kind not in NOTIFICATION_KINDS:
            raise ValueError(f'Unknown notification kind: {kind}')

        entry = {
            'kind': kind,
            'message': message,
            'context': context,
            'createdAt': datetime.now(timezone.utc).isoformat(),
        }
        with self._lock:
            self._buffer.append(entry)

        logger.log(_LOG_LEVELS[kind], f'[{kind}] {message}')
        return entry

    def recent(self, limit: int = None) -> list:
        """Newest-first list of buffered notifications."""
        with self._lock:
            items = list(reversed(self._buffer))
        return items[:limit] if limit else items

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()


def get_notifier() -> Notifier:
    """Notifier bound to the current application."""
    return current_app.extensions['notifier']
