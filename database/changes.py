"""
Change notifications for the record store.

Writers mark the paths they touched inside a transaction; after the commit
every subscriber of a touched path receives a full, freshly loaded snapshot
of that path. Subscribers never receive deltas.
"""

import logging
import threading
from collections import defaultdict
from typing import Callable

logger = logging.getLogger(__name__)


class ChangeFeed:
    """In-process publish/subscribe hub keyed by store path ('cameras', 'bookings')."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers = defaultdict(list)
        self._loaders = {}

    def init_app(self, app):
        """Bind to an application; drops subscribers left by a previous app."""
        with self._lock:
            self._subscribers.clear()
        app.extensions['change_feed'] = self

    def register_loader(self, path: str, loader: Callable[[], list]) -> None:
        """Register the function that loads the full snapshot for ``path``."""
        self._loaders[path] = loader

    def has_subscribers(self, path: str) -> bool:
        with self._lock:
            return bool(self._subscribers.get(path))

    def subscribe(self, path: str, callback: Callable[[list], None]) -> Callable[[], None]:
        """
        Subscribe to full snapshots of ``path``.

        The current snapshot is delivered immediately (requires an app
        context), then again after every committed change.

        Args:
            path: Store path
            callback: Called with the snapshot list

        Returns:
            Function that removes this subscription (idempotent)
        """
        if path not in self._loaders:
            raise KeyError(f'No snapshot loader registered for path "{path}"')

        with self._lock:
            self._subscribers[path].append(callback)

        callback(self._loaders[path]())

        def unsubscribe():
            with self._lock:
                callbacks = self._subscribers.get(path, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def publish(self, paths) -> None:
        """Load and deliver one snapshot per touched path that has subscribers."""
        for path in paths:
            with self._lock:
                callbacks = list(self._subscribers.get(path, []))
            if not callbacks:
                continue

            try:
                snapshot = self._loaders[path]()
            except Exception:
                # Subscribers keep their previous snapshot until the next change
                logger.exception('Snapshot loader for "%s" failed', path)
                continue

            for callback in callbacks:
                try:
                    callback(snapshot)
                except Exception:
                    # A broken subscriber must not undo a committed write
                    logger.exception('Subscriber for "%s" failed', path)
