"""
Booking error taxonomy.

Every error carries a ``context`` dict (entity ids, attempted transition)
so a failure can be reproduced from the log line or the API response alone.
The HTTP status used by the API error handlers lives on the class.
"""


class BookingError(Exception):
    """Base class for all booking engine errors."""

    status_code = 400

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = {k: v for k, v in context.items() if v is not None}

    def __str__(self):
        if not self.context:
            return self.message
        details = ', '.join(f'{k}={v}' for k, v in self.context.items())
        return f'{self.message} ({details})'

    def to_dict(self) -> dict:
        return {'error': self.message, 'type': type(self).__name__, 'context': self.context}


class ValidationError(BookingError):
    """Missing or malformed booking fields, or an invalid date range."""

    status_code = 400

    def __init__(self, message: str, errors: dict = None, **context):
        super().__init__(message, **context)
        self.errors = errors or {}

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.errors:
            data['errors'] = self.errors
        return data


class InvalidTransitionError(BookingError):
    """The default advance action has no next status for the current one."""

    status_code = 409


class ConcurrencyConflictError(BookingError):
    """A record changed between read and write; retry with a fresh snapshot."""

    status_code = 409


class NotFoundError(BookingError):
    """A booking or camera id that does not (or no longer) exist."""

    status_code = 404


class PersistenceError(BookingError):
    """A store read or write failed; the transaction was rolled back."""

    status_code = 500


class OverbookedWarning(UserWarning):
    """
    Soft overbooking detected after a write.

    Not raised: returned next to the created booking and pushed to the
    notification surface so staff can resolve it.
    """

    def __init__(self, camera_id: int, camera_name: str, total_units: int, committed: int):
        self.camera_id = camera_id
        self.camera_name = camera_name
        self.total_units = total_units
        self.committed = committed
        super().__init__(str(self))

    def __str__(self):
        return (f'Camera "{self.camera_name}" (id={self.camera_id}) is overbooked: '
                f'{self.committed} bookings held against {self.total_units} units')

    def to_dict(self) -> dict:
        return {
            'cameraId': self.camera_id,
            'cameraName': self.camera_name,
            'totalUnits': self.total_units,
            'committed': self.committed,
        }
