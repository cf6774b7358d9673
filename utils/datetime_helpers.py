"""Timezone-aware date/time helpers for the camera rental application."""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from flask import current_app


DATE_FORMAT = '%Y-%m-%d'
TIME_FORMAT = '%H:%M'


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Asia/Ho_Chi_Minh')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_now() -> datetime:
    """Get current datetime in the configured timezone."""
    return datetime.now(get_timezone())


def to_day(value) -> date:
    """
    Strip a date-like value to its calendar day.

    Accepts date, datetime (time-of-day dropped) or 'YYYY-MM-DD' strings
    (a trailing time part is ignored).

    Raises:
        ValueError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return datetime.strptime(value[:10], DATE_FORMAT).date()
    raise ValueError(f'Not a date: {value!r}')


def parse_timestamp(value: str, tz=None) -> datetime:
    """
    Parse an ISO-8601 timestamp.

    Aware timestamps are converted to ``tz`` when given; naive ones are
    returned unchanged (read as local wall-clock time).
    """
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if tz is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed


def parse_hour(value: str, default: int) -> int:
    """Hour part of an 'HH:MM' string, or ``default`` when missing/malformed."""
    if not value:
        return default
    try:
        return datetime.strptime(value, TIME_FORMAT).hour
    except ValueError:
        return default


def at_hour(day: date, hour: int, tz=None) -> datetime:
    """Datetime for ``day`` at ``hour``:00."""
    return datetime.combine(day, time(hour, 0), tzinfo=tz)
