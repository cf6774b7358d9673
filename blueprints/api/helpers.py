"""
Request parsing helpers shared by the API route modules.
"""

from flask import request

from utils.datetime_helpers import get_today, to_day
from utils.errors import ValidationError
from utils.messages import get_message


def get_json_body() -> dict:
    """JSON object body of the current request, or {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def get_actor(data: dict = None) -> str:
    """Who is acting: body 'actor', then the X-Actor header, then 'staff'."""
    data = data or {}
    return data.get('actor') or request.headers.get('X-Actor') or 'staff'


def get_date_arg(name: str = 'date'):
    """
    Date query argument, defaulting to today.

    Raises:
        ValidationError: If the argument is not YYYY-MM-DD
    """
    value = request.args.get(name)
    if not value:
        return get_today()
    try:
        return to_day(value)
    except ValueError:
        raise ValidationError(get_message('invalid_date'), errors={name: value}) from None


def get_revision(data: dict):
    """Optional expected revision from the body or the If-Match header."""
    value = data.get('revision', request.headers.get('If-Match'))
    if value is None or value == '':
        return None
    try:
        return int(str(value).strip('"'))
    except ValueError:
        raise ValidationError('revision must be an integer', errors={'revision': value}) from None


def pick(data: dict, mapping: dict) -> dict:
    """
    Translate external (camelCase) keys to internal (snake_case) ones.

    Keys already in snake_case pass through, so both spellings are accepted.
    """
    result = {}
    for external, internal in mapping.items():
        if external in data:
            result[internal] = data[external]
        elif internal in data:
            result[internal] = data[internal]
    return result
