"""
Input validation helper functions.
Provides validation for common input types.
"""

import re
from datetime import datetime


def validate_email(email: str) -> bool:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if valid email format
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """
    Validate phone number format.
    Accepts local numbers (0XXXXXXXXX) and international ones (+XXXXXXXXXXX).

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    # Remove spaces and common separators
    cleaned = re.sub(r'[\s\-\(\)\.]', '', phone)

    patterns = [
        r'^\+[1-9][0-9]{7,14}$',  # +84XXXXXXXXX
        r'^0[0-9]{8,10}$'         # 0XXXXXXXXX
    ]

    return any(bool(re.match(pattern, cleaned)) for pattern in patterns)


def validate_date(value: str) -> bool:
    """True if ``value`` is a zero-padded 'YYYY-MM-DD' date string."""
    if not value or not isinstance(value, str):
        return False
    try:
        parsed = datetime.strptime(value, '%Y-%m-%d')
    except ValueError:
        return False
    # Stored dates are compared as text, so only the canonical form is accepted
    return value == parsed.strftime('%Y-%m-%d')


def validate_time(value: str) -> bool:
    """True if ``value`` is a zero-padded 'HH:MM' 24-hour time string."""
    if not value or not isinstance(value, str):
        return False
    try:
        parsed = datetime.strptime(value, '%H:%M')
    except ValueError:
        return False
    return value == parsed.strftime('%H:%M')


def validate_date_range(start_date: str, end_date: str) -> bool:
    """
    Validate that end date is not before start date.

    Args:
        start_date: Start date (YYYY-MM-DD)
        end_date: End date (YYYY-MM-DD)

    Returns:
        True if valid date range
    """
    if not (validate_date(start_date) and validate_date(end_date)):
        return False
    start = datetime.strptime(start_date, '%Y-%m-%d')
    end = datetime.strptime(end_date, '%Y-%m-%d')
    return end >= start


def validate_required_fields(data: dict, fields) -> dict:
    """
    Check that every field is present and non-blank.

    Returns:
        Dict of field name -> error message for each missing field
    """
    errors = {}
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[field] = f'{field} is required'
    return errors


def sanitize_string(value: str, max_length: int = None) -> str:
    """
    Trim whitespace and optionally truncate.

    Args:
        value: String to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized string, or None for empty input
    """
    if value is None:
        return None

    value = str(value).strip()
    if not value:
        return None

    if max_length and len(value) > max_length:
        value = value[:max_length]

    return value
