"""
Standardized API response helpers.

Every endpoint answers with one of three shapes:

    Success:  {"success": true, "data": ..., "message": "..."}
    Warning:  {"success": true, "data": ..., "warning": "...", "overbooked": {...}}
    Error:    {"success": false, "error": "...", "type": "...", "context": {...}}

Usage:
    from utils.api_response import api_success, api_error

    return api_success(data=serialize_booking(booking), status=201)
    return api_error('Camera not found', status=404)
"""

from flask import jsonify
from typing import Any

from utils.errors import BookingError


def api_success(
    data: Any = None,
    message: str | None = None,
    warning: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a success JSON response.

    Args:
        data: Payload under 'data' (omitted when None)
        message: Text for the staff notification area
        warning: Soft problem the caller should surface (e.g. overbooking)
        status: HTTP status code
        **extra_fields: Extra top-level fields ('count', 'overbooked', ...)

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data
    if message:
        response['message'] = message
    if warning:
        response['warning'] = warning
    response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """Build an error JSON response; extra fields go at the top level."""
    response = {'success': False, 'error': error}
    response.update(extra_fields)
    return jsonify(response), status


def api_booking_error(error: BookingError) -> tuple:
    """
    Render a booking engine error with its type, context and field errors.

    The HTTP status comes from the error class.
    """
    data = error.to_dict()
    message = data.pop('error')
    return api_error(message, status=error.status_code, **data)
