"""
Centralized UI messages.
All user-facing text in one place for consistency.
"""

MESSAGES = {
    # Success messages
    'booking_created': 'Booking created for {customer} ({camera})',
    'booking_status_updated': 'Booking #{id} status updated to "{status}"',
    'booking_deleted': 'Booking #{id} deleted',
    'camera_created': 'Camera "{name}" added',
    'camera_updated': 'Camera "{name}" updated',
    'camera_deleted': 'Camera "{name}" deleted',
    'reconcile_done': 'Availability reconciled for {count} cameras',

    # Error messages
    'booking_not_found': 'Booking not found',
    'camera_not_found': 'Camera not found',
    'missing_fields': 'Please fill in all required fields',
    'invalid_date_range': 'End date must not be before start date',
    'invalid_date': 'Dates must use the YYYY-MM-DD format',
    'invalid_time': 'Times must use the HH:MM format',
    'invalid_email': 'Invalid email format',
    'invalid_phone': 'Invalid phone format',
    'invalid_status': 'Unknown booking status: {status}',
    'camera_unavailable': 'Camera "{name}" is not available for new bookings',
    'no_next_status': 'Booking #{id} has no next status from "{status}"',
    'stale_booking': 'Booking #{id} was changed by someone else, reload and retry',
    'stale_camera': 'Camera #{id} was changed by someone else, reload and retry',
    'camera_has_bookings': 'Cannot delete a camera that still has bookings',
    'invalid_units': 'Total units must be a non-negative integer',
    'invalid_rate': 'Daily rate must be a non-negative number',
    'invalid_camera_status': 'Unknown camera status: {status}',
    'save_failed': 'Could not save changes: {error}',

    # Warnings
    'overbooked': 'Camera "{name}" is overbooked: {committed} bookings for {units} units',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get formatted message by key.

    Args:
        key: Message key
        **kwargs: Format arguments

    Returns:
        Formatted message string
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        try:
            return message.format(**kwargs)
        except KeyError:
            return message
    return message
