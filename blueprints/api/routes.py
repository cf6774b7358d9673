"""
API routes for JSON endpoints.
Provides REST API access to cameras, bookings and the calendar.
"""

from flask import Blueprint, current_app, request

from utils.api_response import api_success
from utils.notifications import get_notifier

api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.api import cameras, bookings, calendar  # noqa: E402

cameras.register_routes(api_bp)
bookings.register_routes(api_bp)
calendar.register_routes(api_bp)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON with status and version
    """
    return api_success(data={
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION'),
        'app': current_app.config.get('APP_NAME'),
    })


@api_bp.route('/notifications')
def recent_notifications():
    """
    Recent staff notifications, newest first.

    Query params:
        limit: Maximum number of entries (optional)
    """
    limit = request.args.get('limit', type=int)
    notifications = get_notifier().recent(limit)
    return api_success(data=notifications, count=len(notifications))
