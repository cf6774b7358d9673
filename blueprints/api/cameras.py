"""
Camera catalog API routes including live availability and reconciliation.
"""

from flask import current_app, request

from models.camera import (
    require_camera, create_camera, update_camera,
    delete_camera, serialize_camera
)
from models.booking_crud import get_all_bookings
from models.availability import available
from models.capacity import reconcile_all
from utils.api_response import api_success
from utils.messages import get_message
from utils.notifications import get_notifier
from extensions import get_live_view
from blueprints.api.helpers import get_json_body, get_date_arg, get_revision, pick

CAMERA_KEYS = {
    'name': 'name',
    'category': 'category',
    'dailyRate': 'daily_rate',
    'totalUnits': 'total_units',
    'status': 'status',
    'description': 'description',
    'specifications': 'specifications',
}


def register_routes(bp):
    """Register camera API routes on the blueprint."""

    @bp.route('/cameras')
    def list_cameras():
        """
        All cameras with their live availability.

        Query params:
            status: Filter by camera status (optional)
            date: Availability query date (optional, default today)
        """
        as_of = get_date_arg()
        status = request.args.get('status')
        data = [
            serialize_camera(c, available=c['available'])
            for c in get_live_view().cameras_with_availability(as_of)
            if not status or c['status'] == status
        ]
        return api_success(data=data, count=len(data))

    @bp.route('/cameras/offerable')
    def offerable_cameras():
        """Cameras that can take a new booking on the given date."""
        as_of = get_date_arg()
        view = get_live_view()
        counts = view.availability(as_of)
        data = [
            serialize_camera(c, available=counts[c['id']])
            for c in view.offerable_cameras(as_of)
        ]
        return api_success(data=data, count=len(data))

    @bp.route('/cameras', methods=['POST'])
    def create_camera_route():
        """Add a camera to the catalog."""
        camera = create_camera(pick(get_json_body(), CAMERA_KEYS))
        message = get_message('camera_created', name=camera['name'])
        get_notifier().notify('success', message, camera_id=camera['id'])
        return api_success(data=serialize_camera(camera), message=message, status=201)

    @bp.route('/cameras/<int:camera_id>')
    def camera_detail(camera_id):
        """Single camera with live availability."""
        camera = require_camera(camera_id)
        units = available(camera, get_all_bookings(camera_id=camera_id), get_date_arg(),
                          current_app.config['AVAILABILITY_HORIZON_DAYS'])
        return api_success(data=serialize_camera(camera, available=units))

    @bp.route('/cameras/<int:camera_id>', methods=['PUT', 'PATCH'])
    def update_camera_route(camera_id):
        """Update catalog fields; optional 'revision' guards against lost updates."""
        data = get_json_body()
        camera = update_camera(camera_id, pick(data, CAMERA_KEYS),
                               expected_revision=get_revision(data))
        message = get_message('camera_updated', name=camera['name'])
        get_notifier().notify('success', message, camera_id=camera_id)
        return api_success(data=serialize_camera(camera), message=message)

    @bp.route('/cameras/<int:camera_id>', methods=['DELETE'])
    def delete_camera_route(camera_id):
        """Remove a camera without bookings."""
        camera = delete_camera(camera_id)
        message = get_message('camera_deleted', name=camera['name'])
        get_notifier().notify('success', message, camera_id=camera_id)
        return api_success(message=message)

    @bp.route('/cameras/<int:camera_id>/availability')
    def camera_availability(camera_id):
        """
        Live availability of one camera.

        Query params:
            date: Query date (optional, default today)
        """
        camera = require_camera(camera_id)
        as_of = get_date_arg()
        units = available(camera, get_all_bookings(camera_id=camera_id), as_of,
                          current_app.config['AVAILABILITY_HORIZON_DAYS'])
        return api_success(data={
            'cameraId': camera_id,
            'date': as_of.isoformat(),
            'available': units,
            'totalUnits': camera['total_units'],
            'cachedAvailable': camera['cached_available'],
        })

    @bp.route('/cameras/reconcile', methods=['POST'])
    def reconcile_cameras():
        """Recompute cached availability for every camera."""
        results = reconcile_all()
        message = get_message('reconcile_done', count=len(results))
        get_notifier().notify('info', message)
        return api_success(data=[{
            'cameraId': r['camera_id'],
            'previous': r['previous'],
            'cachedAvailable': r['cached_available'],
            'changed': r['changed'],
        } for r in results], message=message)
