"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'camrent_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


def _remove_test_db():
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    _remove_test_db()


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db
    from extensions import close_live_view

    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app

    close_live_view(app)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_camera(app):
    """Factory creating a camera with a known number of units."""
    from models.camera import create_camera

    def _make(name='Test Camera', total_units=2, daily_rate=100000, status='active'):
        return create_camera({
            'name': name,
            'total_units': total_units,
            'daily_rate': daily_rate,
            'status': status,
        })

    return _make


@pytest.fixture
def make_booking(app):
    """
    Factory creating a booking through the lifecycle API.

    A status other than 'pending' is reached with set_booking_status, so
    the booking carries a realistic status log.
    """
    from datetime import date
    from models.booking_crud import create_booking, get_booking_by_id
    from models.booking_state import set_booking_status

    def _make(camera_id, start_date='2030-03-10', end_date='2030-03-12',
              status='pending', as_of=date(2030, 1, 1), **fields):
        request = {
            'customer_name': 'Test Customer',
            'customer_email': 'customer@example.com',
            'customer_phone': '0901234567',
            'camera_id': camera_id,
            'start_date': start_date,
            'end_date': end_date,
        }
        request.update(fields)
        booking, _ = create_booking(request, actor='test', as_of=as_of)
        if status != 'pending':
            set_booking_status(booking['id'], status, 'test')
            booking = get_booking_by_id(booking['id'])
        return booking

    return _make
