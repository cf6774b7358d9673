"""
Tests for the JSON API endpoints.
"""

import json


def post_json(client, url, data=None, **kwargs):
    return client.post(url, data=json.dumps(data or {}),
                       content_type='application/json', **kwargs)


def booking_payload(camera_id, **overrides):
    payload = {
        'customerName': 'Nguyen Van A',
        'customerEmail': 'a@example.com',
        'customerPhone': '0901234567',
        'resourceId': camera_id,
        'startDate': '2030-05-01',
        'endDate': '2030-05-03',
    }
    payload.update(overrides)
    return payload


class TestHealth:
    """Health check."""

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['data']['status'] == 'ok'
        assert data['data']['app'] == 'CamRent'

    def test_unknown_route_is_json_404(self, client):
        response = client.get('/api/nope')
        assert response.status_code == 404
        assert response.get_json()['success'] is False


class TestCameraApi:
    """Camera catalog endpoints."""

    def test_list_cameras_with_live_availability(self, client):
        response = client.get('/api/cameras?date=2030-01-01')
        data = response.get_json()

        assert response.status_code == 200
        assert data['count'] == 4
        for camera in data['data']:
            assert camera['available'] == camera['totalUnits']

    def test_create_update_delete_camera(self, client):
        response = post_json(client, '/api/cameras',
                             {'name': 'Leica Q3', 'dailyRate': 900000, 'totalUnits': 1})
        assert response.status_code == 201
        camera = response.get_json()['data']
        assert camera['cachedAvailable'] == 1

        response = client.put(f'/api/cameras/{camera["id"]}',
                              data=json.dumps({'totalUnits': 2,
                                               'revision': camera['revision']}),
                              content_type='application/json')
        assert response.status_code == 200
        assert response.get_json()['data']['totalUnits'] == 2

        response = client.delete(f'/api/cameras/{camera["id"]}')
        assert response.status_code == 200
        assert client.get(f'/api/cameras/{camera["id"]}').status_code == 404

    def test_stale_camera_update_conflicts(self, client):
        response = client.put('/api/cameras/1',
                              data=json.dumps({'name': 'Renamed', 'revision': 999}),
                              content_type='application/json')
        data = response.get_json()

        assert response.status_code == 409
        assert data['type'] == 'ConcurrencyConflictError'
        assert data['context']['camera_id'] == 1

    def test_invalid_camera_rejected(self, client):
        response = post_json(client, '/api/cameras', {'name': '', 'totalUnits': -1})
        data = response.get_json()

        assert response.status_code == 400
        assert 'name' in data['errors']
        assert 'total_units' in data['errors']

    def test_camera_with_bookings_cannot_be_deleted(self, client):
        post_json(client, '/api/bookings', booking_payload(1))
        response = client.delete('/api/cameras/1')
        assert response.status_code == 400

    def test_offerable_excludes_maintenance(self, client):
        client.put('/api/cameras/4', data=json.dumps({'status': 'maintenance'}),
                   content_type='application/json')
        response = client.get('/api/cameras/offerable?date=2030-01-01')
        ids = [c['id'] for c in response.get_json()['data']]

        assert 4 not in ids
        assert len(ids) == 3

    def test_camera_availability(self, client):
        response = client.get('/api/cameras/2/availability?date=2030-01-01')
        data = response.get_json()['data']

        assert data['available'] == 2
        assert data['cachedAvailable'] == 2
        assert data['date'] == '2030-01-01'

    def test_bad_date_argument(self, client):
        response = client.get('/api/cameras/2/availability?date=01/01/2030')
        assert response.status_code == 400

    def test_reconcile(self, client):
        response = client.post('/api/cameras/reconcile')
        data = response.get_json()

        assert response.status_code == 200
        assert len(data['data']) == 4
        assert not any(r['changed'] for r in data['data'])


class TestBookingApi:
    """Booking endpoints."""

    def test_create_booking(self, client):
        response = post_json(client, '/api/bookings', booking_payload(1))
        data = response.get_json()

        assert response.status_code == 201
        booking = data['data']
        assert booking['status'] == 'pending'
        assert booking['resourceName'] == 'Canon EOS R6 Mark II'
        assert booking['totalDays'] == 3
        assert booking['totalAmount'] == 3 * 350000
        assert booking['statusChangeLogs'][0]['newStatus'] == 'pending'
        assert 'warning' not in data

    def test_create_booking_validation(self, client):
        response = post_json(client, '/api/bookings',
                             booking_payload(1, startDate='2030-05-03', endDate='2030-05-01'))
        data = response.get_json()

        assert response.status_code == 400
        assert data['type'] == 'ValidationError'
        assert 'end_date' in data['errors']

    def test_unpadded_dates_rejected(self, client):
        response = post_json(client, '/api/bookings',
                             booking_payload(1, startDate='2030-3-9', endDate='2030-3-15'))
        data = response.get_json()

        assert response.status_code == 400
        assert data['type'] == 'ValidationError'
        assert 'start_date' in data['errors']
        assert 'end_date' in data['errors']
        assert client.get('/api/bookings').get_json()['count'] == 0

    def test_unpadded_time_rejected(self, client):
        response = post_json(client, '/api/bookings', booking_payload(1, startTime='9:5'))

        assert response.status_code == 400
        assert 'start_time' in response.get_json()['errors']

    def test_create_booking_unknown_camera(self, client):
        response = post_json(client, '/api/bookings', booking_payload(999))
        assert response.status_code == 404

    def test_advance_through_lifecycle(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(1)).get_json()['data']

        statuses = []
        for _ in range(3):
            response = post_json(client, f'/api/bookings/{booking["id"]}/advance',
                                 {'actor': 'admin'})
            assert response.status_code == 200
            statuses.append(response.get_json()['data']['status'])
        assert statuses == ['confirmed', 'active', 'completed']
        assert response.get_json()['data']['canAdvance'] is False

        response = post_json(client, f'/api/bookings/{booking["id"]}/advance')
        data = response.get_json()
        assert response.status_code == 409
        assert data['type'] == 'InvalidTransitionError'
        assert data['context']['status'] == 'completed'

    def test_confirm_updates_cached_availability(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(2)).get_json()['data']
        post_json(client, f'/api/bookings/{booking["id"]}/advance')

        camera = client.get('/api/cameras/2').get_json()['data']
        assert camera['cachedAvailable'] == 1

    def test_set_status(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(1)).get_json()['data']

        response = post_json(client, f'/api/bookings/{booking["id"]}/status',
                             {'status': 'cancelled', 'notes': 'No deposit'},
                             headers={'X-Actor': 'manager'})
        data = response.get_json()['data']

        assert data['status'] == 'cancelled'
        assert data['adminNotes'] == 'No deposit'
        assert data['statusChangeLogs'][-1]['actor'] == 'manager'

    def test_set_status_requires_status(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(1)).get_json()['data']
        response = post_json(client, f'/api/bookings/{booking["id"]}/status', {})
        assert response.status_code == 400

    def test_set_status_stale_revision(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(1)).get_json()['data']
        post_json(client, f'/api/bookings/{booking["id"]}/advance')

        response = post_json(client, f'/api/bookings/{booking["id"]}/status',
                             {'status': 'cancelled', 'revision': booking['revision']})
        assert response.status_code == 409

    def test_history(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(1)).get_json()['data']
        post_json(client, f'/api/bookings/{booking["id"]}/advance')

        response = client.get(f'/api/bookings/{booking["id"]}/history')
        history = response.get_json()['data']
        assert [(h['oldStatus'], h['newStatus']) for h in history] == [
            (None, 'pending'), ('pending', 'confirmed')
        ]

    def test_delete_booking(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(2)).get_json()['data']
        post_json(client, f'/api/bookings/{booking["id"]}/advance')

        response = client.delete(f'/api/bookings/{booking["id"]}')
        assert response.status_code == 200
        assert client.get(f'/api/bookings/{booking["id"]}').status_code == 404
        assert client.get('/api/cameras/2').get_json()['data']['cachedAvailable'] == 2

    def test_list_and_filter(self, client):
        first = post_json(client, '/api/bookings', booking_payload(1)).get_json()['data']
        post_json(client, '/api/bookings', booking_payload(2))
        post_json(client, f'/api/bookings/{first["id"]}/advance')

        assert client.get('/api/bookings').get_json()['count'] == 2
        confirmed = client.get('/api/bookings?status=confirmed').get_json()['data']
        assert [b['id'] for b in confirmed] == [first['id']]
        assert client.get('/api/bookings?cameraId=2').get_json()['count'] == 1

    def test_list_unknown_status(self, client):
        assert client.get('/api/bookings?status=lost').status_code == 400

    def test_stats(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(1)).get_json()['data']
        post_json(client, '/api/bookings', booking_payload(2))
        for _ in range(3):
            post_json(client, f'/api/bookings/{booking["id"]}/advance')

        stats = client.get('/api/bookings/stats').get_json()['data']
        assert stats['total'] == 2
        assert stats['byStatus']['completed'] == 1
        assert stats['byStatus']['pending'] == 1
        assert stats['totalRevenue'] == booking['totalAmount']


class TestCalendarApi:
    """Calendar endpoints."""

    def test_day_events(self, client):
        post_json(client, '/api/bookings', booking_payload(1, startTime='10:30'))

        events = client.get('/api/calendar/day?date=2030-05-01').get_json()['data']['events']
        assert len(events) == 1
        assert events[0]['type'] == 'delivery'
        assert events[0]['projected'] is True
        assert events[0]['time'].startswith('2030-05-01T10:00:00')

        events = client.get('/api/calendar/day?date=2030-05-02').get_json()['data']['events']
        assert [e['type'] for e in events] == ['occupancy']

    def test_month_grid(self, client):
        post_json(client, '/api/bookings', booking_payload(1))

        data = client.get('/api/calendar/month?year=2030&month=5').get_json()['data']
        days = {d['date']: d for week in data['weeks'] for d in week}

        assert all(len(week) == 7 for week in data['weeks'])
        assert len(days['2030-05-02']['bookings']) == 1
        assert days['2030-05-04']['bookings'] == []

    def test_invalid_month(self, client):
        assert client.get('/api/calendar/month?year=2030&month=13').status_code == 400


class TestNotificationsApi:
    """Staff notification feed."""

    def test_operations_are_notified(self, client):
        booking = post_json(client, '/api/bookings', booking_payload(1)).get_json()['data']
        post_json(client, f'/api/bookings/{booking["id"]}/advance')

        notifications = client.get('/api/notifications').get_json()['data']
        assert notifications[0]['kind'] == 'success'
        assert 'Confirmed' in notifications[0]['message']
        assert len(notifications) == 2

    def test_limit(self, client):
        for _ in range(3):
            post_json(client, '/api/bookings', booking_payload(1))
        assert client.get('/api/notifications?limit=2').get_json()['count'] == 2

    def test_failed_status_write_is_rolled_back_and_notified(self, app, client):
        booking = post_json(client, '/api/bookings', booking_payload(2)).get_json()['data']
        confirmed = post_json(client, f'/api/bookings/{booking["id"]}/advance').get_json()['data']

        from database import get_db
        with app.app_context():
            get_db().execute('''
                CREATE TRIGGER fail_status_log BEFORE INSERT ON booking_status_logs
                BEGIN
                    SELECT RAISE(ABORT, 'log storage unavailable');
                END
            ''')

        response = post_json(client, f'/api/bookings/{booking["id"]}/status',
                             {'status': 'cancelled'})
        assert response.status_code == 500
        assert response.get_json()['type'] == 'PersistenceError'

        current = client.get(f'/api/bookings/{booking["id"]}').get_json()['data']
        assert current['status'] == 'confirmed'
        assert current['revision'] == confirmed['revision']
        assert len(current['statusChangeLogs']) == 2
        assert client.get('/api/cameras/2').get_json()['data']['cachedAvailable'] == 1

        latest = client.get('/api/notifications').get_json()['data'][0]
        assert latest['kind'] == 'error'
        assert 'log storage unavailable' in latest['message']


class TestLiveReads:
    """Catalog and calendar reads served from the live booking view."""

    def test_reads_subscribe_to_both_paths(self, app, client):
        from extensions import change_feed

        assert not change_feed.has_subscribers('bookings')
        client.get('/api/cameras')

        assert change_feed.has_subscribers('cameras')
        assert change_feed.has_subscribers('bookings')
        assert not app.extensions['live_view'].closed

    def test_confirm_is_reflected_in_later_reads(self, client):
        ids = [c['id'] for c in client.get('/api/cameras/offerable?date=2030-01-01')
               .get_json()['data']]
        assert 4 in ids

        booking = post_json(client, '/api/bookings', booking_payload(4)).get_json()['data']
        post_json(client, f'/api/bookings/{booking["id"]}/advance')

        ids = [c['id'] for c in client.get('/api/cameras/offerable?date=2030-01-01')
               .get_json()['data']]
        assert 4 not in ids
        cameras = client.get('/api/cameras?date=2030-01-01').get_json()['data']
        nikon = next(c for c in cameras if c['id'] == 4)
        assert nikon['available'] == 0
        assert nikon['cachedAvailable'] == 0

    def test_calendar_day_follows_new_bookings(self, client):
        day_url = '/api/calendar/day?date=2030-05-01'
        assert client.get(day_url).get_json()['data']['events'] == []

        post_json(client, '/api/bookings', booking_payload(2))

        events = client.get(day_url).get_json()['data']['events']
        assert [e['type'] for e in events] == ['delivery']

    def test_status_filter(self, client):
        client.put('/api/cameras/4', data=json.dumps({'status': 'maintenance'}),
                   content_type='application/json')

        data = client.get('/api/cameras?status=maintenance').get_json()
        assert [c['id'] for c in data['data']] == [4]
        assert client.get('/api/cameras?status=active').get_json()['count'] == 3

    def test_reset_refreshes_view(self, app, client):
        post_json(client, '/api/cameras', {'name': 'Leica Q3', 'dailyRate': 900000,
                                           'totalUnits': 1})
        assert client.get('/api/cameras').get_json()['count'] == 5

        from database import init_db
        with app.app_context():
            init_db()

        assert client.get('/api/cameras').get_json()['count'] == 4

    def test_close_releases_subscriptions(self, app, client):
        from extensions import change_feed, close_live_view

        client.get('/api/cameras/offerable')
        close_live_view(app)

        assert 'live_view' not in app.extensions
        assert not change_feed.has_subscribers('cameras')
        assert not change_feed.has_subscribers('bookings')
