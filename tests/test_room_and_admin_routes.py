"""
HTTP tests for the public room catalog, admin room management and the
/admin dashboard and booking management endpoints.
"""
import io

from conftest import ADMIN_PASSWORD, ROOM_DATA, create_room


class TestCatalogRoutes:

    def test_list_rooms(self, client, room):
        body = client.get('/rooms').get_json()
        assert body['success'] is True
        assert body['count'] == 1
        assert body['rooms'][0]['id'] == room['id']
        assert body['pagination']['currentPage'] == 1

    def test_search(self, app, client, room):
        create_room(app, title='Penthouse', price='900', category='penthouse-room')
        body = client.get('/rooms/search?minPrice=500').get_json()
        assert [r['title'] for r in body['rooms']] == ['Penthouse']

    def test_search_bad_filter(self, client):
        response = client.get('/rooms/search?maxPrice=lots')
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Invalid search filter'

    def test_top_rated_and_categories(self, client, room):
        body = client.get('/rooms/top-rated?limit=3').get_json()
        assert body['count'] == 1
        assert body['data'][0]['imageUrl'].startswith('https://placehold.co/')

        body = client.get('/rooms/categories').get_json()
        assert body['categories'] == [{'name': 'suite-room', 'count': 1, 'image': room['imageUrl']}]

    def test_by_category(self, client, room):
        body = client.get('/rooms/category/suite-room').get_json()
        assert body['category'] == 'suite-room'
        assert body['count'] == 1

    def test_room_detail(self, client, room):
        body = client.get(f"/rooms/{room['id']}").get_json()
        assert body['room']['title'] == ROOM_DATA['title']
        assert body['room']['reviews'] == []

    def test_room_not_found(self, client):
        response = client.get('/rooms/missing')
        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'message': 'Room not found'}


class TestAdminRoomRoutes:

    def test_create_requires_admin(self, client, user, login):
        login(user['email'])
        assert client.post('/rooms', json=ROOM_DATA).status_code == 403

    def test_create_requires_login(self, client):
        assert client.post('/rooms', json=ROOM_DATA).status_code == 401

    def test_create_json(self, client, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        response = client.post('/rooms', json=dict(ROOM_DATA, amenities=['Pool', 'Gym']))
        assert response.status_code == 201
        assert response.get_json()['room']['amenities'] == ['Pool', 'Gym']

    def test_create_multipart_with_images(self, client, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        data = {key: str(value) for key, value in ROOM_DATA.items()}
        data['amenities'] = '["Pool"]'
        data['images'] = [(io.BytesIO(b'one'), 'one.png'), (io.BytesIO(b'two'), 'two.jpg')]
        response = client.post('/rooms', data=data, content_type='multipart/form-data')
        assert response.status_code == 201
        room = response.get_json()['room']
        assert room['amenities'] == ['Pool']
        assert len(room['images']) == 2
        assert room['imageUrl'] == room['images'][0]

    def test_update_and_delete(self, client, room, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        response = client.put(f"/rooms/{room['id']}", json={'title': 'Renamed Suite', 'featured': True})
        assert response.status_code == 200
        assert response.get_json()['room']['title'] == 'Renamed Suite'
        assert response.get_json()['room']['featured'] is True

        assert client.delete(f"/rooms/{room['id']}").status_code == 200
        assert client.get(f"/rooms/{room['id']}").status_code == 404

    def test_update_rejects_non_text_title(self, client, room, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        response = client.put(f"/rooms/{room['id']}", json={'title': 5})
        assert response.status_code == 400
        assert response.get_json()['errors'] == [{'field': 'title', 'message': 'Title must be text'}]

    def test_upload_single_image(self, client, room, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        response = client.post(f"/rooms/{room['id']}/image", data={
            'image': (io.BytesIO(b'img'), 'cover.png'),
        }, content_type='multipart/form-data')
        assert response.status_code == 200
        image_url = response.get_json()['imageUrl']
        assert client.get(f"/rooms/{room['id']}").get_json()['room']['imageUrl'] == image_url

    def test_upload_without_file(self, client, room, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        response = client.post(f"/rooms/{room['id']}/images", data={}, content_type='multipart/form-data')
        assert response.status_code == 400
        assert response.get_json()['message'] == 'No image files provided'


class TestAdminRoutes:

    def _seed(self, client, room, count=3):
        ids = []
        for day in range(1, count + 1):
            response = client.post('/bookings', json={
                'roomId': room['id'], 'checkIn': f'2030-03-{day:02d}', 'checkOut': f'2030-03-{day + 1:02d}',
            })
            ids.append(response.get_json()['booking']['id'])
        return ids

    def test_dashboard(self, client, room, admin, login):
        self._seed(client, room, count=2)
        login(admin['email'], ADMIN_PASSWORD)
        dashboard = client.get('/admin/dashboard').get_json()['dashboard']
        assert dashboard['totalBookings'] == 2
        assert dashboard['totalRooms'] == 1
        assert dashboard['totalRevenue'] == 200.0
        assert len(dashboard['recentBookings']) == 2

    def test_system_health(self, client, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        body = client.get('/admin/system-health').get_json()
        assert body['success'] is True
        health = body['health']
        assert health['status'] == 'healthy'
        assert health['database']['status'] == 'connected'
        assert health['database']['backend'] == 'sqlalchemy'
        assert health['database']['responseTime'].endswith('ms')
        assert health['server']['pythonVersion']
        assert health['timestamp']

    def test_system_health_requires_admin(self, client, user, login):
        assert client.get('/admin/system-health').status_code == 401
        login(user['email'])
        assert client.get('/admin/system-health').status_code == 403

    def test_dashboard_requires_admin(self, client, user, login):
        login(user['email'])
        assert client.get('/admin/dashboard').status_code == 403

    def test_list_bookings(self, client, room, admin, login):
        self._seed(client, room)
        login(admin['email'], ADMIN_PASSWORD)
        body = client.get('/admin/bookings?limit=1000').get_json()
        assert body['count'] == 3
        assert body['pagination']['itemsPerPage'] == 50
        assert body['bookings'][0]['roomTitle'] == ROOM_DATA['title']

    def test_list_bookings_bad_status(self, client, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        assert client.get('/admin/bookings?status=archived').status_code == 400

    def test_status_update(self, client, room, admin, login):
        booking_id = self._seed(client, room, count=1)[0]
        login(admin['email'], ADMIN_PASSWORD)

        response = client.patch(f'/admin/bookings/{booking_id}/status', json={'status': 'completed'})
        assert response.status_code == 200
        assert response.get_json()['booking']['status'] == 'completed'

        response = client.put(f'/admin/bookings/{booking_id}/status', json={'status': 'pending'})
        assert response.status_code == 400

    def test_admin_cancel_and_detail(self, client, room, admin, login):
        booking_id = self._seed(client, room, count=1)[0]
        login(admin['email'], ADMIN_PASSWORD)

        response = client.post(f'/admin/bookings/{booking_id}/cancel')
        assert response.status_code == 200
        detail = client.get(f'/admin/bookings/{booking_id}').get_json()['booking']
        assert detail['status'] == 'cancelled'
        assert 'userName' in detail

    def test_admin_booking_not_found(self, client, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        assert client.get('/admin/bookings/missing').status_code == 404

    def test_admin_rooms(self, client, room, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        body = client.get('/admin/rooms?search=ocean').get_json()
        assert body['count'] == 1
