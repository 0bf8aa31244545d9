"""
HTTP tests for /auth and /users: registration, session login, profile
management and admin user management.
"""
import io

from conftest import ADMIN_PASSWORD
from models import SessionUser


class TestAuthRoutes:

    def test_register(self, client):
        response = client.post('/auth/register', json={
            'name': 'Maria Santos', 'email': 'maria@example.com', 'password': 'password123',
        })
        assert response.status_code == 201
        body = response.get_json()
        assert body['success'] is True
        assert body['user']['email'] == 'maria@example.com'
        assert 'password_hash' not in body['user']

    def test_register_duplicate(self, client, user):
        response = client.post('/auth/register', json={
            'name': 'Copy', 'email': user['email'], 'password': 'password123',
        })
        assert response.status_code == 400
        assert response.get_json()['message'] == 'User with this email already exists'

    def test_register_validation(self, client):
        response = client.post('/auth/register', json={'name': '', 'email': 'bad'})
        assert response.status_code == 400
        body = response.get_json()
        assert body['success'] is False
        assert {error['field'] for error in body['errors']} == {'name', 'email', 'password'}

    def test_login_invalid(self, client, user):
        response = client.post('/auth/login', json={'email': user['email'], 'password': 'wrong-password'})
        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid credentials'

    def test_login_with_non_text_credentials(self, client, user):
        response = client.post('/auth/login', json={'email': 42, 'password': ['password123']})
        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid credentials'

    def test_login_and_logout(self, client, user, login):
        response = login(user['email'])
        assert response.get_json()['user']['id'] == user['id']
        assert client.get('/users/me').status_code == 200

        assert client.post('/auth/logout').status_code == 200
        assert client.get('/users/me').status_code == 401

    def test_anonymous_requests_rejected(self, client):
        response = client.get('/bookings/me')
        assert response.status_code == 401
        assert response.get_json() == {'success': False, 'message': 'Authentication required'}

    def test_csrf_token(self, client):
        body = client.get('/auth/csrf-token').get_json()
        assert body['success'] is True
        assert body['csrfToken']

    def test_health(self, client):
        response = client.get('/health')
        assert response.get_json()['storage'] == 'sqlalchemy'
        assert response.headers['X-Content-Type-Options'] == 'nosniff'


class TestProfileRoutes:

    def test_get_profile(self, client, user, login):
        login(user['email'])
        body = client.get('/users/me').get_json()
        assert body['user']['email'] == user['email']
        assert 'password_hash' not in body['user']

    def test_update_profile(self, client, user, login):
        login(user['email'])
        response = client.put('/users/me', json={'name': 'Renamed'})
        assert response.status_code == 200
        assert response.get_json()['user']['name'] == 'Renamed'

    def test_non_text_name_rejected(self, client, user, login):
        login(user['email'])
        response = client.put('/users/me', json={'name': 5})
        assert response.status_code == 400
        assert response.get_json()['errors'] == [{'field': 'name', 'message': 'Name must be text'}]

    def test_email_in_use(self, client, user, admin, login):
        login(user['email'])
        response = client.put('/users/me', json={'email': admin['email']})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Email is already in use'

    def test_profile_picture_upload(self, client, user, login):
        login(user['email'])
        response = client.put('/users/me', data={
            'name': 'With Picture',
            'profilePic': (io.BytesIO(b'image-bytes'), 'me.png'),
        }, content_type='multipart/form-data')
        assert response.status_code == 200
        profile = response.get_json()['user']
        assert profile['name'] == 'With Picture'
        assert profile['profilePic'].startswith('/uploads/')

        assert client.get(profile['profilePic']).status_code == 200

    def test_change_password(self, client, user, login):
        login(user['email'])
        response = client.post('/users/me/password', json={
            'currentPassword': 'password123', 'newPassword': 'brand-new-pass',
        })
        assert response.status_code == 200

        client.post('/auth/logout')
        login(user['email'], 'brand-new-pass')

    def test_change_password_wrong_current(self, client, user, login):
        login(user['email'])
        response = client.post('/users/me/password', json={
            'currentPassword': 'not-it', 'newPassword': 'brand-new-pass',
        })
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Current password is incorrect'


class TestAdminUserRoutes:

    def test_requires_admin(self, client, user, login):
        login(user['email'])
        response = client.get('/users')
        assert response.status_code == 403
        assert response.get_json()['message'] == 'Admin access required'

    def test_list_users(self, client, user, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        body = client.get('/users').get_json()
        assert body['count'] == 2

        body = client.get('/users?role=admin').get_json()
        assert [u['email'] for u in body['users']] == [admin['email']]

    def test_get_and_update_user(self, client, user, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        assert client.get(f"/users/{user['id']}").get_json()['user']['email'] == user['email']

        response = client.put(f"/users/{user['id']}", json={'role': 'admin'})
        assert response.status_code == 200
        assert response.get_json()['user']['role'] == 'admin'

    def test_missing_user(self, client, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        response = client.get('/users/does-not-exist')
        assert response.status_code == 404
        assert response.get_json()['message'] == 'User not found'

    def test_cannot_delete_admin(self, client, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        response = client.delete(f"/users/{admin['id']}")
        assert response.status_code == 403
        assert response.get_json()['message'] == 'Cannot delete admin users'

    def test_delete_user(self, client, user, admin, login):
        login(admin['email'], ADMIN_PASSWORD)
        assert client.delete(f"/users/{user['id']}").status_code == 200
        assert client.get(f"/users/{user['id']}").status_code == 404


class TestSessionUser:

    def test_role_levels(self):
        admin = SessionUser({'id': 'a1', 'role': 'admin'})
        member = SessionUser({'id': 'u1', 'role': 'user'})
        assert admin.has_role('admin') and admin.has_role('user')
        assert member.has_role('user')
        assert not member.has_role('admin')

    def test_unknown_role_has_no_access(self):
        assert not SessionUser({'id': 'x1', 'role': 'owner'}).has_role('user')
