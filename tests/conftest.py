"""
Shared fixtures: app factories for both storage backends, seeded users and
rooms, and a login helper for the Flask test client.
"""
import pytest

from app import create_app
from config import TestingConfig
from models import db
from repositories import get_repositories
from services.image_storage import LocalImageStorage
from services.room_service import RoomService
from services.user_service import UserService

USER_PASSWORD = 'password123'
ADMIN_PASSWORD = 'admin12345'

ROOM_DATA = {
    'title': 'Ocean Breeze Suite',
    'description': 'Sea view suite',
    'price': '100.00',
    'capacity': 2,
    'size': 40,
    'category': 'suite-room',
    'location': 'Taguig, Metro Manila',
    'amenities': 'WiFi, TV',
}


class MemoryTestingConfig(TestingConfig):
    STORAGE_BACKEND = 'memory'


def _build_app(config_class, tmp_path):
    upload_dir = str(tmp_path / 'uploads')
    storage = LocalImageStorage(upload_dir, allowed_extensions=TestingConfig.ALLOWED_EXTENSIONS)
    app = create_app(config_class, image_storage=storage)
    app.config['UPLOAD_FOLDER'] = upload_dir
    return app


def _teardown(app):
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app(tmp_path):
    """SQLAlchemy backend on in-memory SQLite"""
    app = _build_app(TestingConfig, tmp_path)
    yield app
    _teardown(app)


@pytest.fixture(params=['sqlalchemy', 'memory'])
def any_app(request, tmp_path):
    """The same app on each storage backend"""
    config_class = MemoryTestingConfig if request.param == 'memory' else TestingConfig
    app = _build_app(config_class, tmp_path)
    yield app
    _teardown(app)


@pytest.fixture
def client(app):
    return app.test_client()


def create_user(app, email='user@example.com', password=USER_PASSWORD, role='user', name='Test User'):
    with app.app_context():
        service = UserService(get_repositories(), app.config)
        return service.register({'name': name, 'email': email, 'password': password}, role=role)


def create_room(app, **overrides):
    data = dict(ROOM_DATA)
    data.update(overrides)
    with app.app_context():
        return RoomService(get_repositories(), app.config).create_room(data)


@pytest.fixture
def user(app):
    return create_user(app)


@pytest.fixture
def admin(app):
    return create_user(app, email='admin@example.com', password=ADMIN_PASSWORD, role='admin', name='Admin')


@pytest.fixture
def room(app):
    return create_room(app)


@pytest.fixture
def login(client):
    def _login(email, password=USER_PASSWORD):
        response = client.post('/auth/login', json={'email': email, 'password': password})
        assert response.status_code == 200, response.get_json()
        return response
    return _login
