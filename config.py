import os
import secrets
import logging
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))

FLASK_ENV = os.environ.get('FLASK_ENV', 'production')  # Default to production (secure)
IS_PRODUCTION = FLASK_ENV == 'production'
IS_DEVELOPMENT = FLASK_ENV == 'development'


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    _env_secret_key = os.environ.get('SECRET_KEY')
    if IS_PRODUCTION and not _env_secret_key:
        logging.warning(
            "WARNING: SECRET_KEY not set in production environment! "
            "Sessions will be invalidated on server restart. "
            "Set SECRET_KEY environment variable for persistent sessions."
        )
    SECRET_KEY = _env_secret_key or secrets.token_hex(32)

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///' + os.path.join(basedir, 'database', 'hotel.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }

    # Storage backend behind the repository layer: 'sqlalchemy' or 'memory'
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'sqlalchemy')

    # Booking rules
    BOOKING_OVERLAP_POLICY = os.environ.get('BOOKING_OVERLAP_POLICY', 'half_open')  # half_open | closed
    BOOKING_ROOM_FALLBACK = _env_bool('BOOKING_ROOM_FALLBACK', False)
    BOOKING_FALLBACK_PRICE = os.environ.get('BOOKING_FALLBACK_PRICE', '100')
    BOOKING_REJECT_PAST_DATES = _env_bool('BOOKING_REJECT_PAST_DATES', True)
    DEFAULT_LOCATION = os.environ.get('DEFAULT_LOCATION', 'Taguig, Metro Manila')

    # Pagination bounds
    ADMIN_PAGE_SIZE_DEFAULT = 10
    ADMIN_PAGE_SIZE_MIN = 5
    ADMIN_PAGE_SIZE_MAX = 50
    ROOM_PAGE_SIZE_DEFAULT = 10
    ROOM_PAGE_SIZE_MIN = 1
    ROOM_PAGE_SIZE_MAX = 100
    TOP_RATED_DEFAULT_LIMIT = 5

    # Uploads
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5MB per request
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(basedir, 'uploads'))
    UPLOAD_URL_PREFIX = '/uploads'
    ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

    # CSRF Protection (clients send the token in the X-CSRFToken header)
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600

    # Session Security - Secure by Default
    SESSION_COOKIE_SECURE = not IS_DEVELOPMENT
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Strict' if IS_PRODUCTION else 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600

    REMEMBER_COOKIE_SECURE = not IS_DEVELOPMENT
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_DURATION = 86400

    # Password Security
    PASSWORD_MIN_LENGTH = 6

    # Rate Limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = "200 per minute"
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL', 'memory://')
    LOGIN_RATE_LIMIT = "10 per minute"

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE', 'app.log')

    JSON_AS_ASCII = False


class DevelopmentConfig(Config):
    DEBUG = True
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False
    BOOKING_REJECT_PAST_DATES = False
    LOG_FILE = None
