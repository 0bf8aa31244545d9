#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Hotel Booking Backend
Flask Application Entry Point
"""

import os
import logging
import sqlite3
from datetime import datetime, timezone
from flask import Flask, jsonify, send_from_directory
from sqlalchemy import event
from sqlalchemy.engine import Engine
from werkzeug.exceptions import HTTPException
from config import Config
from extensions import csrf, limiter, login_manager
from models import db, SessionUser
from repositories import init_repositories, get_repositories
from routes import register_blueprints
from services.exceptions import AppError
from services.image_storage import LocalImageStorage

logger = logging.getLogger(__name__)


# Custom logging formatter with UTC timestamps
class UTCFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.strftime('%Y-%m-%d %H:%M:%S')

    def format(self, record):
        record.utc_time = self.formatTime(record)
        return super().format(record)


def configure_logging(app):
    formatter = UTCFormatter('%(utc_time)s [UTC] - %(name)s - %(levelname)s - %(message)s')

    root = logging.getLogger()
    root.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    if getattr(root, '_hotel_handlers', False):
        return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if app.config.get('LOG_FILE'):
        file_handler = logging.FileHandler(app.config['LOG_FILE'], encoding='utf-8')
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    root._hotel_handlers = True


# SQLite pragmas for WAL mode, FK enforcement and better concurrency
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _error_response(message, status, **extra):
    body = {'success': False, 'message': message}
    body.update(extra)
    return jsonify(body), status


def register_error_handlers(app):

    @app.errorhandler(AppError)
    def handle_app_error(error):
        if error.status_code >= 500:
            logger.error(f'{type(error).__name__}: {error.message}')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code == 413:
            return _error_response('File too large', 413)
        return _error_response(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f'Unhandled error: {error}')
        db.session.rollback()
        return _error_response('Internal server error', 500)


def create_app(config_class=Config, image_storage=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if uri.startswith('sqlite:///') and ':memory:' not in uri:
        db_dir = os.path.dirname(uri[len('sqlite:///'):])
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir)

    db.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    if app.config.get('RATELIMIT_ENABLED', True):
        logger.info(f"Rate limiting enabled: {app.config.get('RATELIMIT_DEFAULT')}")

    init_repositories(app)
    app.extensions['image_storage'] = image_storage or LocalImageStorage(
        app.config['UPLOAD_FOLDER'],
        url_prefix=app.config.get('UPLOAD_URL_PREFIX', '/uploads'),
        allowed_extensions=app.config.get('ALLOWED_EXTENSIONS'),
    )

    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        row = get_repositories().users.get(user_id)
        return SessionUser(row) if row else None

    @login_manager.unauthorized_handler
    def unauthorized():
        return _error_response('Authentication required', 401)

    register_blueprints(app)
    register_error_handlers(app)

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    @app.route('/health')
    def health():
        return jsonify({'success': True, 'status': 'ok', 'storage': get_repositories().backend})

    # Security Headers - Protect against common attacks
    @app.after_request
    def add_security_headers(response):
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Permissions-Policy'] = 'geolocation=(), microphone=(), camera=()'

        # HSTS only when HTTPS is actually enabled
        if app.config.get('SESSION_COOKIE_SECURE') and app.config.get('PREFERRED_URL_SCHEME') == 'https':
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        if response.mimetype == 'application/json':
            response.headers['Cache-Control'] = 'no-store'
        return response

    if app.config.get('STORAGE_BACKEND', 'sqlalchemy') == 'sqlalchemy':
        with app.app_context():
            db.create_all()

    return app


if __name__ == '__main__':
    flask_env = os.environ.get('FLASK_ENV', 'production')
    debug_mode = flask_env == 'development'

    app = create_app()

    logger.info(f"Application starting in {flask_env} mode")
    logger.info(f"Debug mode: {debug_mode}")
    logger.info(f"CSRF protection: {app.config.get('WTF_CSRF_ENABLED', False)}")
    logger.info(f"Storage backend: {app.config.get('STORAGE_BACKEND')}")

    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=debug_mode)
