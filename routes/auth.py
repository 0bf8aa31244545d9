from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, current_user
from flask_wtf.csrf import generate_csrf
import logging

from extensions import limiter
from models import SessionUser
from services.factory import user_service
from services.transformers import user_to_dict
from utils.decorators import api_login_required
from utils.http import request_payload

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


def _login_limit():
    return current_app.config.get('LOGIN_RATE_LIMIT', '10 per minute')


@auth_bp.route('/register', methods=['POST'])
def register():
    row = user_service().register(request_payload())
    return jsonify({
        'success': True,
        'message': 'User registered successfully',
        'user': user_to_dict(row),
    }), 201


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(_login_limit)
def login():
    data = request_payload()
    row = user_service().authenticate(data.get('email') or '', data.get('password') or '')

    remember = str(data.get('remember', '')).lower() in ('1', 'true', 'on')
    login_user(SessionUser(row), remember=remember)
    logger.info(f"User logged in: {row['email']}")
    return jsonify({
        'success': True,
        'message': 'Login successful',
        'user': user_to_dict(row),
    })


@auth_bp.route('/logout', methods=['POST'])
@api_login_required
def logout():
    logger.info(f'User logged out: {current_user.email}')
    logout_user()
    return jsonify({'success': True, 'message': 'Logged out successfully'})


@auth_bp.route('/csrf-token')
def csrf_token():
    """Token for the X-CSRFToken header on state-changing requests"""
    return jsonify({'success': True, 'csrfToken': generate_csrf()})
