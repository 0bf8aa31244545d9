"""
Access Control Decorators
JSON equivalents of flask_login.login_required for the API blueprints
"""
from functools import wraps
from flask import jsonify
from flask_login import current_user


def _deny(status, message):
    return jsonify({'success': False, 'message': message}), status


def api_login_required(f):
    """401 JSON response instead of a redirect to a login page"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return _deny(401, 'Authentication required')
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Require an authenticated admin"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return _deny(401, 'Authentication required')
        if not current_user.has_role('admin'):
            return _deny(403, 'Admin access required')
        return f(*args, **kwargs)
    return decorated_function

