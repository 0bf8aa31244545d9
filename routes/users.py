from flask import Blueprint, jsonify, request
from flask_login import current_user
import logging

from services.factory import user_service
from utils.decorators import admin_required, api_login_required
from utils.http import request_payload

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__, url_prefix='/users')


# ============== Own profile ==============
@users_bp.route('/me')
@api_login_required
def get_profile():
    return jsonify({'success': True, 'user': user_service().get_profile(current_user.id)})


@users_bp.route('/me', methods=['PUT'])
@api_login_required
def update_profile():
    """JSON or multipart; a `profilePic` file replaces the current picture"""
    user = user_service().update_profile(current_user.id, request_payload(), file=request.files.get('profilePic'))
    return jsonify({'success': True, 'message': 'Profile updated successfully', 'user': user})


@users_bp.route('/me/password', methods=['POST'])
@api_login_required
def change_password():
    user_service().change_password(current_user.id, request_payload())
    return jsonify({'success': True, 'message': 'Password changed successfully'})


# ============== Admin ==============
@users_bp.route('')
@admin_required
def list_users():
    users = user_service().list_users(search=request.args.get('search'), role=request.args.get('role'))
    return jsonify({'success': True, 'count': len(users), 'users': users})


@users_bp.route('/<user_id>')
@admin_required
def get_user(user_id):
    return jsonify({'success': True, 'user': user_service().get_user(user_id)})


@users_bp.route('/<user_id>', methods=['PUT'])
@admin_required
def update_user(user_id):
    user = user_service().update_user(user_id, request_payload(), actor_id=current_user.id)
    return jsonify({'success': True, 'message': 'User updated successfully', 'user': user})


@users_bp.route('/<user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    user_service().delete_user(user_id, actor_id=current_user.id)
    return jsonify({'success': True, 'message': 'User deleted successfully'})
