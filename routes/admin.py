"""
Admin Panel Routes
Dashboard statistics and booking management for admins
"""
from flask import Blueprint, jsonify, request
from flask_login import current_user
import logging

from services.factory import booking_service, dashboard_service, room_service
from utils.decorators import admin_required
from utils.http import request_payload

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


# ============== Dashboard ==============
@admin_bp.route('/dashboard')
@admin_required
def dashboard():
    """Totals, revenue and recent activity"""
    return jsonify({'success': True, 'dashboard': dashboard_service().get_stats()})


@admin_bp.route('/system-health')
@admin_required
def system_health():
    return jsonify({'success': True, 'health': dashboard_service().system_health()})


# ============== Booking Management ==============
@admin_bp.route('/bookings')
@admin_required
def list_bookings():
    """Filters: status, fromDate, toDate, userId, roomId, search; paged by page/limit"""
    return jsonify({'success': True, **booking_service().list_bookings(request.args)})


@admin_bp.route('/bookings/<booking_id>')
@admin_required
def get_booking(booking_id):
    return jsonify({'success': True, 'booking': booking_service().get_admin_booking(booking_id)})


@admin_bp.route('/bookings/<booking_id>/status', methods=['PATCH', 'PUT'])
@admin_required
def update_booking_status(booking_id):
    booking = booking_service().update_status(booking_id, request_payload(), actor_id=current_user.id)
    return jsonify({'success': True, 'message': 'Booking status updated successfully', 'booking': booking})


@admin_bp.route('/bookings/<booking_id>/cancel', methods=['POST'])
@admin_required
def cancel_booking(booking_id):
    booking = booking_service().cancel_booking(booking_id, current_user.id, is_admin=True)
    return jsonify({'success': True, 'message': 'Booking cancelled successfully', 'booking': booking})


# ============== Room Management ==============
@admin_bp.route('/rooms')
@admin_required
def list_rooms():
    return jsonify({'success': True, **room_service().search_rooms(request.args)})
