from flask import Blueprint, jsonify, request
from flask_login import current_user
import logging

from services.factory import booking_service
from utils.decorators import admin_required, api_login_required
from utils.http import request_payload

logger = logging.getLogger(__name__)

bookings_bp = Blueprint('bookings', __name__, url_prefix='/bookings')


def _requester():
    return current_user.id, current_user.is_admin()


@bookings_bp.route('/availability', methods=['GET', 'POST'])
@bookings_bp.route('/check-availability', methods=['GET', 'POST'])
def check_availability():
    data = request.args.to_dict() if request.method == 'GET' else request_payload()
    return jsonify({'success': True, **booking_service().check_availability(data)})


@bookings_bp.route('', methods=['POST'])
def create_booking():
    """Signed-in users own the booking; anonymous requests become guest bookings"""
    user_id = current_user.id if current_user.is_authenticated else None
    booking = booking_service().create_booking(request_payload(), user_id=user_id)
    return jsonify({'success': True, 'message': 'Booking created successfully', 'booking': booking}), 201


@bookings_bp.route('/<booking_id>', methods=['PUT'])
@api_login_required
def update_booking(booking_id):
    booking = booking_service().update_booking(booking_id, request_payload(), current_user.id)
    return jsonify({'success': True, 'message': 'Booking updated successfully', 'booking': booking})


@bookings_bp.route('/<booking_id>/cancel', methods=['POST', 'PUT'])
@api_login_required
def cancel_booking(booking_id):
    booking = booking_service().cancel_booking(booking_id, current_user.id)
    return jsonify({'success': True, 'message': 'Booking cancelled successfully', 'booking': booking})


@bookings_bp.route('')
@bookings_bp.route('/me')
@api_login_required
def my_bookings():
    bookings = booking_service().get_user_bookings(current_user.id)
    return jsonify({'success': True, 'count': len(bookings), 'data': bookings})


@bookings_bp.route('/summary')
@api_login_required
def summary():
    return jsonify({'success': True, 'summary': booking_service().get_summary(current_user.id)})


@bookings_bp.route('/history')
@api_login_required
def history():
    return jsonify({'success': True, 'history': booking_service().get_history(current_user.id)})


@bookings_bp.route('/history/<email>')
@admin_required
def history_by_email(email):
    bookings = booking_service().get_history_by_email(email)
    return jsonify({'success': True, 'email': email, 'bookings': bookings})


@bookings_bp.route('/<booking_id>')
@api_login_required
def get_booking(booking_id):
    user_id, is_admin = _requester()
    return jsonify({'success': True, 'booking': booking_service().get_booking(booking_id, user_id, is_admin=is_admin)})
