from flask import Blueprint, jsonify, request
from flask_login import current_user
import logging

from services.factory import booking_service, room_service
from utils.decorators import admin_required
from utils.http import request_files, request_payload

logger = logging.getLogger(__name__)

rooms_bp = Blueprint('rooms', __name__, url_prefix='/rooms')


# ============== Catalog ==============
@rooms_bp.route('')
def list_rooms():
    return jsonify({'success': True, **room_service().list_rooms(request.args)})


@rooms_bp.route('/search')
def search_rooms():
    """Filters: category, minPrice, maxPrice, location, capacity, search"""
    return jsonify({'success': True, **room_service().search_rooms(request.args)})


@rooms_bp.route('/top-rated')
def top_rated():
    rooms = room_service().top_rated(request.args.get('limit'))
    return jsonify({'success': True, 'count': len(rooms), 'data': rooms})


@rooms_bp.route('/categories')
def categories():
    categories = room_service().categories()
    return jsonify({'success': True, 'count': len(categories), 'categories': categories})


@rooms_bp.route('/category/<category>')
def rooms_by_category(category):
    return jsonify({'success': True, **room_service().rooms_by_category(category, request.args)})


@rooms_bp.route('/<room_id>')
def get_room(room_id):
    return jsonify({'success': True, 'room': room_service().get_room(room_id)})


@rooms_bp.route('/<room_id>/availability')
def room_availability(room_id):
    query = {
        'roomId': room_id,
        'checkIn': request.args.get('checkIn'),
        'checkOut': request.args.get('checkOut'),
    }
    return jsonify({'success': True, **booking_service().check_availability(query)})


# ============== Admin ==============
@rooms_bp.route('', methods=['POST'])
@admin_required
def create_room():
    room = room_service().create_room(request_payload(), files=request_files('images'))
    logger.info(f"Room {room['id']} created by {current_user.email}")
    return jsonify({'success': True, 'message': 'Room created successfully', 'room': room}), 201


@rooms_bp.route('/<room_id>', methods=['PUT'])
@admin_required
def update_room(room_id):
    room = room_service().update_room(room_id, request_payload())
    return jsonify({'success': True, 'message': 'Room updated successfully', 'room': room})


@rooms_bp.route('/<room_id>', methods=['DELETE'])
@admin_required
def delete_room(room_id):
    room_service().delete_room(room_id)
    return jsonify({'success': True, 'message': 'Room deleted successfully'})


@rooms_bp.route('/<room_id>/image', methods=['POST'])
@admin_required
def upload_room_image(room_id):
    image_url = room_service().attach_image(room_id, request.files.get('image'))
    return jsonify({'success': True, 'message': 'Room image uploaded successfully', 'imageUrl': image_url})


@rooms_bp.route('/<room_id>/images', methods=['POST'])
@admin_required
def upload_room_images(room_id):
    image_urls = room_service().attach_images(room_id, request_files('images'))
    return jsonify({
        'success': True,
        'message': 'Room images uploaded successfully',
        'count': len(image_urls),
        'imageUrls': image_urls,
    })
