#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Room Service
Room catalog queries and admin room management, including image uploads
through the configured ImageStorage.
"""
import logging
from urllib.parse import quote

from models.room import ROOM_PLACEHOLDER_IMAGE
from repositories import RoomFilters
from services.exceptions import NotFoundError, ValidationError
from services.transformers import room_to_dict
from utils.decimal_utils import parse_decimal_input
from utils.list_parser import parse_list_field
from utils.pagination import build_pagination, normalize_limit, normalize_page, page_offset
from utils.validators import validate_room

module_logger = logging.getLogger(__name__)

PLACEHOLDER_URL = 'https://placehold.co/600x400/png?text=Room+{title}'

TRUE_VALUES = ('true', '1', 'yes', 'on')

# request key -> (row column, parser)
ROOM_FIELDS = {
    'title': ('title', str.strip),
    'roomNumber': ('room_number', str.strip),
    'type': ('type', str.strip),
    'description': ('description', None),
    'fullDescription': ('full_description', None),
    'price': ('price', 'money'),
    'discount': ('discount', 'money'),
    'capacity': ('capacity', 'int'),
    'size': ('size', 'int'),
    'category': ('category', str.strip),
    'location': ('location', str.strip),
    'amenities': ('amenities', 'list'),
    'featured': ('featured', 'flag'),
    'isAvailable': ('is_available', 'flag'),
    'imageUrl': ('image_url', None),
}

SNAKE_ALIASES = {
    'room_number': 'roomNumber',
    'full_description': 'fullDescription',
    'is_available': 'isAvailable',
    'image_url': 'imageUrl',
}


def parse_flag(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _normalize_keys(data):
    normalized = dict(data)
    for snake, camel in SNAKE_ALIASES.items():
        if snake in normalized and camel not in normalized:
            normalized[camel] = normalized.pop(snake)
    return normalized


def _convert(value, parser):
    if parser is None:
        return value
    if parser == 'money':
        if value is None or value == '':
            return None
        return parse_decimal_input(value, quantize='0.01')
    if parser == 'int':
        if value is None or value == '':
            return None
        return int(parse_decimal_input(value))
    if parser == 'list':
        return parse_list_field(value)
    if parser == 'flag':
        return parse_flag(value)
    return parser(value) if isinstance(value, str) else value


def room_fields_from(data):
    """Map a request payload onto row columns; only supplied keys are kept"""
    data = _normalize_keys(data)
    fields = {}
    for key, (column, parser) in ROOM_FIELDS.items():
        if key in data:
            fields[column] = _convert(data[key], parser)
    return fields


def placeholder_image(room):
    """Top-rated cards replace local /images/ assets with a hosted placeholder"""
    image = room.get('imageUrl')
    if image and image.startswith('/images/'):
        room['imageUrl'] = PLACEHOLDER_URL.format(title=quote(room.get('title') or '', safe=''))
    return room


class RoomService:

    def __init__(self, repositories, config, image_storage=None, logger=None):
        self.rooms = repositories.rooms
        self.config = config
        self.image_storage = image_storage
        self.logger = logger or module_logger

    def _page_args(self, args):
        page = normalize_page(args.get('page'))
        limit = normalize_limit(
            args.get('limit'),
            self.config.get('ROOM_PAGE_SIZE_DEFAULT', 10),
            self.config.get('ROOM_PAGE_SIZE_MIN', 1),
            self.config.get('ROOM_PAGE_SIZE_MAX', 100),
        )
        return page, limit

    def _page(self, filters, args):
        page, limit = self._page_args(args)
        rows, total = self.rooms.search(filters, page_offset(page, limit), limit)
        return {
            'count': total,
            'pagination': build_pagination(page, limit, total),
            'rooms': [room_to_dict(row) for row in rows],
        }

    def get_room_or_404(self, room_id):
        room = self.rooms.get(room_id)
        if room is None:
            raise NotFoundError('Room not found')
        return room

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_rooms(self, args):
        return self._page(RoomFilters(), args)

    def search_rooms(self, args):
        filters = RoomFilters(
            category=(args.get('category') or '').strip() or None,
            min_price=self._price_filter(args, 'minPrice'),
            max_price=self._price_filter(args, 'maxPrice'),
            location=(args.get('location') or '').strip() or None,
            capacity=self._capacity_filter(args),
            search=(args.get('search') or '').strip() or None,
        )
        return self._page(filters, args)

    def rooms_by_category(self, category, args):
        result = self._page(RoomFilters(category=category), args)
        result['category'] = category
        return result

    @staticmethod
    def _price_filter(args, key):
        value = args.get(key)
        if value in (None, ''):
            return None
        try:
            return parse_decimal_input(value, error_label=key)
        except ValueError as e:
            raise ValidationError('Invalid search filter', [{'field': key, 'message': str(e)}])

    @staticmethod
    def _capacity_filter(args):
        value = args.get('capacity')
        if value in (None, ''):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError('Invalid search filter', [{'field': 'capacity', 'message': 'capacity must be a number'}])

    def top_rated(self, limit=None):
        try:
            limit = int(limit) if limit not in (None, '') else 0
        except (TypeError, ValueError):
            limit = 0
        limit = limit if limit > 0 else self.config.get('TOP_RATED_DEFAULT_LIMIT', 5)
        return [placeholder_image(room_to_dict(row)) for row in self.rooms.top_rated(limit)]

    def categories(self):
        return self.rooms.categories()

    def get_room(self, room_id):
        room = room_to_dict(self.get_room_or_404(room_id))
        room['reviewCount'] = room['reviews']
        room['reviews'] = []
        return room

    # ------------------------------------------------------------------
    # Admin mutations
    # ------------------------------------------------------------------
    def _validated_fields(self, data, partial):
        errors = validate_room(_normalize_keys(data), partial=partial)
        if errors:
            raise ValidationError('Validation failed', errors)
        return room_fields_from(data)

    def create_room(self, data, files=None):
        fields = self._validated_fields(data, partial=False)
        fields['images'] = parse_list_field(data.get('images'))
        if not fields.get('image_url'):
            fields.pop('image_url', None)

        row = self.rooms.add(fields)
        self.logger.info(f"Room created: {row['title']} ({row['id']})")

        files = [file for file in (files or []) if file and getattr(file, 'filename', None)]
        if files:
            row = self._attach(row, self._upload_all(row['id'], files), set_main=False)
        return room_to_dict(row)

    def update_room(self, room_id, data):
        self.get_room_or_404(room_id)
        fields = self._validated_fields(data, partial=True)
        row = self.rooms.update(room_id, fields)
        self.logger.info(f"Room updated: {room_id} ({', '.join(sorted(fields)) or 'no fields'})")
        return room_to_dict(row)

    def delete_room(self, room_id):
        room = self.get_room_or_404(room_id)
        self.rooms.delete(room_id)
        if self.image_storage:
            for url in set(room.get('images') or []) | {room.get('image_url')}:
                self.image_storage.delete(url)
        self.logger.info(f"Room deleted: {room.get('title')} ({room_id})")

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------
    def _require_storage(self):
        if self.image_storage is None:
            raise ValidationError('Image uploads are not configured')
        return self.image_storage

    def _upload_all(self, room_id, files):
        storage = self._require_storage()
        return [storage.upload(f'rooms/{room_id}', file) for file in files]

    def _attach(self, room, urls, set_main):
        images = list(room.get('images') or [])
        for url in urls:
            if url not in images:
                images.append(url)

        fields = {'images': images}
        current = room.get('image_url')
        if urls and (set_main or not current or current == ROOM_PLACEHOLDER_IMAGE):
            fields['image_url'] = urls[0]
        return self.rooms.update(room['id'], fields)

    def attach_image(self, room_id, file):
        """Upload one image and make it the main image"""
        room = self.get_room_or_404(room_id)
        if not file or not getattr(file, 'filename', None):
            raise ValidationError('No image file provided', [{'field': 'image', 'message': 'No image file provided'}])
        url = self._require_storage().upload(f'rooms/{room_id}', file)
        self._attach(room, [url], set_main=True)
        self.logger.info(f'Room {room_id} main image set to {url}')
        return url

    def attach_images(self, room_id, files):
        """Upload several images; the first becomes main only if the room has none"""
        room = self.get_room_or_404(room_id)
        files = [file for file in (files or []) if file and getattr(file, 'filename', None)]
        if not files:
            raise ValidationError('No image files provided', [{'field': 'images', 'message': 'No image files provided'}])
        urls = self._upload_all(room_id, files)
        self._attach(room, urls, set_main=False)
        self.logger.info(f'Room {room_id}: {len(urls)} images added')
        return urls
