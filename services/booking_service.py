#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Booking Service
Availability checks, booking creation/update/cancellation, admin listing and
per-user history. All storage goes through the repositories; all response
shaping goes through services.transformers.
"""
import logging
import random
import time
from decimal import Decimal

from repositories import BookingFilters
from services.exceptions import ConflictError, NotFoundError, ValidationError
from services.transformers import admin_booking_to_dict, booking_to_dict, BASE_PRICE_RATIO, TAX_RATIO
from utils.dates import calculate_nights, parse_date, utc_now, utc_today
from utils.decimal_utils import parse_decimal_input, percentage_of, to_decimal, to_float
from utils.pagination import build_pagination, normalize_limit, normalize_page, page_offset
from utils.validators import (
    room_id_from, validate_availability_query, validate_booking_create,
    validate_booking_update, validate_status_update,
)

module_logger = logging.getLogger(__name__)

GUEST_FIRST_NAME = 'Guest'
GUEST_LAST_NAME = 'User'
GUEST_EMAIL = 'guest@example.com'
GUEST_PHONE = 'N/A'

ACCESS_DENIED = 'Booking not found or access denied'

REF_ATTEMPTS = 5


def generate_booking_ref():
    """BK-<last 6 digits of epoch ms>-<0..999>"""
    millis = str(int(time.time() * 1000))
    return f'BK-{millis[-6:]}-{random.randint(0, 999)}'


def guest_identifier():
    return f'guest-{int(time.time() * 1000)}'


def _owned_by(booking, user_id):
    return bool(user_id) and user_id in (booking.get('user_id'), booking.get('guest_id'))


def _text(data, key, default):
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return value


class BookingService:
    """
    repositories: repositories.Repositories bundle
    config: mapping with the BOOKING_* and page-size settings
    logger: optional; defaults to this module's logger
    """

    def __init__(self, repositories, config, logger=None):
        self.rooms = repositories.rooms
        self.bookings = repositories.bookings
        self.users = repositories.users
        self.config = config
        self.logger = logger or module_logger

    @property
    def overlap_policy(self):
        return self.config.get('BOOKING_OVERLAP_POLICY', 'half_open')

    def _today_for_validation(self):
        return utc_today() if self.config.get('BOOKING_REJECT_PAST_DATES', False) else None

    def _owned_booking(self, booking_id, user_id, is_admin=False):
        booking = self.bookings.get(booking_id)
        if booking is None or not (is_admin or _owned_by(booking, user_id)):
            raise NotFoundError(ACCESS_DENIED)
        return booking

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------
    def check_availability(self, data):
        errors = validate_availability_query(data)
        if errors:
            raise ValidationError('Room ID, check-in and check-out dates are required', errors)

        room_id = room_id_from(data)
        room = self.rooms.get(room_id)
        if room is None:
            raise NotFoundError('Room not found')

        if room.get('is_available') is False:
            return {'available': False, 'message': 'Room is not available for booking'}

        check_in = parse_date(data['checkIn'])
        check_out = parse_date(data['checkOut'])
        conflicts = self.bookings.find_overlapping(room_id, check_in, check_out, self.overlap_policy)
        available = not conflicts
        return {
            'available': available,
            'message': 'Room is available for the selected dates' if available
            else 'Room is already booked for the selected dates',
        }

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    def _resolve_room(self, data):
        room_id = room_id_from(data)
        if room_id:
            room = self.rooms.get(room_id)
            if room is None:
                raise NotFoundError('Room not found')
            return room

        if not self.config.get('BOOKING_ROOM_FALLBACK', False):
            raise ValidationError('Room ID is required', [{'field': 'roomId', 'message': 'Room ID is required'}])

        room = self.rooms.first()
        if room is None:
            raise ValidationError(
                'Invalid room ID and no fallback rooms available',
                [{'field': 'roomId', 'message': 'Please select a valid room'}]
            )
        self.logger.warning(f"Booking request without a valid room id, falling back to room {room['id']}")
        return room

    def _owner_fields(self, data, user_id):
        if user_id:
            return {'user_id': user_id, 'guest_id': None}
        body_user = data.get('userId')
        if body_user and self.users.get(str(body_user)):
            return {'user_id': str(body_user), 'guest_id': None}
        return {'user_id': None, 'guest_id': guest_identifier()}

    def _totals(self, data, room, nights):
        if data.get('totalPrice') not in (None, ''):
            total = parse_decimal_input(data['totalPrice'], quantize='0.01', error_label='Total price')
        else:
            price = room.get('price')
            if not price:
                price = self.config.get('BOOKING_FALLBACK_PRICE', '100')
                self.logger.warning(f"Room {room['id']} has no price, using fallback {price}")
            total = to_decimal(Decimal(str(price)) * nights)

        base = data.get('basePrice')
        tax = data.get('taxAndFees')
        base = to_decimal(base) if base not in (None, '') else percentage_of(total, BASE_PRICE_RATIO)
        tax = to_decimal(tax) if tax not in (None, '') else percentage_of(total, TAX_RATIO)
        return total, base, tax

    def _insert_with_unique_ref(self, fields):
        for attempt in range(1, REF_ATTEMPTS + 1):
            fields['booking_ref'] = generate_booking_ref()
            try:
                return self.bookings.add(fields)
            except ConflictError:
                if attempt == REF_ATTEMPTS:
                    raise
                self.logger.warning(f"Booking reference {fields['booking_ref']} already taken, regenerating")

    def create_booking(self, data, user_id=None):
        """
        Create a confirmed booking. Availability is not re-checked here;
        clients call check_availability first.
        """
        errors = validate_booking_create(
            data,
            require_room=not self.config.get('BOOKING_ROOM_FALLBACK', False),
            today=self._today_for_validation(),
        )
        if errors:
            raise ValidationError('Validation failed', errors)

        room = self._resolve_room(data)
        check_in = parse_date(data['checkIn'])
        check_out = parse_date(data['checkOut'])

        if data.get('nights') not in (None, ''):
            nights = int(str(data['nights']).strip())
        else:
            nights = calculate_nights(check_in, check_out)

        total, base, tax = self._totals(data, room, nights)

        fields = {
            'room_id': room['id'],
            'first_name': _text(data, 'firstName', GUEST_FIRST_NAME),
            'last_name': _text(data, 'lastName', GUEST_LAST_NAME),
            'email': _text(data, 'email', GUEST_EMAIL),
            'phone': _text(data, 'phone', GUEST_PHONE),
            'room_type': _text(data, 'roomType', room.get('type') or 'standard'),
            'room_title': _text(data, 'roomTitle', room.get('title') or ''),
            'room_category': _text(data, 'roomCategory', room.get('category') or ''),
            'room_image': _text(data, 'roomImage', room.get('image_url')),
            'location': _text(data, 'location', room.get('location') or self.config.get('DEFAULT_LOCATION')),
            'check_in': check_in,
            'check_out': check_out,
            'nights': nights,
            'guests': int(data.get('adults') or data.get('guests') or 1),
            'children': int(data.get('children') or 0),
            'special_requests': data.get('specialRequests') or '',
            'payment_method': data.get('paymentMethod'),
            'base_price': base,
            'tax_and_fees': tax,
            'total_price': total,
            'status': 'confirmed',
            'payment_status': 'pending',
        }
        fields.update(self._owner_fields(data, user_id))

        row = self._insert_with_unique_ref(fields)
        self.logger.info(
            f"Booking {row['booking_ref']} created for room {row['room_id']} "
            f"({check_in} -> {check_out}, total {total})"
        )
        return booking_to_dict(row, room)

    # ------------------------------------------------------------------
    # Update / cancel
    # ------------------------------------------------------------------
    def update_booking(self, booking_id, data, user_id):
        """Owner-only; admins change status through update_status"""
        errors = validate_booking_update(data, today=self._today_for_validation())
        if errors:
            raise ValidationError('Validation failed', errors)

        booking = self._owned_booking(booking_id, user_id)
        if booking['status'] == 'cancelled':
            raise ConflictError('Cannot update a cancelled booking')

        has_check_in = data.get('checkIn') not in (None, '')
        has_check_out = data.get('checkOut') not in (None, '')
        check_in = parse_date(data['checkIn']) if has_check_in else booking['check_in']
        check_out = parse_date(data['checkOut']) if has_check_out else booking['check_out']

        if (has_check_in or has_check_out) and check_out <= check_in:
            raise ValidationError('Validation failed', [
                {'field': 'checkOut', 'message': 'Check-out date must be after check-in date'}
            ])

        if has_check_in and has_check_out and booking.get('room_id'):
            conflicts = self.bookings.find_overlapping(
                booking['room_id'], check_in, check_out, self.overlap_policy,
                exclude_booking_id=booking['id'],
            )
            if conflicts:
                raise ConflictError('The room is already booked for these dates', payload={'available': False})

        fields = {'updated_at': utc_now()}
        if has_check_in:
            fields['check_in'] = check_in
        if has_check_out:
            fields['check_out'] = check_out
        if data.get('totalPrice') not in (None, ''):
            fields['total_price'] = parse_decimal_input(data['totalPrice'], quantize='0.01', error_label='Total price')
        if data.get('nights') not in (None, ''):
            fields['nights'] = int(str(data['nights']).strip())
        if 'paymentMethod' in data and data['paymentMethod'] is not None:
            fields['payment_method'] = data['paymentMethod']
        if 'specialRequests' in data and data['specialRequests'] is not None:
            fields['special_requests'] = data['specialRequests']
        if data.get('adults') not in (None, ''):
            fields['guests'] = int(str(data['adults']).strip())
        if data.get('children') not in (None, ''):
            fields['children'] = int(str(data['children']).strip())

        row = self.bookings.update(booking['id'], fields)
        self.logger.info(f"Booking {row['booking_ref']} updated ({', '.join(sorted(fields))})")
        return booking_to_dict(row)

    def cancel_booking(self, booking_id, user_id, is_admin=False):
        booking = self._owned_booking(booking_id, user_id, is_admin)
        if booking['status'] == 'cancelled':
            raise ConflictError('Booking is already cancelled')

        row = self.bookings.update(booking['id'], {'status': 'cancelled', 'updated_at': utc_now()})
        actor = 'admin' if is_admin else 'owner'
        self.logger.info(f"Booking {row['booking_ref']} cancelled by {actor} {user_id}")
        return booking_to_dict(row)

    def update_status(self, booking_id, data, actor_id=None):
        """Admin status override"""
        errors = validate_status_update(data)
        if errors:
            raise ValidationError('Valid status is required', errors)

        booking = self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError('Booking not found')

        status = data['status']
        current = booking['status']
        if current == 'cancelled':
            raise ConflictError('Cannot change the status of a cancelled booking')
        if current == 'completed' and status != 'completed':
            raise ConflictError('A completed booking cannot change status')

        fields = {'status': status, 'updated_at': utc_now()}
        if data.get('paymentStatus'):
            fields['payment_status'] = data['paymentStatus']
        row = self.bookings.update(booking['id'], fields)
        self.logger.info(f"Booking {row['booking_ref']} status {current} -> {status} by {actor_id}")
        return self._admin_dict(row)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_booking(self, booking_id, user_id, is_admin=False):
        booking = self._owned_booking(booking_id, user_id, is_admin)
        room = self.rooms.get(booking['room_id']) if booking.get('room_id') else None
        return booking_to_dict(booking, room)

    def get_admin_booking(self, booking_id):
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError('Booking not found')
        return self._admin_dict(booking)

    def _admin_dict(self, booking):
        room = self.rooms.get(booking['room_id']) if booking.get('room_id') else None
        user = self.users.get(booking['user_id']) if booking.get('user_id') else None
        return admin_booking_to_dict(booking, room=room, user=user)

    def get_user_bookings(self, user_id):
        return [booking_to_dict(row) for row in self.bookings.list_for_user(user_id)]

    def get_summary(self, user_id):
        today = utc_today()
        rows = self.bookings.list_for_user(user_id)
        active = [row for row in rows if row['status'] != 'cancelled']
        return {
            'upcoming': sum(1 for row in active if row['check_in'] >= today),
            'past': sum(1 for row in active if row['check_out'] < today),
            'cancelled': sum(1 for row in rows if row['status'] == 'cancelled'),
            'total': len(rows),
        }

    def get_history(self, user_id):
        rows = self.bookings.list_for_user(user_id)
        bookings = [booking_to_dict(row, price_defaults=True) for row in rows]

        active = [row for row in rows if row['status'] != 'cancelled']
        total_spent = sum(to_float(row.get('total_price')) for row in active)
        average = total_spent / len(active) if active else 0

        category_count = {}
        for row in active:
            category = row.get('room_category')
            if category:
                category_count[category] = category_count.get(category, 0) + 1

        most_visited = None
        max_count = 0
        for category, count in category_count.items():
            if count > max_count:
                most_visited = category
                max_count = count

        return {
            'bookings': bookings,
            'stats': {
                'totalSpent': round(total_spent, 2),
                'averagePerBooking': round(average, 2),
                'mostVisitedCategory': most_visited,
                'totalBookings': len(rows),
            }
        }

    def get_history_by_email(self, email):
        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError('User not found')
        rows = self.bookings.list_for_user(user['id'])
        return [booking_to_dict(row, price_defaults=True) for row in rows]

    def list_bookings(self, args):
        """
        Admin listing. args: request query mapping with page, limit, status,
        fromDate, toDate, userId, roomId and search.
        """
        page = normalize_page(args.get('page'))
        limit = normalize_limit(
            args.get('limit'),
            self.config.get('ADMIN_PAGE_SIZE_DEFAULT', 10),
            self.config.get('ADMIN_PAGE_SIZE_MIN', 5),
            self.config.get('ADMIN_PAGE_SIZE_MAX', 50),
        )

        status = args.get('status')
        if status and status != 'all':
            errors = validate_status_update({'status': status})
            if errors:
                raise ValidationError('Invalid status filter', errors)
        else:
            status = None

        filters = BookingFilters(
            status=status,
            from_date=self._filter_date(args, 'fromDate'),
            to_date=self._filter_date(args, 'toDate'),
            user_id=args.get('userId') or None,
            room_id=args.get('roomId') or None,
            search=(args.get('search') or '').strip() or None,
        )
        rows, total = self.bookings.search(filters, page_offset(page, limit), limit)
        return {
            'count': total,
            'pagination': build_pagination(page, limit, total),
            'bookings': [self._admin_dict(row) for row in rows],
        }

    @staticmethod
    def _filter_date(args, key):
        value = args.get(key)
        if not value:
            return None
        try:
            return parse_date(value)
        except ValueError:
            raise ValidationError('Invalid date filter', [{'field': key, 'message': f'{key} must be a valid date'}])
