"""
Row -> response shaping.

Every read path goes through these functions: storage rows use snake_case
and may hold NULLs, responses use camelCase with defaults filled in. The
functions are pure and accept either a storage row or their own output, so
applying one twice gives the same result.
"""
from models.room import ROOM_PLACEHOLDER_IMAGE
from models.user import DEFAULT_PROFILE_PIC
from utils.dates import calculate_nights, format_date, format_timestamp
from utils.decimal_utils import to_float

DEFAULT_RATING = 4.5
BASE_PRICE_RATIO = 0.9
TAX_RATIO = 0.1


def _pick(row, camel, snake=None, default=None):
    """First non-empty value under the camelCase or snake_case key"""
    for key in (camel, snake):
        if key and key in row:
            value = row[key]
            if value is not None and value != '':
                return value
    return default


def _money(value, default=0.0):
    return round(to_float(value, default), 2)


def _int(value, default=0):
    if value is None or value == '':
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _as_row(obj):
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    return obj.to_row()


def room_to_dict(room):
    row = _as_row(room)
    return {
        'id': _pick(row, 'id'),
        'title': _pick(row, 'title', default=''),
        'roomNumber': _pick(row, 'roomNumber', 'room_number', default=''),
        'type': _pick(row, 'type', default='standard'),
        'description': _pick(row, 'description', default=''),
        'fullDescription': _pick(row, 'fullDescription', 'full_description', default=''),
        'price': _money(_pick(row, 'price')),
        'discount': _money(_pick(row, 'discount')),
        'capacity': _int(_pick(row, 'capacity'), 1),
        'size': _int(_pick(row, 'size')),
        'category': _pick(row, 'category', default=''),
        'location': _pick(row, 'location', default=''),
        'rating': to_float(_pick(row, 'rating')) or DEFAULT_RATING,
        'reviews': _int(_pick(row, 'reviews', 'review_count')),
        'imageUrl': _pick(row, 'imageUrl', 'image_url', default=ROOM_PLACEHOLDER_IMAGE),
        'images': list(_pick(row, 'images', default=[])),
        'amenities': list(_pick(row, 'amenities', default=[])),
        'featured': bool(_pick(row, 'featured', default=False)),
        'isAvailable': _pick(row, 'isAvailable', 'is_available', default=True) is not False,
        'createdAt': format_timestamp(_pick(row, 'createdAt', 'created_at')),
        'updatedAt': format_timestamp(_pick(row, 'updatedAt', 'updated_at')),
    }


def _nights(row, check_in, check_out):
    nights = _int(_pick(row, 'nights'))
    if nights:
        return nights
    if check_in and check_out:
        try:
            return calculate_nights(check_in, check_out) or 1
        except ValueError:
            return 1
    return 1


def booking_to_dict(booking, room=None, price_defaults=False):
    """
    room: optional current room row, used only for fields the booking itself
          does not carry (roomPrice, roomAmenities) or lost.
    price_defaults: derive basePrice/taxAndFees from totalPrice when missing.
    """
    row = _as_row(booking)
    room_row = _as_row(room)

    check_in = _pick(row, 'checkIn', 'check_in')
    check_out = _pick(row, 'checkOut', 'check_out')
    total = _money(_pick(row, 'totalPrice', 'total_price'))

    base = _pick(row, 'basePrice', 'base_price')
    tax = _pick(row, 'taxAndFees', 'tax_and_fees')
    if price_defaults:
        base = base if base else total * BASE_PRICE_RATIO
        tax = tax if tax else total * TAX_RATIO

    guests = _int(_pick(row, 'guests'), 1)

    return {
        'id': _pick(row, 'id'),
        'bookingId': _pick(row, 'bookingId', 'booking_ref', default=''),
        'roomId': _pick(row, 'roomId', 'room_id'),
        'userId': _pick(row, 'userId', 'user_id') or _pick(row, 'guestId', 'guest_id'),
        'roomTitle': _pick(row, 'roomTitle', 'room_title', default=_pick(room_row, 'title', default='')),
        'roomImage': _pick(row, 'roomImage', 'room_image', default=_pick(room_row, 'image_url', default='')),
        'roomCategory': _pick(row, 'roomCategory', 'room_category', default=_pick(room_row, 'category', default='')),
        'roomType': _pick(row, 'roomType', 'room_type', default=_pick(room_row, 'type', default='')),
        'roomPrice': _money(_pick(row, 'roomPrice', default=_pick(room_row, 'price'))),
        'roomLocation': _pick(row, 'roomLocation', 'location', default=_pick(room_row, 'location', default='')),
        'checkIn': format_date(check_in),
        'checkOut': format_date(check_out),
        'nights': _nights(row, check_in, check_out),
        'totalPrice': total,
        'basePrice': _money(base),
        'taxAndFees': _money(tax),
        'status': _pick(row, 'status', default='pending'),
        'paymentStatus': _pick(row, 'paymentStatus', 'payment_status', default='pending'),
        'paymentMethod': _pick(row, 'paymentMethod', 'payment_method', default=''),
        'firstName': _pick(row, 'firstName', 'first_name', default=''),
        'lastName': _pick(row, 'lastName', 'last_name', default=''),
        'email': _pick(row, 'email', default=''),
        'phone': _pick(row, 'phone', default=''),
        'specialRequests': _pick(row, 'specialRequests', 'special_requests', default=''),
        'guests': guests,
        'adults': guests,
        'children': _int(_pick(row, 'children')),
        'createdAt': format_timestamp(_pick(row, 'createdAt', 'created_at')),
        'updatedAt': format_timestamp(_pick(row, 'updatedAt', 'updated_at', default=_pick(row, 'createdAt', 'created_at'))),
    }


def admin_booking_to_dict(booking, room=None, user=None):
    """Admin listing shape: booking plus owner display fields"""
    data = booking_to_dict(booking, room=room)
    row = _as_row(booking)
    user_row = _as_row(user)

    data['roomTitle'] = data['roomTitle'] or 'Unknown Room'
    data['roomImage'] = data['roomImage'] or ROOM_PLACEHOLDER_IMAGE
    data['paymentMethod'] = data['paymentMethod'] or 'credit_card'
    data['userName'] = _pick(row, 'userName', default=_pick(user_row, 'name', default=''))
    data['userEmail'] = _pick(row, 'userEmail', default=_pick(user_row, 'email', default=''))
    data['userProfilePic'] = _pick(row, 'userProfilePic', default=_pick(user_row, 'profile_pic', default=DEFAULT_PROFILE_PIC))
    return data


def user_to_dict(user):
    row = _as_row(user)
    return {
        'id': _pick(row, 'id'),
        'name': _pick(row, 'name', default=''),
        'email': _pick(row, 'email', default=''),
        'role': _pick(row, 'role', default='user'),
        'profilePic': _pick(row, 'profilePic', 'profile_pic', default=DEFAULT_PROFILE_PIC),
        'createdAt': format_timestamp(_pick(row, 'createdAt', 'created_at')),
        'updatedAt': format_timestamp(_pick(row, 'updatedAt', 'updated_at')),
    }
