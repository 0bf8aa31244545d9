"""
Request validators.

Each validator takes the request payload (a dict) and returns a list of
field errors, ``[{'field': ..., 'message': ...}]``. An empty list means the
payload is valid. Callers turn a non-empty list into a ValidationError.
"""
import re

from models import BOOKING_STATUSES, PAYMENT_METHODS, PAYMENT_STATUSES, ROLES
from utils.dates import parse_date
from utils.decimal_utils import parse_decimal_input

EMAIL_REGEX = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

MAX_SPECIAL_REQUESTS = 500

INVALID_ID_MARKERS = ('', 'undefined', 'null', 'None')


def _error(field, message):
    return {'field': field, 'message': message}


def _present(data, key):
    return key in data and data[key] is not None


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _not_text(data, field):
    """Supplied but not a string"""
    return _present(data, field) and not isinstance(data[field], str)


def _check_int(errors, data, field, minimum, message):
    if not _present(data, field):
        return
    value = data[field]
    if isinstance(value, bool):
        errors.append(_error(field, message))
        return
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        errors.append(_error(field, message))
        return
    if number < minimum:
        errors.append(_error(field, message))


def _check_date(errors, data, field, label):
    """Returns the parsed date or None"""
    if not _present(data, field) or data[field] == '':
        return None
    try:
        return parse_date(data[field])
    except (TypeError, ValueError):
        errors.append(_error(field, f'{label} must be a valid ISO 8601 date'))
        return None


def room_id_from(data):
    room_id = data.get('roomId') or data.get('room_id')
    if room_id is None or str(room_id).strip() in INVALID_ID_MARKERS:
        return None
    return str(room_id).strip()


def validate_availability_query(data):
    errors = []
    if not room_id_from(data):
        errors.append(_error('roomId', 'Room ID is required'))
    if _blank(data.get('checkIn')):
        errors.append(_error('checkIn', 'Check-in date is required'))
    if _blank(data.get('checkOut')):
        errors.append(_error('checkOut', 'Check-out date is required'))

    check_in = _check_date(errors, data, 'checkIn', 'Check-in date')
    check_out = _check_date(errors, data, 'checkOut', 'Check-out date')
    if check_in and check_out and check_out <= check_in:
        errors.append(_error('checkOut', 'Check-out date must be after check-in date'))
    return errors


def _validate_booking_fields(errors, data, today):
    check_in = _check_date(errors, data, 'checkIn', 'Check-in date')
    check_out = _check_date(errors, data, 'checkOut', 'Check-out date')

    if check_in and today is not None and check_in < today:
        errors.append(_error('checkIn', 'Check-in date cannot be in the past'))
    if check_in and check_out and check_out <= check_in:
        errors.append(_error('checkOut', 'Check-out date must be after check-in date'))

    if _present(data, 'totalPrice') and data['totalPrice'] != '':
        try:
            if parse_decimal_input(data['totalPrice'], error_label='Total price') <= 0:
                errors.append(_error('totalPrice', 'Total price must be greater than 0'))
        except ValueError:
            errors.append(_error('totalPrice', 'Total price must be a number'))

    _check_int(errors, data, 'nights', 1, 'Number of nights must be at least 1')
    _check_int(errors, data, 'adults', 1, 'At least one adult is required')
    _check_int(errors, data, 'guests', 1, 'At least one guest is required')
    _check_int(errors, data, 'children', 0, 'Number of children must be a non-negative integer')

    if _present(data, 'paymentMethod') and data['paymentMethod'] not in PAYMENT_METHODS:
        errors.append(_error('paymentMethod', 'Invalid payment method'))

    if _present(data, 'specialRequests'):
        requests_text = data['specialRequests']
        if not isinstance(requests_text, str):
            errors.append(_error('specialRequests', 'Special requests must be a string'))
        elif len(requests_text) > MAX_SPECIAL_REQUESTS:
            errors.append(_error('specialRequests', f'Special requests cannot exceed {MAX_SPECIAL_REQUESTS} characters'))

    if _present(data, 'email') and data['email'] != '' and not EMAIL_REGEX.match(str(data['email'])):
        errors.append(_error('email', 'Invalid email address'))

    return check_in, check_out


def validate_booking_create(data, require_room=True, today=None):
    """
    today: when given, check-in dates before it are rejected.
    require_room: False when the room fallback is enabled.
    """
    errors = []
    if require_room and not room_id_from(data):
        errors.append(_error('roomId', 'Room ID is required'))
    if _blank(data.get('checkIn')):
        errors.append(_error('checkIn', 'Check-in date is required'))
    if _blank(data.get('checkOut')):
        errors.append(_error('checkOut', 'Check-out date is required'))
    _validate_booking_fields(errors, data, today)
    return errors


def validate_booking_update(data, today=None):
    errors = []
    _validate_booking_fields(errors, data, today)
    return errors


def validate_status_update(data):
    status = data.get('status')
    if _blank(status):
        return [_error('status', 'Status is required')]
    if status not in BOOKING_STATUSES:
        return [_error('status', 'Invalid status value')]
    if not _blank(data.get('paymentStatus')) and data['paymentStatus'] not in PAYMENT_STATUSES:
        return [_error('paymentStatus', 'Invalid payment status value')]
    return []


ROOM_REQUIRED_TEXT = (
    ('title', 'Title is required'),
    ('description', 'Description is required'),
    ('category', 'Category is required'),
    ('location', 'Location is required'),
)

ROOM_TEXT_FIELDS = (
    ('title', 'Title'),
    ('roomNumber', 'Room number'),
    ('type', 'Type'),
    ('description', 'Description'),
    ('fullDescription', 'Full description'),
    ('category', 'Category'),
    ('location', 'Location'),
)


def validate_room(data, partial=False):
    """
    Full validation on create; on update (partial=True) only the supplied
    fields are checked.
    """
    errors = []
    for field, message in ROOM_REQUIRED_TEXT:
        if partial and field not in data:
            continue
        if _blank(data.get(field)):
            errors.append(_error(field, message))

    for field, label in ROOM_TEXT_FIELDS:
        if _not_text(data, field):
            errors.append(_error(field, f'{label} must be text'))

    if not partial or 'price' in data:
        try:
            parse_decimal_input(data.get('price'), error_label='Price')
        except ValueError:
            errors.append(_error('price', 'Price must be a non-negative number'))

    if not partial or 'capacity' in data:
        if _blank(data.get('capacity')):
            errors.append(_error('capacity', 'Capacity must be a number'))
        else:
            _check_int(errors, data, 'capacity', 1, 'Capacity must be a whole number of at least 1')

    if 'size' in data and not _blank(data.get('size')):
        try:
            parse_decimal_input(data.get('size'), error_label='Size')
        except ValueError:
            errors.append(_error('size', 'Size must be a number'))

    if 'discount' in data and not _blank(data.get('discount')):
        try:
            parse_decimal_input(data.get('discount'), error_label='Discount')
        except ValueError:
            errors.append(_error('discount', 'Discount must be a non-negative number'))

    return errors


def _validate_email(errors, data, required):
    email = data.get('email')
    if _blank(email):
        if required:
            errors.append(_error('email', 'Email is required'))
        return
    if not isinstance(email, str) or not EMAIL_REGEX.match(email.strip()):
        errors.append(_error('email', 'Invalid email address'))


def validate_registration(data, min_password_length=6):
    errors = []
    if _blank(data.get('name')):
        errors.append(_error('name', 'Name is required'))
    elif _not_text(data, 'name'):
        errors.append(_error('name', 'Name must be text'))
    _validate_email(errors, data, required=True)
    password = data.get('password') or ''
    if not isinstance(password, str):
        errors.append(_error('password', 'Password must be text'))
    elif len(password) < min_password_length:
        errors.append(_error('password', f'Password must be at least {min_password_length} characters'))
    return errors


def validate_profile_update(data):
    errors = []
    if 'name' in data and _blank(data.get('name')):
        errors.append(_error('name', 'Name cannot be empty'))
    elif _not_text(data, 'name'):
        errors.append(_error('name', 'Name must be text'))
    if 'email' in data:
        _validate_email(errors, data, required=True)
    return errors


def validate_password_change(data, min_password_length=6):
    errors = []
    if _blank(data.get('currentPassword')):
        errors.append(_error('currentPassword', 'Current password is required'))
    elif _not_text(data, 'currentPassword'):
        errors.append(_error('currentPassword', 'Current password must be text'))
    new_password = data.get('newPassword') or ''
    if not isinstance(new_password, str):
        errors.append(_error('newPassword', 'New password must be text'))
    elif len(new_password) < min_password_length:
        errors.append(_error('newPassword', f'New password must be at least {min_password_length} characters'))
    if 'confirmPassword' in data and data.get('confirmPassword') != new_password:
        errors.append(_error('confirmPassword', 'Password confirmation does not match new password'))
    return errors


def validate_admin_user_update(data):
    errors = validate_profile_update(data)
    if 'role' in data and data.get('role') not in ROLES:
        errors.append(_error('role', 'Invalid role'))
    return errors
