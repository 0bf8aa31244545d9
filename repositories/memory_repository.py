"""
In-memory repositories.

Used by tests and by STORAGE_BACKEND=memory. Behaviour matches the
SQLAlchemy backend: the same defaults, newest-first ordering and unique
constraints. Rows are copied in and out so callers cannot mutate the store.
"""
import copy
import itertools
import uuid
from decimal import Decimal

from models.room import ROOM_PLACEHOLDER_IMAGE
from models.user import DEFAULT_PROFILE_PIC
from repositories.base import RoomRepository, BookingRepository, UserRepository, Repositories
from services.exceptions import ConflictError
from utils.dates import ranges_overlap, utc_now

ROOM_DEFAULTS = {
    'room_number': None,
    'type': 'standard',
    'description': None,
    'full_description': None,
    'discount': Decimal('0'),
    'capacity': 1,
    'size': 0,
    'location': None,
    'rating': Decimal('4.5'),
    'review_count': 0,
    'image_url': ROOM_PLACEHOLDER_IMAGE,
    'images': [],
    'amenities': [],
    'featured': False,
    'is_available': True,
}

BOOKING_DEFAULTS = {
    'room_id': None,
    'user_id': None,
    'guest_id': None,
    'room_image': None,
    'location': None,
    'guests': 1,
    'children': 0,
    'special_requests': None,
    'payment_method': None,
    'status': 'pending',
    'payment_status': 'pending',
}

USER_DEFAULTS = {
    'role': 'user',
    'profile_pic': DEFAULT_PROFILE_PIC,
}


class MemoryStore:
    """Tables shared by the three repositories"""

    def __init__(self):
        self.rooms = {}
        self.bookings = {}
        self.users = {}
        self._sequence = itertools.count()
        self.order = {}

    def insert(self, table, defaults, fields):
        row = copy.deepcopy(defaults)
        row.update(copy.deepcopy(fields))
        row.setdefault('id', str(uuid.uuid4()))
        now = utc_now()
        row.setdefault('created_at', now)
        row.setdefault('updated_at', now)
        table[row['id']] = row
        self.order[row['id']] = next(self._sequence)
        return copy.deepcopy(row)

    def newest_first(self, rows):
        return sorted(rows, key=lambda row: (row['created_at'], self.order.get(row['id'], 0)), reverse=True)


def _copy(row):
    return copy.deepcopy(row) if row is not None else None


def _contains(value, term):
    return bool(value) and term in str(value).lower()


class MemoryRoomRepository(RoomRepository):

    def __init__(self, store):
        self.store = store

    def get(self, room_id):
        return _copy(self.store.rooms.get(room_id))

    def first(self):
        rooms = self.store.newest_first(self.store.rooms.values())
        return _copy(rooms[-1]) if rooms else None

    def add(self, fields):
        number = fields.get('room_number')
        if number and any(r.get('room_number') == number for r in self.store.rooms.values()):
            raise ConflictError('A record with this information already exists.')
        return self.store.insert(self.store.rooms, ROOM_DEFAULTS, fields)

    def update(self, room_id, fields):
        row = self.store.rooms.get(room_id)
        if row is None:
            return None
        row.update(copy.deepcopy(fields))
        row['updated_at'] = utc_now()
        return _copy(row)

    def delete(self, room_id):
        if room_id not in self.store.rooms:
            return False
        for booking in self.store.bookings.values():
            if booking.get('room_id') == room_id:
                booking['room_id'] = None
        del self.store.rooms[room_id]
        return True

    def _matches(self, row, filters):
        price = Decimal(str(row.get('price') or 0))
        if filters.category and row.get('category') != filters.category:
            return False
        if filters.min_price is not None and price < filters.min_price:
            return False
        if filters.max_price is not None and price > filters.max_price:
            return False
        if filters.location and not _contains(row.get('location'), filters.location.strip().lower()):
            return False
        if filters.capacity and (row.get('capacity') or 0) < filters.capacity:
            return False
        if filters.search:
            term = filters.search.strip().lower()
            fields = ('title', 'description', 'category', 'location')
            if not any(_contains(row.get(field), term) for field in fields):
                return False
        return True

    def search(self, filters, offset, limit):
        matches = [row for row in self.store.rooms.values() if self._matches(row, filters)]
        ordered = self.store.newest_first(matches)
        return [_copy(row) for row in ordered[offset:offset + limit]], len(matches)

    def top_rated(self, limit):
        ordered = sorted(
            self.store.newest_first(self.store.rooms.values()),
            key=lambda row: Decimal(str(row.get('rating') or 0)),
            reverse=True,
        )
        return [_copy(row) for row in ordered[:limit]]

    def categories(self):
        grouped = {}
        oldest_first = list(reversed(self.store.newest_first(self.store.rooms.values())))
        for row in oldest_first:
            name = row.get('category')
            if not name:
                continue
            entry = grouped.setdefault(name, {'name': name, 'count': 0, 'image': row.get('image_url')})
            entry['count'] += 1
        return [grouped[name] for name in sorted(grouped)]

    def count(self):
        return len(self.store.rooms)


class MemoryBookingRepository(BookingRepository):

    def __init__(self, store):
        self.store = store

    def get(self, booking_id):
        return _copy(self.store.bookings.get(booking_id))

    def add(self, fields):
        ref = fields.get('booking_ref')
        if any(b.get('booking_ref') == ref for b in self.store.bookings.values()):
            raise ConflictError('A record with this information already exists.')
        return self.store.insert(self.store.bookings, BOOKING_DEFAULTS, fields)

    def update(self, booking_id, fields):
        row = self.store.bookings.get(booking_id)
        if row is None:
            return None
        row.update(copy.deepcopy(fields))
        return _copy(row)

    def find_overlapping(self, room_id, check_in, check_out, policy, exclude_booking_id=None):
        found = []
        for row in self.store.bookings.values():
            if row.get('room_id') != room_id or row.get('status') == 'cancelled':
                continue
            if exclude_booking_id and row['id'] == exclude_booking_id:
                continue
            if ranges_overlap(row['check_in'], row['check_out'], check_in, check_out, policy):
                found.append(_copy(row))
        return found

    def list_for_user(self, user_id):
        rows = [row for row in self.store.bookings.values()
                if row.get('user_id') == user_id or row.get('guest_id') == user_id]
        return [_copy(row) for row in self.store.newest_first(rows)]

    def _matches(self, row, filters):
        if filters.status and row.get('status') != filters.status:
            return False
        if filters.from_date and row['check_in'] < filters.from_date:
            return False
        if filters.to_date and row['check_out'] > filters.to_date:
            return False
        if filters.user_id and row.get('user_id') != filters.user_id:
            return False
        if filters.room_id and row.get('room_id') != filters.room_id:
            return False
        if filters.search:
            term = filters.search.strip().lower()
            fields = ('booking_ref', 'first_name', 'last_name', 'email', 'room_title')
            if not any(_contains(row.get(field), term) for field in fields):
                return False
        return True

    def search(self, filters, offset, limit):
        matches = [row for row in self.store.bookings.values() if self._matches(row, filters)]
        ordered = self.store.newest_first(matches)
        return [_copy(row) for row in ordered[offset:offset + limit]], len(matches)

    def all(self):
        return [_copy(row) for row in self.store.newest_first(self.store.bookings.values())]


class MemoryUserRepository(UserRepository):

    def __init__(self, store):
        self.store = store

    def get(self, user_id):
        return _copy(self.store.users.get(user_id))

    def get_by_email(self, email):
        wanted = email.strip().lower()
        for row in self.store.users.values():
            if row['email'].lower() == wanted:
                return _copy(row)
        return None

    def email_taken(self, email, exclude_user_id=None):
        existing = self.get_by_email(email)
        return existing is not None and existing['id'] != exclude_user_id

    def add(self, fields):
        if self.email_taken(fields['email']):
            raise ConflictError('A record with this information already exists.')
        return self.store.insert(self.store.users, USER_DEFAULTS, fields)

    def update(self, user_id, fields):
        row = self.store.users.get(user_id)
        if row is None:
            return None
        row.update(copy.deepcopy(fields))
        row['updated_at'] = utc_now()
        return _copy(row)

    def delete(self, user_id):
        if user_id not in self.store.users:
            return False
        for booking in self.store.bookings.values():
            if booking.get('user_id') == user_id:
                booking['user_id'] = None
        del self.store.users[user_id]
        return True

    def list(self, search=None, role=None):
        rows = list(self.store.users.values())
        if role:
            rows = [row for row in rows if row.get('role') == role]
        if search:
            term = search.strip().lower()
            rows = [row for row in rows if _contains(row.get('name'), term) or _contains(row.get('email'), term)]
        return [_copy(row) for row in self.store.newest_first(rows)]

    def count(self):
        return len(self.store.users)


def build_memory_repositories(store=None):
    store = store or MemoryStore()
    return Repositories(
        rooms=MemoryRoomRepository(store),
        bookings=MemoryBookingRepository(store),
        users=MemoryUserRepository(store),
        backend='memory',
    )
