#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Flask-SQLAlchemy backed repositories.

Each write commits its own unit of work. Driver errors are rolled back and
re-raised as service errors so callers never see SQLAlchemy exceptions.
"""
import logging
from functools import wraps

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db, Room, Booking, User
from repositories.base import RoomRepository, BookingRepository, UserRepository, Repositories
from services.exceptions import ConflictError, StorageError
from utils.dates import OVERLAP_CLOSED, OVERLAP_HALF_OPEN, utc_now

logger = logging.getLogger(__name__)


def _storage_guard(method):
    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except IntegrityError as e:
            db.session.rollback()
            logger.warning(f'{method.__qualname__} integrity error: {e.orig}')
            raise ConflictError('A record with this information already exists.')
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'{method.__qualname__} failed: {e}')
            raise StorageError(str(e))
    return wrapper


def _rows(models):
    return [model.to_row() for model in models]


def _apply(model, fields):
    for key, value in fields.items():
        setattr(model, key, value)


def _like(term):
    return f'%{term.strip()}%'


class SqlAlchemyRoomRepository(RoomRepository):

    @_storage_guard
    def get(self, room_id):
        room = db.session.get(Room, room_id)
        return room.to_row() if room else None

    @_storage_guard
    def first(self):
        room = Room.query.order_by(Room.created_at.asc()).first()
        return room.to_row() if room else None

    @_storage_guard
    def add(self, fields):
        room = Room(**fields)
        db.session.add(room)
        db.session.commit()
        return room.to_row()

    @_storage_guard
    def update(self, room_id, fields):
        room = db.session.get(Room, room_id)
        if room is None:
            return None
        _apply(room, fields)
        room.updated_at = utc_now()
        db.session.commit()
        return room.to_row()

    @_storage_guard
    def delete(self, room_id):
        room = db.session.get(Room, room_id)
        if room is None:
            return False
        Booking.query.filter_by(room_id=room_id).update({'room_id': None}, synchronize_session=False)
        db.session.delete(room)
        db.session.commit()
        return True

    def _filtered(self, filters):
        query = Room.query
        if filters.category:
            query = query.filter(Room.category == filters.category)
        if filters.min_price is not None:
            query = query.filter(Room.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Room.price <= filters.max_price)
        if filters.location:
            query = query.filter(Room.location.ilike(_like(filters.location)))
        if filters.capacity:
            query = query.filter(Room.capacity >= filters.capacity)
        if filters.search:
            term = _like(filters.search)
            query = query.filter(or_(
                Room.title.ilike(term),
                Room.description.ilike(term),
                Room.category.ilike(term),
                Room.location.ilike(term),
            ))
        return query

    @_storage_guard
    def search(self, filters, offset, limit):
        query = self._filtered(filters)
        total = query.count()
        rooms = query.order_by(Room.created_at.desc(), Room.id.desc()).offset(offset).limit(limit).all()
        return _rows(rooms), total

    @_storage_guard
    def top_rated(self, limit):
        rooms = Room.query.order_by(Room.rating.desc(), Room.created_at.desc()).limit(limit).all()
        return _rows(rooms)

    @_storage_guard
    def categories(self):
        counts = db.session.query(Room.category, func.count(Room.id)).group_by(Room.category).order_by(Room.category).all()
        result = []
        for name, count in counts:
            if not name:
                continue
            sample = Room.query.filter(Room.category == name).order_by(Room.created_at.asc()).first()
            result.append({'name': name, 'count': count, 'image': sample.image_url if sample else None})
        return result

    @_storage_guard
    def count(self):
        return Room.query.count()


class SqlAlchemyBookingRepository(BookingRepository):

    @_storage_guard
    def get(self, booking_id):
        booking = db.session.get(Booking, booking_id)
        return booking.to_row() if booking else None

    @_storage_guard
    def add(self, fields):
        booking = Booking(**fields)
        db.session.add(booking)
        db.session.commit()
        return booking.to_row()

    @_storage_guard
    def update(self, booking_id, fields):
        booking = db.session.get(Booking, booking_id)
        if booking is None:
            return None
        _apply(booking, fields)
        db.session.commit()
        return booking.to_row()

    @_storage_guard
    def find_overlapping(self, room_id, check_in, check_out, policy, exclude_booking_id=None):
        query = Booking.query.filter(Booking.room_id == room_id, Booking.status != 'cancelled')
        if policy == OVERLAP_HALF_OPEN:
            query = query.filter(Booking.check_in < check_out, Booking.check_out > check_in)
        elif policy == OVERLAP_CLOSED:
            query = query.filter(Booking.check_in <= check_out, Booking.check_out >= check_in)
        else:
            raise ValueError(f'Unknown overlap policy: {policy}')
        if exclude_booking_id:
            query = query.filter(Booking.id != exclude_booking_id)
        return _rows(query.all())

    @_storage_guard
    def list_for_user(self, user_id):
        bookings = Booking.query.filter(or_(Booking.user_id == user_id, Booking.guest_id == user_id)) \
            .order_by(Booking.created_at.desc(), Booking.id.desc()).all()
        return _rows(bookings)

    @_storage_guard
    def search(self, filters, offset, limit):
        query = Booking.query
        if filters.status:
            query = query.filter(Booking.status == filters.status)
        if filters.from_date:
            query = query.filter(Booking.check_in >= filters.from_date)
        if filters.to_date:
            query = query.filter(Booking.check_out <= filters.to_date)
        if filters.user_id:
            query = query.filter(Booking.user_id == filters.user_id)
        if filters.room_id:
            query = query.filter(Booking.room_id == filters.room_id)
        if filters.search:
            term = _like(filters.search)
            query = query.filter(or_(
                Booking.booking_ref.ilike(term),
                Booking.first_name.ilike(term),
                Booking.last_name.ilike(term),
                Booking.email.ilike(term),
                Booking.room_title.ilike(term),
            ))
        total = query.count()
        bookings = query.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(offset).limit(limit).all()
        return _rows(bookings), total

    @_storage_guard
    def all(self):
        return _rows(Booking.query.order_by(Booking.created_at.desc()).all())


class SqlAlchemyUserRepository(UserRepository):

    @_storage_guard
    def get(self, user_id):
        user = db.session.get(User, user_id)
        return user.to_row() if user else None

    @_storage_guard
    def get_by_email(self, email):
        user = User.query.filter(func.lower(User.email) == email.strip().lower()).first()
        return user.to_row() if user else None

    @_storage_guard
    def email_taken(self, email, exclude_user_id=None):
        query = User.query.filter(func.lower(User.email) == email.strip().lower())
        if exclude_user_id:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    @_storage_guard
    def add(self, fields):
        user = User(**fields)
        db.session.add(user)
        db.session.commit()
        return user.to_row()

    @_storage_guard
    def update(self, user_id, fields):
        user = db.session.get(User, user_id)
        if user is None:
            return None
        _apply(user, fields)
        user.updated_at = utc_now()
        db.session.commit()
        return user.to_row()

    @_storage_guard
    def delete(self, user_id):
        user = db.session.get(User, user_id)
        if user is None:
            return False
        Booking.query.filter_by(user_id=user_id).update({'user_id': None}, synchronize_session=False)
        db.session.delete(user)
        db.session.commit()
        return True

    @_storage_guard
    def list(self, search=None, role=None):
        query = User.query
        if role:
            query = query.filter(User.role == role)
        if search:
            term = _like(search)
            query = query.filter(or_(User.name.ilike(term), User.email.ilike(term)))
        return _rows(query.order_by(User.created_at.desc()).all())

    @_storage_guard
    def count(self):
        return User.query.count()


def build_sqlalchemy_repositories():
    return Repositories(
        rooms=SqlAlchemyRoomRepository(),
        bookings=SqlAlchemyBookingRepository(),
        users=SqlAlchemyUserRepository(),
        backend='sqlalchemy',
    )
