from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from .user import User, SessionUser, ROLES, DEFAULT_PROFILE_PIC
from .room import Room, ROOM_TYPES, ROOM_PLACEHOLDER_IMAGE
from .booking import Booking, BOOKING_STATUSES, PAYMENT_STATUSES, PAYMENT_METHODS
