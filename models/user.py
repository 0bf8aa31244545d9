from . import db
from flask_login import UserMixin
from datetime import datetime, timezone
import uuid

# Role hierarchy: admin > user > guest
ROLES = {
    'admin': 3,   # Manage rooms, users and every booking
    'user': 2,    # Book rooms, manage own profile and bookings
    'guest': 1    # Unverified account
}

DEFAULT_PROFILE_PIC = '/images/default-user.png'


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), default='user', nullable=False)
    profile_pic = db.Column(db.String(500), default=DEFAULT_PROFILE_PIC)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    def to_row(self):
        """Snake-case row; password_hash never leaves the service layer"""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'password_hash': self.password_hash,
            'role': self.role,
            'profile_pic': self.profile_pic,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    def __repr__(self):
        return f'<User {self.email}>'


class SessionUser(UserMixin):
    """
    Flask-Login identity built from a user row, so the session works the
    same on every storage backend.
    """

    def __init__(self, row):
        self.id = row['id']
        self.name = row.get('name') or ''
        self.email = row.get('email') or ''
        self.role = row.get('role') or 'user'

    def is_admin(self):
        return self.role == 'admin'

    def has_role(self, role):
        """Check if user has at least the specified role level"""
        return ROLES.get(self.role, 0) >= ROLES.get(role, 0)

    def __repr__(self):
        return f'<SessionUser {self.email}>'
