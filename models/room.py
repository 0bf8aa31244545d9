from . import db
from datetime import datetime, timezone
from decimal import Decimal
import uuid

ROOM_TYPES = ['standard', 'deluxe', 'suite', 'executive', 'family']

ROOM_PLACEHOLDER_IMAGE = '/images/room-placeholder.jpg'


class Room(db.Model):
    __tablename__ = 'rooms'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(200), nullable=False)
    room_number = db.Column(db.String(20), unique=True, nullable=True)
    type = db.Column(db.String(30), default='standard')
    description = db.Column(db.Text, nullable=True)
    full_description = db.Column(db.Text, nullable=True)

    # price >= 0, capacity >= 1 are enforced by utils.validators
    price = db.Column(db.Numeric(10, 2), nullable=False)
    discount = db.Column(db.Numeric(10, 2), default=Decimal('0'))
    capacity = db.Column(db.Integer, default=1)
    size = db.Column(db.Integer, default=0)

    category = db.Column(db.String(100), nullable=False, index=True)
    location = db.Column(db.String(200), nullable=True)
    rating = db.Column(db.Numeric(2, 1), default=Decimal('4.5'))
    review_count = db.Column(db.Integer, default=0)

    image_url = db.Column(db.String(500), default=ROOM_PLACEHOLDER_IMAGE)
    images = db.Column(db.JSON, default=list)
    amenities = db.Column(db.JSON, default=list)

    featured = db.Column(db.Boolean, default=False)
    is_available = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    def to_row(self):
        return {
            'id': self.id,
            'title': self.title,
            'room_number': self.room_number,
            'type': self.type,
            'description': self.description,
            'full_description': self.full_description,
            'price': self.price,
            'discount': self.discount,
            'capacity': self.capacity,
            'size': self.size,
            'category': self.category,
            'location': self.location,
            'rating': self.rating,
            'review_count': self.review_count,
            'image_url': self.image_url,
            'images': list(self.images or []),
            'amenities': list(self.amenities or []),
            'featured': self.featured,
            'is_available': self.is_available,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    def __repr__(self):
        return f'<Room {self.title}>'
