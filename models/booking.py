from . import db
from datetime import datetime, timezone
import uuid

BOOKING_STATUSES = ['pending', 'confirmed', 'cancelled', 'completed']

PAYMENT_STATUSES = ['pending', 'paid', 'refunded']

PAYMENT_METHODS = ['credit_card', 'paypal', 'cash', 'bank_transfer']


class Booking(db.Model):
    """
    Booking row. Room and guest display fields are copied at creation time so
    the booking still renders after the room or user is edited or deleted.
    Bookings are never deleted: status='cancelled' is the tombstone.
    """
    __tablename__ = 'bookings'
    __table_args__ = (
        db.Index('bookings_dates_idx', 'check_in', 'check_out'),
        db.Index('bookings_room_status_idx', 'room_id', 'status'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_ref = db.Column(db.String(30), unique=True, nullable=False)

    room_id = db.Column(db.String(36), db.ForeignKey('rooms.id', ondelete='SET NULL'), nullable=True, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    guest_id = db.Column(db.String(40), nullable=True)

    # Contact
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(40), nullable=False)

    # Denormalized room display fields
    room_type = db.Column(db.String(30), nullable=False)
    room_title = db.Column(db.String(200), nullable=False)
    room_category = db.Column(db.String(100), nullable=False)
    room_image = db.Column(db.String(500), nullable=True)
    location = db.Column(db.String(200), nullable=True)

    check_in = db.Column(db.Date, nullable=False)
    check_out = db.Column(db.Date, nullable=False)
    nights = db.Column(db.Integer, nullable=False)
    guests = db.Column(db.Integer, nullable=False, default=1)
    children = db.Column(db.Integer, nullable=False, default=0)
    special_requests = db.Column(db.Text, nullable=True)
    payment_method = db.Column(db.String(30), nullable=True)

    base_price = db.Column(db.Numeric(10, 2), nullable=False)
    tax_and_fees = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(20), default='pending', nullable=False, index=True)
    payment_status = db.Column(db.String(20), default='pending', nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    def to_row(self):
        return {
            'id': self.id,
            'booking_ref': self.booking_ref,
            'room_id': self.room_id,
            'user_id': self.user_id,
            'guest_id': self.guest_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'room_type': self.room_type,
            'room_title': self.room_title,
            'room_category': self.room_category,
            'room_image': self.room_image,
            'location': self.location,
            'check_in': self.check_in,
            'check_out': self.check_out,
            'nights': self.nights,
            'guests': self.guests,
            'children': self.children,
            'special_requests': self.special_requests,
            'payment_method': self.payment_method,
            'base_price': self.base_price,
            'tax_and_fees': self.tax_and_fees,
            'total_price': self.total_price,
            'status': self.status,
            'payment_status': self.payment_status,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    def __repr__(self):
        return f'<Booking {self.booking_ref}: {self.status}>'
