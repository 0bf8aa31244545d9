#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Database initialization script with seed data
Run this script to create tables and add an admin, a user, rooms and bookings
"""

import os
import random
from datetime import timedelta

from app import create_app
from models import db, ROOM_TYPES
from repositories import get_repositories
from services.booking_service import BookingService
from services.room_service import RoomService
from services.user_service import UserService
from utils.dates import utc_today

ROOM_TITLES = [
    'Ocean Breeze Suite', 'Metropolitan Deluxe King', 'Garden View Standard',
    'Skyline Executive Suite', 'Family Paradise Room', 'Royal Penthouse Suite',
    'Cozy Standard Twin', 'Premium Deluxe Queen',
]
ROOM_DESCRIPTIONS = [
    'A serene retreat with panoramic views and modern amenities.',
    'Spacious room with premium furnishings and a king-size bed.',
    'Comfortable room for both business and leisure stays.',
    'Suite with a separate living area, work desk and skyline views.',
    'Generously sized room with connected spaces for families.',
    'A sprawling suite with butler service and a private terrace.',
    'A cozy room with twin beds for friends traveling together.',
    'A plush queen bed, rain shower and curated minibar.',
]
LOCATIONS = ['Taguig, Metro Manila', 'Makati, Metro Manila', 'Pasay, Metro Manila', 'Quezon City, Metro Manila']
AMENITIES = ['WiFi', 'Air conditioning', 'Daily housekeeping', 'Mini bar', 'TV', 'Safe', 'City View', 'Balcony']

ADMIN_EMAIL = os.environ.get('SEED_ADMIN_EMAIL', 'admin@hotel.com')
ADMIN_PASSWORD = os.environ.get('SEED_ADMIN_PASSWORD', 'admin123')


def init_database():
    app = create_app()

    with app.app_context():
        db.drop_all()
        db.create_all()
        print("Database tables created.")

        repositories = get_repositories()
        users = UserService(repositories, app.config)
        rooms = RoomService(repositories, app.config)
        bookings = BookingService(repositories, app.config)

        users.register({'name': 'Administrator', 'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD}, role='admin')
        guest = users.register({'name': 'Test User', 'email': 'user@hotel.com', 'password': 'user123'})
        print(f"Users created ({ADMIN_EMAIL}, user@hotel.com)")

        room_ids = []
        for i, title in enumerate(ROOM_TITLES):
            room_type = ROOM_TYPES[i % len(ROOM_TYPES)]
            room = rooms.create_room({
                'title': title,
                'roomNumber': str(101 + i),
                'type': room_type,
                'description': ROOM_DESCRIPTIONS[i],
                'price': random.randint(80, 500) * 10,
                'capacity': random.randint(1, 4),
                'size': random.randint(20, 80),
                'category': f'{room_type}-room',
                'location': random.choice(LOCATIONS),
                'amenities': AMENITIES[:random.randint(4, len(AMENITIES))],
                'featured': i < 3,
            })
            room_ids.append(room['id'])
        print(f"{len(room_ids)} rooms created")

        today = utc_today()
        for i, room_id in enumerate(room_ids[:4]):
            check_in = today + timedelta(days=7 * (i + 1))
            bookings.create_booking({
                'roomId': room_id,
                'checkIn': check_in.isoformat(),
                'checkOut': (check_in + timedelta(days=2)).isoformat(),
                'firstName': 'Test',
                'lastName': 'User',
                'email': guest['email'],
                'paymentMethod': 'credit_card',
            }, user_id=guest['id'])
        print("4 bookings created")

        print("\n" + "=" * 50)
        print("Database seeding completed successfully.")
        print("=" * 50)
        print(f"\nAdmin login: {ADMIN_EMAIL} / {ADMIN_PASSWORD}")
        print("Test user: user@hotel.com / user123")
        print("\nRun the system with:")
        print("   python app.py")


if __name__ == '__main__':
    init_database()
