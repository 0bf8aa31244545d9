"""Admin dashboard statistics and system health"""
import logging
import platform
import sys
import time

from models.booking import BOOKING_STATUSES
from services.exceptions import StorageError
from services.transformers import admin_booking_to_dict, user_to_dict
from utils.dates import utc_now
from utils.decimal_utils import to_float

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5

STARTED_AT = time.monotonic()


class DashboardService:

    def __init__(self, repositories):
        self.repositories = repositories

    def get_stats(self, year=None):
        """
        Totals, revenue (non-cancelled bookings) and the latest bookings/users.
        monthlyRevenue has 12 buckets keyed by booking creation month of `year`
        (defaults to the current UTC year).
        """
        year = year or utc_now().year
        bookings = self.repositories.bookings.all()
        users = self.repositories.users.list()

        total_revenue = 0.0
        monthly_revenue = [0.0] * 12
        status_counts = {status: 0 for status in BOOKING_STATUSES}

        for row in bookings:
            if row['status'] in status_counts:
                status_counts[row['status']] += 1
            if row['status'] == 'cancelled':
                continue
            amount = to_float(row.get('total_price'))
            total_revenue += amount
            created = row.get('created_at')
            if created is not None and created.year == year:
                monthly_revenue[created.month - 1] += amount

        users_by_id = {user['id']: user for user in users}
        recent_bookings = []
        for row in bookings[:RECENT_LIMIT]:
            room = self.repositories.rooms.get(row['room_id']) if row.get('room_id') else None
            recent_bookings.append(admin_booking_to_dict(row, room=room, user=users_by_id.get(row.get('user_id'))))

        logger.debug(f'Dashboard stats computed over {len(bookings)} bookings')
        return {
            'totalUsers': len(users),
            'totalRooms': self.repositories.rooms.count(),
            'totalBookings': len(bookings),
            'totalRevenue': round(total_revenue, 2),
            'monthlyRevenue': [round(amount, 2) for amount in monthly_revenue],
            'statusCounts': status_counts,
            'recentBookings': recent_bookings,
            'recentUsers': [user_to_dict(user) for user in users[:RECENT_LIMIT]],
        }

    def system_health(self):
        """
        Times a cheap user count against storage. A storage failure reports
        the system as unhealthy instead of raising.
        """
        started = time.perf_counter()
        try:
            self.repositories.users.count()
            db_status = 'connected'
        except StorageError as e:
            logger.error(f'Health check storage read failed: {e.message}')
            db_status = 'error'
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        return {
            'status': 'healthy' if db_status == 'connected' else 'unhealthy',
            'database': {
                'status': db_status,
                'backend': self.repositories.backend,
                'responseTime': f'{elapsed_ms}ms',
            },
            'server': {
                'pythonVersion': platform.python_version(),
                'platform': sys.platform,
                'uptime': round(time.monotonic() - STARTED_AT, 2),
            },
            'timestamp': utc_now().isoformat(),
        }
