"""Per-request service construction from the app's config and extensions"""
from flask import current_app

from repositories import get_repositories
from services.booking_service import BookingService
from services.room_service import RoomService
from services.user_service import UserService
from services.dashboard_service import DashboardService


def booking_service():
    return BookingService(get_repositories(), current_app.config, logger=current_app.logger)


def room_service():
    return RoomService(
        get_repositories(), current_app.config,
        image_storage=current_app.extensions.get('image_storage'),
        logger=current_app.logger,
    )


def user_service():
    return UserService(
        get_repositories(), current_app.config,
        image_storage=current_app.extensions.get('image_storage'),
        logger=current_app.logger,
    )


def dashboard_service():
    return DashboardService(get_repositories())
