from flask import current_app

from .base import (
    RoomRepository, BookingRepository, UserRepository, Repositories,
    RoomFilters, BookingFilters,
)
from .sqlalchemy_repository import build_sqlalchemy_repositories
from .memory_repository import MemoryStore, build_memory_repositories

BACKENDS = {
    'sqlalchemy': build_sqlalchemy_repositories,
    'memory': build_memory_repositories,
}


def init_repositories(app):
    """Build the configured backend and attach it to the app"""
    backend = app.config.get('STORAGE_BACKEND', 'sqlalchemy')
    if backend not in BACKENDS:
        raise ValueError(f'Unknown STORAGE_BACKEND: {backend}')
    repositories = BACKENDS[backend]()
    app.extensions['repositories'] = repositories
    app.logger.info(f'Storage backend: {backend}')
    return repositories


def get_repositories():
    return current_app.extensions['repositories']
