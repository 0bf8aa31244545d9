"""
Storage port.

Services talk to these interfaces only. Rows cross the boundary as plain
snake_case dicts, the same shape the models' ``to_row()`` produce, so a
backend can be swapped through the STORAGE_BACKEND setting without touching
service code.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple


@dataclass
class RoomFilters:
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    location: Optional[str] = None
    capacity: Optional[int] = None
    search: Optional[str] = None


@dataclass
class BookingFilters:
    status: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    user_id: Optional[str] = None
    room_id: Optional[str] = None
    search: Optional[str] = None


class RoomRepository(ABC):

    @abstractmethod
    def get(self, room_id: str) -> Optional[dict]:
        raise NotImplementedError

    @abstractmethod
    def first(self) -> Optional[dict]:
        """Any existing room (oldest first)"""
        raise NotImplementedError

    @abstractmethod
    def add(self, fields: dict) -> dict:
        raise NotImplementedError

    @abstractmethod
    def update(self, room_id: str, fields: dict) -> Optional[dict]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, room_id: str) -> bool:
        """Delete the room; bookings keep their copied room fields and lose room_id"""
        raise NotImplementedError

    @abstractmethod
    def search(self, filters: RoomFilters, offset: int, limit: int) -> Tuple[List[dict], int]:
        """Page of matching rooms, newest first, plus the total match count"""
        raise NotImplementedError

    @abstractmethod
    def top_rated(self, limit: int) -> List[dict]:
        raise NotImplementedError

    @abstractmethod
    def categories(self) -> List[dict]:
        """[{'name', 'count', 'image'}] for every non-empty category"""
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError


class BookingRepository(ABC):

    @abstractmethod
    def get(self, booking_id: str) -> Optional[dict]:
        raise NotImplementedError

    @abstractmethod
    def add(self, fields: dict) -> dict:
        raise NotImplementedError

    @abstractmethod
    def update(self, booking_id: str, fields: dict) -> Optional[dict]:
        raise NotImplementedError

    @abstractmethod
    def find_overlapping(self, room_id: str, check_in: date, check_out: date, policy: str,
                         exclude_booking_id: Optional[str] = None) -> List[dict]:
        """Non-cancelled bookings on the room whose stay overlaps [check_in, check_out)"""
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: str) -> List[dict]:
        """All of a user's bookings, newest first"""
        raise NotImplementedError

    @abstractmethod
    def search(self, filters: BookingFilters, offset: int, limit: int) -> Tuple[List[dict], int]:
        raise NotImplementedError

    @abstractmethod
    def all(self) -> List[dict]:
        raise NotImplementedError


class UserRepository(ABC):

    @abstractmethod
    def get(self, user_id: str) -> Optional[dict]:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[dict]:
        raise NotImplementedError

    @abstractmethod
    def email_taken(self, email: str, exclude_user_id: Optional[str] = None) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add(self, fields: dict) -> dict:
        raise NotImplementedError

    @abstractmethod
    def update(self, user_id: str, fields: dict) -> Optional[dict]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list(self, search: Optional[str] = None, role: Optional[str] = None) -> List[dict]:
        """Newest first"""
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError


class Repositories:
    """The three repositories a request needs, from one backend"""

    def __init__(self, rooms: RoomRepository, bookings: BookingRepository, users: UserRepository, backend: str):
        self.rooms = rooms
        self.bookings = bookings
        self.users = users
        self.backend = backend
