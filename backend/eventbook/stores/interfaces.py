"""Catalog store interfaces (repository pattern).

The catalog store is the only place records are read or written. Per entity
it offers list/get/create/update; events additionally expose the atomic
conditional counter moves the booking engine relies on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from eventbook.models import Booking, Category, Event
from eventbook.schemas.event import EventSort, PriceFilter


class StoreWriteError(Exception):
    """Raised when a write against the catalog store fails."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} write failed")
        self.entity = entity


class DuplicateBookingError(Exception):
    """Raised when an attendee already holds a live booking for the event."""


@dataclass(frozen=True)
class EventFilter:
    """Listing criteria for events."""

    category_id: Optional[int] = None
    price: PriceFilter = PriceFilter.ALL
    search: Optional[str] = None
    upcoming_only: bool = False
    sort_by: EventSort = EventSort.DATE
    page: int = 1
    page_size: int = 20


class CategoryStore(ABC):
    @abstractmethod
    async def list(self) -> list[Category]:
        """Return all categories ordered by name."""
        ...

    @abstractmethod
    async def get(self, category_id: int) -> Optional[Category]:
        ...

    @abstractmethod
    async def create(self, fields: dict[str, Any]) -> Category:
        ...


class EventStore(ABC):
    @abstractmethod
    async def list(self, filters: EventFilter) -> tuple[list[Event], int]:
        """Return one page of active events matching filters, and the total match count."""
        ...

    @abstractmethod
    async def get(self, event_id: int) -> Optional[Event]:
        ...

    @abstractmethod
    async def create(self, fields: dict[str, Any]) -> Event:
        ...

    @abstractmethod
    async def update(self, event_id: int, fields: dict[str, Any]) -> Optional[Event]:
        ...

    @abstractmethod
    async def delete(self, event_id: int) -> bool:
        """Delete an event and its bookings. Returns False if it did not exist."""
        ...

    @abstractmethod
    async def reserve_spot(self, event_id: int) -> Optional[Event]:
        """Decrement remaining_spots only if it is above zero.

        Returns the updated event, or None if no spot was left.
        """
        ...

    @abstractmethod
    async def resize(self, event_id: int, capacity: int) -> Optional[Event]:
        """Set a new capacity, keeping the spots already taken.

        remaining_spots moves by the same amount as capacity, in one
        conditional UPDATE. Returns None if more spots are taken than the
        new capacity allows.
        """
        ...

    @abstractmethod
    async def release_spot(self, event_id: int) -> Optional[Event]:
        """Increment remaining_spots only if it is below capacity.

        Returns the updated event, or None if the counter was already full.
        """
        ...


class BookingStore(ABC):
    @abstractmethod
    async def list(
        self,
        attendee_id: Optional[int] = None,
        event_id: Optional[int] = None,
    ) -> list[Booking]:
        """Return bookings matching the given attendee and/or event, newest first."""
        ...

    @abstractmethod
    async def get(self, booking_id: int) -> Optional[Booking]:
        ...

    @abstractmethod
    async def create(self, fields: dict[str, Any]) -> Booking:
        ...

    @abstractmethod
    async def update(self, booking_id: int, fields: dict[str, Any]) -> Optional[Booking]:
        ...


@dataclass(frozen=True)
class Catalog:
    """The three entity stores, bound to one unit of work.

    Nothing a service writes is durable until it awaits `commit()`.
    """

    categories: CategoryStore
    events: EventStore
    bookings: BookingStore
    commit: Callable[[], Awaitable[None]]
