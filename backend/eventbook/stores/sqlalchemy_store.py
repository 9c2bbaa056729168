"""SQLAlchemy implementation of the catalog store.

All stores share the request's AsyncSession, so writes from one request
commit or roll back together when the service awaits `Catalog.commit()`.
Writes are flushed immediately so failures surface inside the service call
that caused them.
"""

from datetime import date
from typing import Any, Optional

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventbook.core.logging import get_logger
from eventbook.core.metrics import record_store_write_failure
from eventbook.models import Booking, Category, Event
from eventbook.schemas.event import EventSort, PriceFilter
from eventbook.stores.interfaces import (
    BookingStore,
    Catalog,
    CategoryStore,
    DuplicateBookingError,
    EventFilter,
    EventStore,
    StoreWriteError,
)

logger = get_logger(__name__)


class _SqlStore:
    entity = "record"

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _write_failed(self, error: SQLAlchemyError) -> StoreWriteError:
        logger.error("store_write_failed", entity=self.entity, error=str(error))
        record_store_write_failure(self.entity)
        return StoreWriteError(self.entity)

    def _integrity_failed(self, error: IntegrityError) -> Exception:
        return self._write_failed(error)

    async def _save(self, obj):
        try:
            self.db.add(obj)
            await self.db.flush()
            await self.db.refresh(obj)
        except IntegrityError as e:
            raise self._integrity_failed(e) from e
        except SQLAlchemyError as e:
            raise self._write_failed(e) from e
        return obj

    async def _execute_write(self, stmt):
        try:
            return await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise self._write_failed(e) from e


class SqlCategoryStore(_SqlStore, CategoryStore):
    entity = "category"

    async def list(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name.asc()))
        return list(result.scalars().all())

    async def get(self, category_id: int) -> Optional[Category]:
        return await self.db.get(Category, category_id)

    async def create(self, fields: dict[str, Any]) -> Category:
        return await self._save(Category(**fields))


class SqlEventStore(_SqlStore, EventStore):
    entity = "event"

    async def list(self, filters: EventFilter) -> tuple[list[Event], int]:
        query = select(Event).where(Event.is_active.is_(True))

        if filters.category_id is not None:
            query = query.where(Event.category_id == filters.category_id)

        if filters.price == PriceFilter.FREE:
            query = query.where(Event.price == 0)
        elif filters.price == PriceFilter.PAID:
            query = query.where(Event.price > 0)

        if filters.search:
            pattern = f"%{filters.search.strip().lower()}%"
            query = query.where(
                or_(
                    func.lower(Event.title).like(pattern),
                    func.lower(func.coalesce(Event.description, "")).like(pattern),
                )
            )

        if filters.upcoming_only:
            query = query.where(Event.date >= date.today())

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        if filters.sort_by == EventSort.PRICE:
            ordering = (Event.price.asc(), Event.date.asc(), Event.time.asc(), Event.id.asc())
        else:
            ordering = (Event.date.asc(), Event.time.asc(), Event.id.asc())

        page_query = (
            query
            .order_by(*ordering)
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        result = await self.db.execute(page_query)
        return list(result.scalars().all()), total

    async def get(self, event_id: int) -> Optional[Event]:
        return await self.db.get(Event, event_id, populate_existing=True)

    async def create(self, fields: dict[str, Any]) -> Event:
        return await self._save(Event(**fields))

    async def update(self, event_id: int, fields: dict[str, Any]) -> Optional[Event]:
        event = await self.get(event_id)
        if event is None:
            return None
        for key, value in fields.items():
            setattr(event, key, value)
        return await self._save(event)

    async def delete(self, event_id: int) -> bool:
        await self._execute_write(delete(Booking).where(Booking.event_id == event_id))
        result = await self._execute_write(delete(Event).where(Event.id == event_id))
        return result.rowcount > 0

    async def reserve_spot(self, event_id: int) -> Optional[Event]:
        result = await self._execute_write(
            update(Event)
            .where(Event.id == event_id, Event.remaining_spots > 0)
            .values(remaining_spots=Event.remaining_spots - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return await self.get(event_id)

    async def resize(self, event_id: int, capacity: int) -> Optional[Event]:
        # SET expressions see the pre-update row, so taken spots are preserved
        result = await self._execute_write(
            update(Event)
            .where(Event.id == event_id, Event.capacity - Event.remaining_spots <= capacity)
            .values(
                capacity=capacity,
                remaining_spots=Event.remaining_spots + (capacity - Event.capacity),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return await self.get(event_id)

    async def release_spot(self, event_id: int) -> Optional[Event]:
        result = await self._execute_write(
            update(Event)
            .where(Event.id == event_id, Event.remaining_spots < Event.capacity)
            .values(remaining_spots=Event.remaining_spots + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return await self.get(event_id)


class SqlBookingStore(_SqlStore, BookingStore):
    entity = "booking"

    def _integrity_failed(self, error: IntegrityError) -> Exception:
        # Only the live (attendee, event) index is unique on bookings
        if "unique" in str(error.orig).lower():
            logger.warning("booking_duplicate_blocked", error=str(error.orig))
            return DuplicateBookingError()
        return super()._integrity_failed(error)

    async def list(
        self,
        attendee_id: Optional[int] = None,
        event_id: Optional[int] = None,
    ) -> list[Booking]:
        query = select(Booking)
        if attendee_id is not None:
            query = query.where(Booking.attendee_id == attendee_id)
        if event_id is not None:
            query = query.where(Booking.event_id == event_id)
        result = await self.db.execute(
            query.order_by(Booking.booking_date.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def get(self, booking_id: int) -> Optional[Booking]:
        return await self.db.get(Booking, booking_id)

    async def create(self, fields: dict[str, Any]) -> Booking:
        return await self._save(Booking(**fields))

    async def update(self, booking_id: int, fields: dict[str, Any]) -> Optional[Booking]:
        booking = await self.get(booking_id)
        if booking is None:
            return None
        for key, value in fields.items():
            setattr(booking, key, value)
        return await self._save(booking)


class SqlTransaction(_SqlStore):
    entity = "transaction"

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            raise self._write_failed(e) from e


def build_catalog(db: AsyncSession) -> Catalog:
    return Catalog(
        categories=SqlCategoryStore(db),
        events=SqlEventStore(db),
        bookings=SqlBookingStore(db),
        commit=SqlTransaction(db).commit,
    )
