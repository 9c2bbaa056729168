"""
Event service handling creation, browsing and organizer-side management.
"""

from fastapi import HTTPException, status

from eventbook.models.booking import Booking
from eventbook.models.event import Event
from eventbook.schemas.event import EventCreate, EventUpdate
from eventbook.stores.interfaces import Catalog, EventFilter
from eventbook.core.logging import get_logger

logger = get_logger(__name__)


async def _require_category(catalog: Catalog, category_id: int) -> None:
    if await catalog.categories.get(category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category {category_id} not found",
        )


async def create_event(catalog: Catalog, event_data: EventCreate, organizer_id: int) -> Event:
    """Create a new event with every spot available."""
    await _require_category(catalog, event_data.category_id)

    fields = event_data.model_dump()
    fields.update(
        remaining_spots=event_data.capacity,
        organizer_id=organizer_id,
        is_active=True,
    )
    event = await catalog.events.create(fields)
    await catalog.commit()

    logger.info(
        "event_created",
        event_id=event.id,
        title=event.title,
        capacity=event.capacity,
        organizer_id=organizer_id,
    )
    return event


async def get_event(catalog: Catalog, event_id: int) -> Event:
    """Get a single event by ID."""
    event = await catalog.events.get(event_id)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return event


async def list_events(catalog: Catalog, filters: EventFilter) -> tuple[list[Event], int]:
    """List active events matching the filters, one page at a time."""
    return await catalog.events.list(filters)


async def get_owned_event(catalog: Catalog, event_id: int, user_id: int) -> Event:
    """Get an event the caller organizes. Raises 403 for anyone else."""
    event = await get_event(catalog, event_id)
    if event.organizer_id != user_id:
        logger.warning("event_access_denied", event_id=event_id, user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the organizer can manage this event",
        )
    return event


async def update_event(
    catalog: Catalog,
    event_id: int,
    event_data: EventUpdate,
    user_id: int,
) -> Event:
    """
    Apply a partial update from the organizer.

    A capacity change keeps the spots already taken: remaining_spots moves by
    the same amount, in the store's conditional UPDATE, so bookings landing
    meanwhile are not overwritten. Shrinking below the taken count is a 409.
    """
    await get_owned_event(catalog, event_id, user_id)
    fields = event_data.model_dump(exclude_unset=True)
    capacity = fields.pop("capacity", None)

    if fields.get("category_id") is not None:
        await _require_category(catalog, fields["category_id"])

    if capacity is not None:
        resized = await catalog.events.resize(event_id, capacity)
        if resized is None:
            taken = (await get_event(catalog, event_id)).taken_spots
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Capacity cannot be lower than spots already booked ({taken})",
            )

    # Explicit nulls only clear optional text fields
    nullable = {"description", "image_url"}
    fields = {k: v for k, v in fields.items() if v is not None or k in nullable}

    event = await catalog.events.update(event_id, fields)
    await catalog.commit()
    logger.info(
        "event_updated",
        event_id=event_id,
        fields=sorted(fields),
        capacity=event.capacity,
        remaining_spots=event.remaining_spots,
    )
    return event


async def delete_event(catalog: Catalog, event_id: int, user_id: int) -> None:
    await get_owned_event(catalog, event_id, user_id)
    await catalog.events.delete(event_id)
    await catalog.commit()
    logger.info("event_deleted", event_id=event_id, organizer_id=user_id)


async def list_event_bookings(catalog: Catalog, event_id: int, user_id: int) -> list[Booking]:
    """Bookings for one event, visible to its organizer only."""
    await get_owned_event(catalog, event_id, user_id)
    return await catalog.bookings.list(event_id=event_id)
