"""
Event endpoints with Redis caching on list operations.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from eventbook.api.deps import get_catalog
from eventbook.schemas.booking import BookingResponse
from eventbook.schemas.event import (
    EventCreate,
    EventListResponse,
    EventResponse,
    EventSort,
    EventUpdate,
    PriceFilter,
)
from eventbook.services.event_service import (
    create_event,
    delete_event,
    get_event,
    list_event_bookings,
    list_events,
    update_event,
)
from eventbook.services.cache_service import get_cached_events, set_cached_events, invalidate_event_cache
from eventbook.core.security import Identity, get_current_identity
from eventbook.core.logging import get_logger
from eventbook.stores.interfaces import Catalog, EventFilter

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    identity: Identity = Depends(get_current_identity),
    catalog: Catalog = Depends(get_catalog),
):
    """Create a new event. Requires authentication; the caller becomes the organizer."""
    event = await create_event(catalog, event_data, identity.user_id)
    await invalidate_event_cache()
    return event


@router.get("/", response_model=EventListResponse)
async def list_events_endpoint(
    category_id: Optional[int] = Query(None),
    price: PriceFilter = Query(PriceFilter.ALL),
    search: Optional[str] = Query(None, max_length=100),
    upcoming_only: bool = Query(False),
    sort_by: EventSort = Query(EventSort.DATE),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    catalog: Catalog = Depends(get_catalog),
):
    """
    List events with filtering, search, sorting and pagination.
    Results are cached in Redis; the cache is invalidated on any event or booking write.
    """
    filters = EventFilter(
        category_id=category_id,
        price=price,
        search=search or None,
        upcoming_only=upcoming_only,
        sort_by=sort_by,
        page=page,
        page_size=page_size,
    )

    cached = await get_cached_events(filters)
    if cached:
        logger.info("events_list_cache_hit", page=page)
        cached["cached"] = True
        return EventListResponse(**cached)

    events, total = await list_events(catalog, filters)

    response_data = {
        "events": [EventResponse.model_validate(e).model_dump(mode="json") for e in events],
        "total": total,
        "page": page,
        "page_size": page_size,
        "cached": False,
    }

    await set_cached_events(filters, response_data)

    return EventListResponse(**response_data)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(event_id: int, catalog: Catalog = Depends(get_catalog)):
    """Get a single event by ID. Not cached (needs real-time remaining spots)."""
    return await get_event(catalog, event_id)


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: int,
    event_data: EventUpdate,
    identity: Identity = Depends(get_current_identity),
    catalog: Catalog = Depends(get_catalog),
):
    """Update an event. Organizer only."""
    event = await update_event(catalog, event_id, event_data, identity.user_id)
    await invalidate_event_cache()
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: int,
    identity: Identity = Depends(get_current_identity),
    catalog: Catalog = Depends(get_catalog),
):
    """Delete an event and its bookings. Organizer only."""
    await delete_event(catalog, event_id, identity.user_id)
    await invalidate_event_cache()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/bookings", response_model=list[BookingResponse])
async def list_event_bookings_endpoint(
    event_id: int,
    identity: Identity = Depends(get_current_identity),
    catalog: Catalog = Depends(get_catalog),
):
    """Bookings for an event. Organizer only."""
    return await list_event_bookings(catalog, event_id, identity.user_id)
