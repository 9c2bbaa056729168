"""
Booking endpoints.

Booking accepts anonymous requests on purpose: the admission check is what
turns a missing identity into a 401, alongside sold-out and already-booked.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from eventbook.api.deps import get_catalog
from eventbook.schemas.booking import BookingCreate, BookingResponse, BookingCancelResponse
from eventbook.services.booking_service import book_event, cancel_booking, get_user_bookings
from eventbook.services.cache_service import invalidate_event_cache
from eventbook.core.security import Identity, get_current_identity, get_optional_identity
from eventbook.stores.interfaces import Catalog

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    identity: Optional[Identity] = Depends(get_optional_identity),
    catalog: Catalog = Depends(get_catalog),
):
    """
    Book one spot on an event.

    Rejected with 401 when not signed in, 409 when sold out or already
    booked by the caller, 404 when the event does not exist.
    """
    booking = await book_event(catalog, identity, booking_data.event_id)
    # Remaining spots changed, so cached listings are stale
    await invalidate_event_cache()
    return booking


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking_endpoint(
    booking_id: int,
    identity: Identity = Depends(get_current_identity),
    catalog: Catalog = Depends(get_catalog),
):
    """Cancel a booking and release its spot back to the event."""
    booking = await cancel_booking(catalog, booking_id, identity.user_id)
    await invalidate_event_cache()
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.status,
    )


@router.get("/", response_model=list[BookingResponse])
async def list_user_bookings(
    identity: Identity = Depends(get_current_identity),
    catalog: Catalog = Depends(get_catalog),
):
    """Get all bookings for the authenticated user."""
    return await get_user_bookings(catalog, identity.user_id)
