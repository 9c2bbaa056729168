"""
Booking service: admission plus commit.

BOOKING FLOW
============

  1. Load the event (404 if missing) and the caller's bookings for it
  2. Run the pure admission check against that snapshot
  3. On ADMIT, ask the store to reserve a spot:
       UPDATE events SET remaining_spots = remaining_spots - 1
       WHERE id = :event_id AND remaining_spots > 0
     Zero rows updated means someone else took the last spot after our
     snapshot was read -> reject as sold out
  4. Only after the reservation succeeds, create the Booking record
  5. Commit, before the response is built

Steps 3 to 5 share one transaction: if the booking insert or the commit
fails, the decrement is rolled back with it, so the counter and the booking
list never drift apart. A failed commit is reported as a store write failure,
never as a booking.

The "already booked" check in step 2 reads a snapshot too. Two submits from
the same user can both pass it; the partial unique index on live bookings
rejects the second insert, which is reported as "already booked".

Two users racing for the last spot can both pass step 2, but only one of
them gets a row back from step 3.
"""

import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status

from eventbook.models.booking import Booking, BookingStatus
from eventbook.core.logging import get_logger
from eventbook.core.metrics import (
    booking_cancellations,
    booking_latency,
    record_admission,
    record_booking_attempt,
)
from eventbook.core.security import Identity
from eventbook.services.admission import RejectReason, check_admission
from eventbook.services.event_service import get_event
from eventbook.stores.interfaces import Catalog, DuplicateBookingError, StoreWriteError

logger = get_logger(__name__)

REJECTION_RESPONSES = {
    RejectReason.NOT_AUTHENTICATED: (status.HTTP_401_UNAUTHORIZED, "Not authenticated"),
    RejectReason.SOLD_OUT: (status.HTTP_409_CONFLICT, "Sold out"),
    RejectReason.ALREADY_BOOKED: (status.HTTP_409_CONFLICT, "Already booked"),
}

# Statuses that occupy one of the event's spots
SPOT_HOLDING_STATUSES = {BookingStatus.CONFIRMED, BookingStatus.PENDING}


def _rejection(reason: RejectReason) -> HTTPException:
    status_code, detail = REJECTION_RESPONSES[reason]
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)


async def book_event(catalog: Catalog, identity: Optional[Identity], event_id: int) -> Booking:
    """
    Book one spot on an event for the caller.
    Raises 401/409 on rejection, 404 if the event does not exist, 409 if it
    is no longer open for booking.
    """
    started = time.perf_counter()
    user_id = identity.user_id if identity else None

    event = await get_event(catalog, event_id)
    if not event.is_active:
        logger.warning("booking_rejected", event_id=event_id, user_id=user_id, reason="event_inactive")
        record_booking_attempt("rejected")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Event is not open for booking",
        )

    user_bookings = (
        await catalog.bookings.list(attendee_id=user_id, event_id=event_id)
        if user_id is not None
        else []
    )

    decision = check_admission(event, user_id, user_bookings)
    record_admission(decision.outcome)

    if not decision.admitted:
        logger.warning(
            "booking_rejected",
            event_id=event_id,
            user_id=user_id,
            reason=decision.reason.value,
            remaining_spots=event.remaining_spots,
        )
        record_booking_attempt("rejected")
        raise _rejection(decision.reason)

    try:
        reserved = await catalog.events.reserve_spot(event_id)
        if reserved is None:
            logger.warning("booking_conflict", event_id=event_id, user_id=user_id, reason="last_spot_taken")
            record_booking_attempt("conflict")
            raise _rejection(RejectReason.SOLD_OUT)

        booking = await catalog.bookings.create(
            {
                "event_id": event_id,
                "attendee_id": user_id,
                "attendee_name": identity.username or "Unknown",
                "attendee_email": identity.email or "unknown@email.com",
                "status": BookingStatus.CONFIRMED,
                "booking_date": datetime.now(timezone.utc),
                "total_amount": reserved.price or 0.0,
            }
        )
        await catalog.commit()
    except DuplicateBookingError:
        logger.warning("booking_conflict", event_id=event_id, user_id=user_id, reason="duplicate_submit")
        record_booking_attempt("conflict")
        raise _rejection(RejectReason.ALREADY_BOOKED)
    except StoreWriteError:
        record_booking_attempt("error")
        raise

    record_booking_attempt("success")
    booking_latency.observe(time.perf_counter() - started)
    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user_id,
        event_id=event_id,
        total_amount=booking.total_amount,
        remaining_spots=reserved.remaining_spots,
    )
    return booking


async def cancel_booking(catalog: Catalog, booking_id: int, user_id: int) -> Booking:
    """
    Cancel the caller's booking and give its spot back to the event.
    Raises 404 if the booking is not theirs, 400 if already cancelled.
    """
    booking = await catalog.bookings.get(booking_id)
    if booking is None or booking.attendee_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )

    if booking.status == BookingStatus.CANCELLED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Booking is already cancelled",
        )

    held_spot = booking.status in SPOT_HOLDING_STATUSES
    booking = await catalog.bookings.update(booking_id, {"status": BookingStatus.CANCELLED})

    if held_spot:
        event = await catalog.events.release_spot(booking.event_id)
        if event is None:
            # Counter already at capacity, nothing to give back
            logger.warning("spot_release_skipped", booking_id=booking_id, event_id=booking.event_id)

    await catalog.commit()

    booking_cancellations.inc()
    logger.info(
        "booking_cancelled",
        booking_id=booking_id,
        user_id=user_id,
        event_id=booking.event_id,
        spot_released=held_spot,
    )
    return booking


async def get_user_bookings(catalog: Catalog, user_id: int) -> list[Booking]:
    """Get all bookings for a user, newest first."""
    return await catalog.bookings.list(attendee_id=user_id)
