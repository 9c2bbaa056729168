"""
Tests for the SQLAlchemy catalog store's counter moves.
"""

import pytest

from eventbook.models.booking import BookingStatus
from eventbook.stores.interfaces import EventFilter
from eventbook.stores.sqlalchemy_store import build_catalog


@pytest.mark.asyncio
async def test_reserve_spot_decrements(db_session, make_event):
    event = await make_event(capacity=2)
    catalog = build_catalog(db_session)

    reserved = await catalog.events.reserve_spot(event.id)
    assert reserved is not None
    assert reserved.remaining_spots == 1


@pytest.mark.asyncio
async def test_reserve_spot_refuses_at_zero(db_session, make_event):
    event = await make_event(capacity=1)
    catalog = build_catalog(db_session)

    assert await catalog.events.reserve_spot(event.id) is not None
    assert await catalog.events.reserve_spot(event.id) is None

    refreshed = await catalog.events.get(event.id)
    assert refreshed.remaining_spots == 0


@pytest.mark.asyncio
async def test_reserve_spot_unknown_event(db_session):
    catalog = build_catalog(db_session)
    assert await catalog.events.reserve_spot(12345) is None


@pytest.mark.asyncio
async def test_release_spot_stops_at_capacity(db_session, make_event):
    event = await make_event(capacity=3, remaining_spots=2)
    catalog = build_catalog(db_session)

    released = await catalog.events.release_spot(event.id)
    assert released.remaining_spots == 3
    assert await catalog.events.release_spot(event.id) is None


@pytest.mark.asyncio
async def test_delete_removes_event_and_bookings(db_session, make_event, other_user):
    event = await make_event()
    catalog = build_catalog(db_session)
    await catalog.bookings.create(
        {
            "event_id": event.id,
            "attendee_id": other_user.id,
            "attendee_name": other_user.username,
            "attendee_email": other_user.email,
            "status": BookingStatus.CONFIRMED,
            "total_amount": 25.0,
        }
    )

    assert await catalog.events.delete(event.id) is True
    assert await catalog.bookings.list(event_id=event.id) == []
    assert await catalog.events.delete(event.id) is False


@pytest.mark.asyncio
async def test_list_returns_total_beyond_page(db_session, make_event):
    for i in range(3):
        await make_event(title=f"Event {i}")
    catalog = build_catalog(db_session)

    events, total = await catalog.events.list(EventFilter(page=1, page_size=2))
    assert total == 3
    assert len(events) == 2


@pytest.mark.asyncio
async def test_bookings_filtered_by_attendee_and_event(db_session, make_event, test_user, other_user):
    first = await make_event(title="First")
    second = await make_event(title="Second")
    catalog = build_catalog(db_session)

    for event, user in ((first, test_user), (second, test_user), (first, other_user)):
        await catalog.bookings.create(
            {
                "event_id": event.id,
                "attendee_id": user.id,
                "attendee_name": user.username,
                "attendee_email": user.email,
                "status": BookingStatus.CONFIRMED,
                "total_amount": 25.0,
            }
        )

    assert len(await catalog.bookings.list(attendee_id=test_user.id)) == 2
    assert len(await catalog.bookings.list(event_id=first.id)) == 2
    mine_for_first = await catalog.bookings.list(attendee_id=test_user.id, event_id=first.id)
    assert [b.event_id for b in mine_for_first] == [first.id]


@pytest.mark.asyncio
async def test_resize_keeps_taken_spots(db_session, make_event):
    event = await make_event(capacity=10)
    catalog = build_catalog(db_session)
    await catalog.events.reserve_spot(event.id)

    resized = await catalog.events.resize(event.id, 20)
    assert resized.capacity == 20
    assert resized.remaining_spots == 19


@pytest.mark.asyncio
async def test_resize_refuses_below_taken(db_session, make_event):
    event = await make_event(capacity=3, remaining_spots=1)
    catalog = build_catalog(db_session)

    assert await catalog.events.resize(event.id, 1) is None
    unchanged = await catalog.events.get(event.id)
    assert (unchanged.capacity, unchanged.remaining_spots) == (3, 1)

    resized = await catalog.events.resize(event.id, 2)
    assert resized.remaining_spots == 0
