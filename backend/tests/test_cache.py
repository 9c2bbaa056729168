"""
Tests for the event listing cache.
"""

import fnmatch

import pytest
from httpx import AsyncClient

from eventbook.schemas.event import EventSort, PriceFilter
from eventbook.services import cache_service
from eventbook.stores.interfaces import EventFilter


class InMemoryRedis:
    """Just enough of the redis.asyncio client for the listing cache."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value

    async def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    async def scan_iter(self, match="*", count=None):
        for key in list(self.store):
            if fnmatch.fnmatch(key, match):
                yield key


@pytest.fixture
def fake_redis(monkeypatch):
    fake = InMemoryRedis()

    async def get_fake_redis():
        return fake

    monkeypatch.setattr(cache_service, "get_redis", get_fake_redis)
    return fake


def test_cache_key_varies_with_filters():
    base = EventFilter()
    variants = [
        EventFilter(category_id=3),
        EventFilter(price=PriceFilter.FREE),
        EventFilter(search="jazz"),
        EventFilter(upcoming_only=True),
        EventFilter(sort_by=EventSort.PRICE),
        EventFilter(page=2),
        EventFilter(page_size=50),
    ]
    keys = {cache_service.make_event_list_key(f) for f in [base, *variants]}
    assert len(keys) == len(variants) + 1
    assert all(k.startswith(cache_service.LIST_KEY_PREFIX) for k in keys)


def test_cache_key_normalizes_search():
    assert cache_service.make_event_list_key(
        EventFilter(search="  Jazz ")
    ) == cache_service.make_event_list_key(EventFilter(search="jazz"))


@pytest.mark.asyncio
async def test_cache_disabled_is_a_miss():
    assert await cache_service.get_cached_events(EventFilter()) is None
    await cache_service.set_cached_events(EventFilter(), {"events": []})
    await cache_service.invalidate_event_cache()


@pytest.mark.asyncio
async def test_listing_served_from_cache(client: AsyncClient, fake_redis, test_event):
    first = await client.get("/api/v1/events/")
    assert first.json()["cached"] is False
    assert len(fake_redis.store) == 1

    second = await client.get("/api/v1/events/")
    assert second.json()["cached"] is True
    assert second.json()["events"][0]["id"] == test_event.id


@pytest.mark.asyncio
async def test_booking_invalidates_listing_cache(
    client: AsyncClient, fake_redis, auth_headers, test_event
):
    await client.get("/api/v1/events/")
    await client.get("/api/v1/events/?price=paid")
    assert len(fake_redis.store) == 2

    await client.post("/api/v1/bookings/", json={"event_id": test_event.id}, headers=auth_headers)
    assert fake_redis.store == {}

    listing = await client.get("/api/v1/events/")
    assert listing.json()["cached"] is False
    assert listing.json()["events"][0]["remaining_spots"] == 99
