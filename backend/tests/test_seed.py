"""
Tests for catalog seeding.
"""

import pytest

from eventbook.seed import CATEGORIES, SAMPLE_EVENTS, seed_categories, seed_sample_events
from eventbook.stores.interfaces import EventFilter
from eventbook.stores.sqlalchemy_store import build_catalog


@pytest.mark.asyncio
async def test_seed_categories_is_idempotent(db_session):
    catalog = build_catalog(db_session)

    first = await seed_categories(catalog)
    second = await seed_categories(catalog)

    assert set(first) == {c["name"] for c in CATEGORIES}
    assert first == second
    assert len(await catalog.categories.list()) == len(CATEGORIES)


@pytest.mark.asyncio
async def test_seed_keeps_existing_categories(db_session, category):
    catalog = build_catalog(db_session)

    ids = await seed_categories(catalog)

    assert ids["Concerts"] == category.id
    assert len(await catalog.categories.list()) == len(CATEGORIES)


@pytest.mark.asyncio
async def test_seed_sample_events(db_session, test_user):
    catalog = build_catalog(db_session)
    category_ids = await seed_categories(catalog)

    created = await seed_sample_events(db_session, catalog, category_ids, test_user.id)
    again = await seed_sample_events(db_session, catalog, category_ids, test_user.id)

    assert created == len(SAMPLE_EVENTS)
    assert again == 0

    events, total = await catalog.events.list(EventFilter())
    assert total == len(SAMPLE_EVENTS)
    assert all(e.remaining_spots == e.capacity for e in events)
    workshop = next(e for e in events if e.title == "Web Development Workshop")
    assert workshop.price == 0
    assert workshop.category_id == category_ids["Workshops"]


@pytest.mark.asyncio
async def test_seed_events_without_categories(db_session, test_user):
    catalog = build_catalog(db_session)
    assert await seed_sample_events(db_session, catalog, {}, test_user.id) == 0
