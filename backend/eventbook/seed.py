"""
Seed the catalog with default categories and a few sample events.

    python -m eventbook.seed                 # against DATABASE_URL
    python -m eventbook.seed --create-tables # also create missing tables first

Safe to re-run: categories are matched by name, events by title.
"""

import argparse
import asyncio
from datetime import date, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventbook.core.logging import get_logger, setup_logging
from eventbook.core.security import hash_password
from eventbook.db.base import Base
from eventbook.db.session import SessionLocal, dispose_engine, engine
from eventbook.models import Event, User
from eventbook.stores.interfaces import Catalog
from eventbook.stores.sqlalchemy_store import build_catalog

logger = get_logger(__name__)

SEED_ORGANIZER_EMAIL = "organizer@eventbook.local"

CATEGORIES = [
    {"name": "Concerts", "description": "Live music performances and concerts", "color": "#FF6B6B"},
    {"name": "Workshops", "description": "Educational workshops and training sessions", "color": "#4ECDC4"},
    {"name": "Sports", "description": "Sports events and athletic competitions", "color": "#45B7D1"},
    {"name": "Conferences", "description": "Professional conferences and seminars", "color": "#96CEB4"},
    {"name": "Art & Culture", "description": "Art exhibitions, theater, and cultural events", "color": "#FECA57"},
    {"name": "Food & Drink", "description": "Food festivals, tastings, and culinary events", "color": "#FF9FF3"},
]

SAMPLE_EVENTS = [
    {
        "title": "Summer Music Festival",
        "description": "Join us for an amazing outdoor music festival featuring local and international artists.",
        "days_ahead": 45,
        "time": time(18, 0),
        "location": "Central Park, New York",
        "capacity": 500,
        "price": 75.0,
        "category": "Concerts",
    },
    {
        "title": "Web Development Workshop",
        "description": "Learn modern web development techniques with React and TypeScript.",
        "days_ahead": 20,
        "time": time(9, 0),
        "location": "Tech Hub, San Francisco",
        "capacity": 30,
        "price": 0.0,
        "category": "Workshops",
    },
    {
        "title": "Local Basketball Tournament",
        "description": "Community basketball tournament for all skill levels.",
        "days_ahead": 10,
        "time": time(14, 0),
        "location": "Community Sports Center",
        "capacity": 100,
        "price": 10.0,
        "category": "Sports",
    },
]


async def _get_or_create_organizer(db: AsyncSession) -> User:
    result = await db.execute(select(User).where(User.email == SEED_ORGANIZER_EMAIL))
    organizer = result.scalar_one_or_none()
    if organizer is None:
        organizer = User(
            email=SEED_ORGANIZER_EMAIL,
            username="sample_organizer",
            hashed_password=hash_password("change-me-please"),
        )
        db.add(organizer)
        await db.flush()
        await db.refresh(organizer)
        logger.info("seed_organizer_created", user_id=organizer.id)
    return organizer


async def seed_categories(catalog: Catalog) -> dict[str, int]:
    """Create missing default categories. Returns name -> id for all categories."""
    existing = {c.name: c.id for c in await catalog.categories.list()}
    for category in CATEGORIES:
        if category["name"] in existing:
            continue
        created = await catalog.categories.create(category)
        existing[created.name] = created.id
        logger.info("seed_category_created", name=created.name)
    return existing


async def seed_sample_events(
    db: AsyncSession,
    catalog: Catalog,
    category_ids: dict[str, int],
    organizer_id: int,
) -> int:
    """Create missing sample events. Returns how many were created."""
    if not category_ids:
        logger.warning("seed_events_skipped", reason="no_categories")
        return 0

    result = await db.execute(select(Event.title))
    existing_titles = set(result.scalars().all())
    fallback_category = next(iter(category_ids.values()))

    created = 0
    for sample in SAMPLE_EVENTS:
        if sample["title"] in existing_titles:
            continue
        event = await catalog.events.create(
            {
                "title": sample["title"],
                "description": sample["description"],
                "date": date.today() + timedelta(days=sample["days_ahead"]),
                "time": sample["time"],
                "location": sample["location"],
                "capacity": sample["capacity"],
                "remaining_spots": sample["capacity"],
                "price": sample["price"],
                "category_id": category_ids.get(sample["category"], fallback_category),
                "organizer_id": organizer_id,
                "is_active": True,
            }
        )
        created += 1
        logger.info("seed_event_created", event_id=event.id, title=event.title)
    return created


async def seed(create_tables: bool = False) -> None:
    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        catalog = build_catalog(db)
        organizer = await _get_or_create_organizer(db)
        category_ids = await seed_categories(catalog)
        created = await seed_sample_events(db, catalog, category_ids, organizer.id)
        await catalog.commit()

    logger.info("seed_complete", categories=len(category_ids), events_created=created)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed categories and sample events.")
    parser.add_argument("--create-tables", action="store_true", help="create missing tables first")
    args = parser.parse_args()

    setup_logging()

    async def run():
        try:
            await seed(create_tables=args.create_tables)
        finally:
            await dispose_engine()

    asyncio.run(run())


if __name__ == "__main__":
    main()
