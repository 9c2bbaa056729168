"""
Category service: browse and manage the categories events are filed under.
"""

from fastapi import HTTPException, status

from eventbook.models.category import Category
from eventbook.schemas.category import CategoryCreate
from eventbook.stores.interfaces import Catalog
from eventbook.core.logging import get_logger

logger = get_logger(__name__)


async def list_categories(catalog: Catalog) -> list[Category]:
    return await catalog.categories.list()


async def get_category(catalog: Catalog, category_id: int) -> Category:
    category = await catalog.categories.get(category_id)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category {category_id} not found",
        )
    return category


async def create_category(catalog: Catalog, data: CategoryCreate) -> Category:
    category = await catalog.categories.create(data.model_dump())
    await catalog.commit()
    logger.info("category_created", category_id=category.id, name=category.name)
    return category
