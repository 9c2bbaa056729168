"""
Shared route dependencies.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventbook.db.session import get_db
from eventbook.stores.interfaces import Catalog
from eventbook.stores.sqlalchemy_store import build_catalog


async def get_catalog(db: AsyncSession = Depends(get_db)) -> Catalog:
    """Catalog store bound to the request's session."""
    return build_catalog(db)
