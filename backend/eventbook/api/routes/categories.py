"""
Category endpoints. Browsing is public; creating requires a signed-in user.
"""

from fastapi import APIRouter, Depends, status

from eventbook.api.deps import get_catalog
from eventbook.core.security import Identity, get_current_identity
from eventbook.schemas.category import CategoryCreate, CategoryResponse
from eventbook.services.category_service import create_category, get_category, list_categories
from eventbook.stores.interfaces import Catalog

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("/", response_model=list[CategoryResponse])
async def list_categories_endpoint(catalog: Catalog = Depends(get_catalog)):
    return await list_categories(catalog)


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category_endpoint(
    category_data: CategoryCreate,
    identity: Identity = Depends(get_current_identity),
    catalog: Catalog = Depends(get_catalog),
):
    return await create_category(catalog, category_data)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category_endpoint(category_id: int, catalog: Catalog = Depends(get_catalog)):
    return await get_category(catalog, category_id)
