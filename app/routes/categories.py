"""Category routes."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from ..errors import NotFound
from ..models import Category
from ..storage import CategoryStorage, get_category_storage

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=List[Category])
def get_categories(category_storage: CategoryStorage = Depends(get_category_storage)):
    """Get all categories."""
    return category_storage.get_all()


@router.get("/name/{name}", response_model=Category)
def get_category_by_name(
    name: str, category_storage: CategoryStorage = Depends(get_category_storage)
):
    """Get a category by name."""
    category = category_storage.get_by_name(name)
    if not category:
        raise NotFound("Category")
    return category


@router.get("/{category_id}", response_model=Category)
def get_category(
    category_id: UUID, category_storage: CategoryStorage = Depends(get_category_storage)
):
    """Get a category by ID."""
    category = category_storage.get_by_id(category_id)
    if not category:
        raise NotFound("Category")
    return category
