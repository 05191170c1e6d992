"""
Categories Router

Endpoints:
- GET /api/categories - List all categories
- GET /api/categories/active - List active categories
- GET /api/categories/{category_id} - Get a category
- POST /api/categories - Create a category (admin)
- PUT /api/categories/{category_id} - Update a category (admin)
- DELETE /api/categories/{category_id} - Delete a category (admin)
"""

import logging

from fastapi import APIRouter, HTTPException, status

from foodmenu.routers.deps import AdminOnly, StorageDep
from foodmenu.schemas import Category, CategoryCreate, CategoryUpdate, SuccessResponse
from foodmenu.storage.base import DuplicateEntityError

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "Category not found"


@router.get("", response_model=list[Category], summary="List all categories")
async def list_categories(storage: StorageDep) -> list[Category]:
    return await storage.categories.get_all()


@router.get("/active", response_model=list[Category], summary="List active categories")
async def list_active_categories(storage: StorageDep) -> list[Category]:
    return await storage.categories.get_active()


@router.get("/{category_id}", response_model=Category)
async def get_category(category_id: str, storage: StorageDep) -> Category:
    category = await storage.categories.get_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return category


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    storage: StorageDep,
    admin: AdminOnly,
) -> Category:
    try:
        category = await storage.categories.add(data)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info(f"Admin '{admin.username}' created category {category.id}")
    return category


@router.put("/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    storage: StorageDep,
    admin: AdminOnly,
) -> Category:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    category = await storage.categories.update(category_id, changes)
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    logger.info(f"Admin '{admin.username}' updated category {category_id}")
    return category


@router.delete("/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: str,
    storage: StorageDep,
    admin: AdminOnly,
) -> SuccessResponse:
    if not await storage.categories.delete(category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    logger.info(f"Admin '{admin.username}' deleted category {category_id}")
    return SuccessResponse()
