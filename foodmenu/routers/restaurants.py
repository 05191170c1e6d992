"""
Restaurants Router

Endpoints:
- GET /api/restaurants - List all restaurants
- GET /api/restaurants/active - List active restaurants
- GET /api/restaurants/{restaurant_id} - Get a restaurant
- POST /api/restaurants - Create a restaurant (admin)
- PUT /api/restaurants/{restaurant_id} - Update a restaurant (admin)
- DELETE /api/restaurants/{restaurant_id} - Delete a restaurant (admin)
"""

import logging

from fastapi import APIRouter, HTTPException, status

from foodmenu.routers.deps import AdminOnly, StorageDep
from foodmenu.schemas import Restaurant, RestaurantCreate, RestaurantUpdate, SuccessResponse
from foodmenu.storage.base import DuplicateEntityError

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "Restaurant not found"


@router.get("", response_model=list[Restaurant], summary="List all restaurants")
async def list_restaurants(storage: StorageDep) -> list[Restaurant]:
    return await storage.restaurants.get_all()


@router.get("/active", response_model=list[Restaurant], summary="List active restaurants")
async def list_active_restaurants(storage: StorageDep) -> list[Restaurant]:
    return await storage.restaurants.get_active()


@router.get("/{restaurant_id}", response_model=Restaurant, summary="Get restaurant details")
async def get_restaurant(restaurant_id: str, storage: StorageDep) -> Restaurant:
    restaurant = await storage.restaurants.get_by_id(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return restaurant


@router.post(
    "",
    response_model=Restaurant,
    status_code=status.HTTP_201_CREATED,
    summary="Create a restaurant",
)
async def create_restaurant(
    data: RestaurantCreate,
    storage: StorageDep,
    admin: AdminOnly,
) -> Restaurant:
    try:
        restaurant = await storage.restaurants.add(data)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info(f"Admin '{admin.username}' created restaurant {restaurant.id}")
    return restaurant


@router.put("/{restaurant_id}", response_model=Restaurant, summary="Update a restaurant")
async def update_restaurant(
    restaurant_id: str,
    data: RestaurantUpdate,
    storage: StorageDep,
    admin: AdminOnly,
) -> Restaurant:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    restaurant = await storage.restaurants.update(restaurant_id, changes)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    logger.info(f"Admin '{admin.username}' updated restaurant {restaurant_id}: {sorted(changes)}")
    return restaurant


@router.delete("/{restaurant_id}", response_model=SuccessResponse, summary="Delete a restaurant")
async def delete_restaurant(
    restaurant_id: str,
    storage: StorageDep,
    admin: AdminOnly,
) -> SuccessResponse:
    if not await storage.restaurants.delete(restaurant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    logger.info(f"Admin '{admin.username}' deleted restaurant {restaurant_id}")
    return SuccessResponse()
