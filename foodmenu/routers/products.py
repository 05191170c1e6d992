"""
Products Router

Endpoints:
- GET /api/products - List all products
- GET /api/products/restaurant/{restaurant_id} - Menu of one restaurant
- GET /api/products/category/{category_id} - Products in a category
- GET /api/products/{product_id} - Get a product
- POST /api/products - Create a product (admin)
- PUT /api/products/{product_id} - Update a product (admin)
- DELETE /api/products/{product_id} - Delete a product (admin)
"""

import logging

from fastapi import APIRouter, HTTPException, status

from foodmenu.routers.deps import AdminOnly, StorageDep
from foodmenu.schemas import Product, ProductCreate, ProductUpdate, SuccessResponse
from foodmenu.storage.base import DuplicateEntityError

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "Product not found"


@router.get("", response_model=list[Product], summary="List all products")
async def list_products(storage: StorageDep) -> list[Product]:
    return await storage.products.get_all()


@router.get(
    "/restaurant/{restaurant_id}",
    response_model=list[Product],
    summary="List a restaurant's products",
)
async def list_products_by_restaurant(restaurant_id: str, storage: StorageDep) -> list[Product]:
    return await storage.products.get_by_restaurant(restaurant_id)


@router.get(
    "/category/{category_id}",
    response_model=list[Product],
    summary="List products in a category",
)
async def list_products_by_category(category_id: str, storage: StorageDep) -> list[Product]:
    return await storage.products.get_by_category(category_id)


@router.get("/{product_id}", response_model=Product, summary="Get product details")
async def get_product(product_id: str, storage: StorageDep) -> Product:
    product = await storage.products.get_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return product


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
)
async def create_product(
    data: ProductCreate,
    storage: StorageDep,
    admin: AdminOnly,
) -> Product:
    try:
        product = await storage.products.add(data)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info(f"Admin '{admin.username}' created product {product.id} ({product.name})")
    return product


@router.put("/{product_id}", response_model=Product, summary="Update a product")
async def update_product(
    product_id: str,
    data: ProductUpdate,
    storage: StorageDep,
    admin: AdminOnly,
) -> Product:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    product = await storage.products.update(product_id, changes)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    logger.info(f"Admin '{admin.username}' updated product {product_id}: {sorted(changes)}")
    return product


@router.delete("/{product_id}", response_model=SuccessResponse, summary="Delete a product")
async def delete_product(
    product_id: str,
    storage: StorageDep,
    admin: AdminOnly,
) -> SuccessResponse:
    if not await storage.products.delete(product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)

    logger.info(f"Admin '{admin.username}' deleted product {product_id}")
    return SuccessResponse()
