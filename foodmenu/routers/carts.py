"""
Carts Router

Endpoints:
- POST /api/carts - Create an empty cart
- GET /api/carts/{cart_id} - Get a cart with its totals
- POST /api/carts/{cart_id}/items - Add a product
- PUT /api/carts/{cart_id}/items/{product_id} - Change a line's quantity
- DELETE /api/carts/{cart_id}/items/{product_id} - Remove a line
- DELETE /api/carts/{cart_id} - Clear the cart
- POST /api/carts/{cart_id}/checkout - Turn the cart into an order
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from foodmenu.routers.deps import NotifierDep, StorageDep
from foodmenu.schemas import (
    Cart,
    CartItemAdd,
    CartItemUpdate,
    CheckoutRequest,
    CheckoutResponse,
)
from foodmenu.services.cart import CartError, CartService

router = APIRouter()


def get_cart_service(storage: StorageDep) -> CartService:
    return CartService(storage)


CartServiceDep = Annotated[CartService, Depends(get_cart_service)]


def _to_http(error: CartError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=str(error))


@router.post("", response_model=Cart, status_code=status.HTTP_201_CREATED, summary="Create a cart")
async def create_cart(carts: CartServiceDep) -> Cart:
    return await carts.create()


@router.get("/{cart_id}", response_model=Cart, summary="Get a cart")
async def get_cart(cart_id: str, carts: CartServiceDep) -> Cart:
    try:
        return await carts.get(cart_id)
    except CartError as e:
        raise _to_http(e)


@router.post("/{cart_id}/items", response_model=Cart, summary="Add a product to the cart")
async def add_cart_item(cart_id: str, data: CartItemAdd, carts: CartServiceDep) -> Cart:
    try:
        return await carts.add_item(
            cart_id,
            data.product_id,
            quantity=data.quantity,
            restaurant_id=data.restaurant_id,
        )
    except CartError as e:
        raise _to_http(e)


@router.put(
    "/{cart_id}/items/{product_id}",
    response_model=Cart,
    summary="Set a line's quantity (0 removes it)",
)
async def update_cart_item(
    cart_id: str,
    product_id: str,
    data: CartItemUpdate,
    carts: CartServiceDep,
) -> Cart:
    try:
        return await carts.update_quantity(cart_id, product_id, data.quantity)
    except CartError as e:
        raise _to_http(e)


@router.delete("/{cart_id}/items/{product_id}", response_model=Cart, summary="Remove a line")
async def remove_cart_item(cart_id: str, product_id: str, carts: CartServiceDep) -> Cart:
    try:
        return await carts.remove_item(cart_id, product_id)
    except CartError as e:
        raise _to_http(e)


@router.delete("/{cart_id}", response_model=Cart, summary="Clear the cart")
async def clear_cart(cart_id: str, carts: CartServiceDep) -> Cart:
    try:
        return await carts.clear(cart_id)
    except CartError as e:
        raise _to_http(e)


@router.post("/{cart_id}/checkout", response_model=CheckoutResponse, summary="Check out")
async def checkout_cart(
    cart_id: str,
    customer: CheckoutRequest,
    carts: CartServiceDep,
    notifier: NotifierDep,
) -> CheckoutResponse:
    try:
        order = await carts.checkout(cart_id, customer, notifier)
    except CartError as e:
        raise _to_http(e)
    return CheckoutResponse(success=True, order=order)
