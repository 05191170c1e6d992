"""
Cart Service

Server-side shopping carts. A cart holds lines from a single restaurant;
the first line added binds it, and emptying it releases the binding.
Checkout turns the cart into an order and clears it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from foodmenu.schemas import (
    Cart,
    CartItem,
    CheckoutRequest,
    Order,
    OrderCreate,
    OrderItem,
    OrderStatusEnum,
)
from foodmenu.services.notifications import BaseNotificationService
from foodmenu.services.orders import create_order
from foodmenu.storage.base import BaseStorage, generate_id, utc_now

logger = logging.getLogger(__name__)

MAX_LINE_QUANTITY = 999


class CartError(Exception):
    """Base class for cart failures; ``status_code`` is the HTTP mapping."""
    status_code = 400


class CartNotFoundError(CartError):
    status_code = 404

    def __init__(self):
        super().__init__("Cart not found")


class ProductNotFoundError(CartError):
    status_code = 404

    def __init__(self):
        super().__init__("Product not found")


class ProductNotAvailableError(CartError):
    status_code = 400

    def __init__(self):
        super().__init__("Product is not available at this restaurant")


class RestaurantConflictError(CartError):
    status_code = 409

    def __init__(self):
        super().__init__("Cart can only contain items from one restaurant. Please clear your cart first.")


class CartItemNotFoundError(CartError):
    status_code = 404

    def __init__(self):
        super().__init__("Product not found in cart")


class EmptyCartError(CartError):
    def __init__(self):
        super().__init__("Cart is empty")


class RestaurantNotSpecifiedError(CartError):
    def __init__(self):
        super().__init__("Restaurant not specified")


@dataclass
class CartService:

    storage: BaseStorage

    async def _save(self, cart: Cart) -> Cart:
        cart.updated_at = utc_now()
        return await self.storage.carts.save(cart)

    async def create(self) -> Cart:
        cart = await self._save(Cart(id=generate_id()))
        logger.debug(f"Cart {cart.id} created")
        return cart

    async def get(self, cart_id: str) -> Cart:
        cart = await self.storage.carts.get(cart_id)
        if cart is None:
            raise CartNotFoundError()
        return cart

    async def add_item(
        self,
        cart_id: str,
        product_id: str,
        quantity: int = 1,
        restaurant_id: Optional[str] = None,
    ) -> Cart:
        cart = await self.get(cart_id)
        product = await self.storage.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError()

        offered_at = product.restaurant_ids
        if restaurant_id and offered_at and restaurant_id not in offered_at:
            raise ProductNotAvailableError()
        if cart.restaurant_id:
            if offered_at and cart.restaurant_id not in offered_at:
                raise RestaurantConflictError()
            if restaurant_id and restaurant_id != cart.restaurant_id:
                raise RestaurantConflictError()

        for item in cart.items:
            if item.product_id == product_id:
                item.quantity = min(item.quantity + quantity, MAX_LINE_QUANTITY)
                break
        else:
            cart.items.append(
                CartItem(
                    product_id=product.id,
                    name=product.name,
                    price=product.price,
                    quantity=quantity,
                )
            )
            if not cart.restaurant_id:
                cart.restaurant_id = restaurant_id or (offered_at[0] if offered_at else None)

        return await self._save(cart)

    async def update_quantity(self, cart_id: str, product_id: str, quantity: int) -> Cart:
        """Set a line's quantity; zero or less removes the line."""
        cart = await self.get(cart_id)

        index = next(
            (i for i, item in enumerate(cart.items) if item.product_id == product_id),
            None,
        )
        if index is None:
            raise CartItemNotFoundError()

        if quantity <= 0:
            cart.items.pop(index)
        else:
            cart.items[index].quantity = quantity

        if not cart.items:
            cart.restaurant_id = None

        return await self._save(cart)

    async def remove_item(self, cart_id: str, product_id: str) -> Cart:
        return await self.update_quantity(cart_id, product_id, 0)

    async def clear(self, cart_id: str) -> Cart:
        cart = await self.get(cart_id)
        cart.items = []
        cart.restaurant_id = None
        return await self._save(cart)

    async def checkout(
        self,
        cart_id: str,
        customer: CheckoutRequest,
        notifier: Optional[BaseNotificationService] = None,
    ) -> Order:
        cart = await self.get(cart_id)

        if not cart.items:
            raise EmptyCartError()
        if not cart.restaurant_id:
            raise RestaurantNotSpecifiedError()

        order_data = OrderCreate(
            restaurant_id=cart.restaurant_id,
            customer_name=customer.name,
            customer_phone=customer.phone,
            customer_email=customer.email,
            pickup_time=customer.pickup_time,
            status=OrderStatusEnum.NEW,
            total_amount=cart.total_price,
            items=[OrderItem(**item.model_dump()) for item in cart.items],
        )
        order = await create_order(self.storage, order_data, notifier)

        await self.clear(cart_id)
        logger.info(f"Cart {cart_id} checked out as order #{order.id}")
        return order
