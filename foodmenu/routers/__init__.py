"""API routers, one module per resource."""

from foodmenu.routers import (
    auth,
    carts,
    categories,
    orders,
    products,
    restaurants,
    settings,
    statistics,
)

__all__ = [
    "auth",
    "carts",
    "categories",
    "orders",
    "products",
    "restaurants",
    "settings",
    "statistics",
]
