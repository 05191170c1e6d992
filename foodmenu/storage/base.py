"""
Storage Abstract Base Classes

Defines the data-access layer every backend implements: one repository per
entity (restaurants, categories, products, orders, settings, admin auth,
carts) behind a single ``BaseStorage`` object.

Shared semantics, whatever the backend:
    - ``add`` fills defaults, generates an id when none is given and
      returns the stored record. A duplicate id raises DuplicateEntityError.
    - ``update`` merges the given fields over the stored record (last write
      wins) and returns the result, or None for an unknown id. The id
      itself never changes.
    - ``delete`` returns True when something was removed.
    - ``get_by_id`` returns None for an unknown id.

Record construction lives in the ``build_*`` helpers below so both
backends fill defaults identically.

Version: 1.0.0
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

from foodmenu.schemas import (
    AdminCredentials,
    AdminSession,
    Cart,
    Category,
    CategoryCreate,
    Order,
    OrderCreate,
    OrderStatusEnum,
    Product,
    ProductCreate,
    Restaurant,
    RestaurantCreate,
    SiteSettings,
)

DEFAULT_PICKUP_MINUTES = 30


class StorageError(Exception):
    """Base class for data-access errors."""


class DuplicateEntityError(StorageError):
    """Raised when creating a record whose id is already taken."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' already exists")


# =============================================================================
# RECORD BUILDERS
# =============================================================================

def generate_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_restaurant(data: RestaurantCreate) -> Restaurant:
    values = data.model_dump()
    values["id"] = data.id or generate_id()
    return Restaurant(**values)


def build_category(data: CategoryCreate) -> Category:
    values = data.model_dump()
    values["id"] = data.id or generate_id()
    if not values["slug"]:
        values["slug"] = values["id"]
    return Category(**values)


def build_product(data: ProductCreate) -> Product:
    values = data.model_dump()
    values["id"] = data.id or generate_id()
    values["restaurant_ids"] = list(dict.fromkeys(data.restaurant_ids))
    return Product(**values)


def order_total(order: OrderCreate | Order) -> float:
    return round(sum(item.price * item.quantity for item in order.items), 2)


def build_order(data: OrderCreate) -> Order:
    values = data.model_dump()
    values["id"] = data.id or generate_id()
    values["status"] = data.status or OrderStatusEnum.NEW
    values["created_at"] = data.created_at or utc_now()
    values["pickup_time"] = (
        data.pickup_time if data.pickup_time is not None else DEFAULT_PICKUP_MINUTES
    )
    values["total_amount"] = (
        data.total_amount if data.total_amount is not None else order_total(data)
    )
    return Order(**values)


def merge(record, changes: dict[str, Any]):
    """Return a copy of ``record`` with ``changes`` applied (id excluded)."""
    changes = {k: v for k, v in changes.items() if k != "id"}
    return record.model_validate({**record.model_dump(), **changes})


# =============================================================================
# REPOSITORIES
# =============================================================================

class RestaurantRepository(ABC):

    @abstractmethod
    async def get_all(self) -> list[Restaurant]:
        pass

    @abstractmethod
    async def get_active(self) -> list[Restaurant]:
        pass

    @abstractmethod
    async def get_by_id(self, restaurant_id: str) -> Optional[Restaurant]:
        pass

    @abstractmethod
    async def add(self, data: RestaurantCreate) -> Restaurant:
        pass

    @abstractmethod
    async def update(self, restaurant_id: str, changes: dict[str, Any]) -> Optional[Restaurant]:
        pass

    @abstractmethod
    async def delete(self, restaurant_id: str) -> bool:
        pass


class CategoryRepository(ABC):

    @abstractmethod
    async def get_all(self) -> list[Category]:
        pass

    @abstractmethod
    async def get_active(self) -> list[Category]:
        pass

    @abstractmethod
    async def get_by_id(self, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    async def add(self, data: CategoryCreate) -> Category:
        pass

    @abstractmethod
    async def update(self, category_id: str, changes: dict[str, Any]) -> Optional[Category]:
        pass

    @abstractmethod
    async def delete(self, category_id: str) -> bool:
        pass


class ProductRepository(ABC):

    @abstractmethod
    async def get_all(self) -> list[Product]:
        pass

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def get_by_restaurant(self, restaurant_id: str) -> list[Product]:
        """Products whose restaurant_ids contain ``restaurant_id``."""
        pass

    @abstractmethod
    async def get_by_category(self, category_id: str) -> list[Product]:
        pass

    @abstractmethod
    async def add(self, data: ProductCreate) -> Product:
        pass

    @abstractmethod
    async def update(self, product_id: str, changes: dict[str, Any]) -> Optional[Product]:
        pass

    @abstractmethod
    async def delete(self, product_id: str) -> bool:
        pass


class OrderRepository(ABC):
    """Orders are always returned newest first."""

    @abstractmethod
    async def get_all(self, status: Optional[OrderStatusEnum] = None) -> list[Order]:
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_restaurant(self, restaurant_id: str) -> list[Order]:
        pass

    @abstractmethod
    async def add(self, data: OrderCreate) -> Order:
        pass

    @abstractmethod
    async def update(self, order_id: str, changes: dict[str, Any]) -> Optional[Order]:
        pass

    @abstractmethod
    async def delete(self, order_id: str) -> bool:
        pass


class SettingsRepository(ABC):

    @abstractmethod
    async def get_all(self) -> SiteSettings:
        pass

    @abstractmethod
    async def update(self, changes: dict[str, Any]) -> SiteSettings:
        """Merge ``changes`` into the stored settings and return the result."""
        pass

    @abstractmethod
    async def exists(self) -> bool:
        pass

    async def get(self, key: str, default: Any = None) -> Any:
        settings = await self.get_all()
        value = getattr(settings, key, None)
        return default if value is None else value


class AuthRepository(ABC):

    @abstractmethod
    async def get_credentials(self) -> Optional[AdminCredentials]:
        pass

    @abstractmethod
    async def set_credentials(self, credentials: AdminCredentials) -> None:
        pass

    @abstractmethod
    async def create_session(self, session: AdminSession) -> AdminSession:
        pass

    @abstractmethod
    async def get_session(self, token: str) -> Optional[AdminSession]:
        pass

    @abstractmethod
    async def delete_session(self, token: str) -> bool:
        pass

    @abstractmethod
    async def purge_expired_sessions(self, now: datetime) -> int:
        """Drop sessions that expired before ``now``; returns how many."""
        pass


class CartRepository(ABC):

    @abstractmethod
    async def get(self, cart_id: str) -> Optional[Cart]:
        pass

    @abstractmethod
    async def save(self, cart: Cart) -> Cart:
        """Insert or replace the cart."""
        pass

    @abstractmethod
    async def delete(self, cart_id: str) -> bool:
        pass


# =============================================================================
# STORAGE
# =============================================================================

class BaseStorage(ABC):
    """
    Abstract base class for a complete backing store.

    Concrete classes set the repository attributes in ``__init__``.
    """

    restaurants: RestaurantRepository
    categories: CategoryRepository
    products: ProductRepository
    orders: OrderRepository
    settings: SettingsRepository
    auth: AuthRepository
    carts: CartRepository

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend name ('sql', 'json')."""
        pass

    @abstractmethod
    async def init(self) -> None:
        """Create the schema / file if it does not exist yet."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check the store is reachable."""
        pass

    async def close(self) -> None:
        """Release connections; nothing to do by default."""
        return None
