"""
JSON Flat-File Storage Implementation

Keeps the whole store in one JSON document on disk:

    {
      "restaurants": [...], "categories": [...], "products": [...],
      "orders": [...], "carts": [...], "admin_sessions": [...],
      "settings": {...} | null, "admin_credentials": {...} | null
    }

Every write is read-modify-write of the full document under a FileLock,
and the file is replaced atomically. Blocking file IO runs in a worker
thread so the event loop is never held by the lock.

Version: 1.0.0
"""

import asyncio
import copy
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from filelock import FileLock

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
from foodmenu.storage.base import (
    AuthRepository,
    BaseStorage,
    CartRepository,
    CategoryRepository,
    DuplicateEntityError,
    OrderRepository,
    ProductRepository,
    RestaurantRepository,
    SettingsRepository,
    build_category,
    build_order,
    build_product,
    build_restaurant,
    merge,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_DOCUMENT: dict[str, Any] = {
    "restaurants": [],
    "categories": [],
    "products": [],
    "orders": [],
    "carts": [],
    "admin_sessions": [],
    "settings": None,
    "admin_credentials": None,
}


class JsonDocument:
    """The JSON file plus its lock."""

    def __init__(self, path: str | Path, lock_timeout: float = 10):
        self.path = Path(path)
        self._lock = FileLock(f"{self.path}.lock", timeout=lock_timeout)

    def _load(self) -> dict[str, Any]:
        data = copy.deepcopy(EMPTY_DOCUMENT)
        if not self.path.exists():
            return data
        try:
            with self.path.open("r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {self.path}: {e}")
            return data
        if not isinstance(stored, dict):
            logger.error(f"Error reading {self.path}: expected an object, got {type(stored).__name__}")
            return data
        data.update({k: v for k, v in stored.items() if k in data})
        return data

    def _dump(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def _read_sync(self) -> dict[str, Any]:
        with self._lock:
            return self._load()

    def _update_sync(self, mutate: Callable[[dict[str, Any]], T]) -> T:
        with self._lock:
            data = self._load()
            result = mutate(data)
            self._dump(data)
            return result

    def _ensure_sync(self) -> bool:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            if self.path.exists():
                return False
            self._dump(copy.deepcopy(EMPTY_DOCUMENT))
            return True

    async def read(self) -> dict[str, Any]:
        return await asyncio.to_thread(self._read_sync)

    async def update(self, mutate: Callable[[dict[str, Any]], T]) -> T:
        """Run ``mutate`` on the loaded document under the lock, then save it."""
        return await asyncio.to_thread(self._update_sync, mutate)

    async def ensure(self) -> bool:
        """Create the file if missing; returns True when it was created."""
        return await asyncio.to_thread(self._ensure_sync)


def _index_of(records: list[dict[str, Any]], record_id: str, key: str = "id") -> int:
    for i, record in enumerate(records):
        if record.get(key) == record_id:
            return i
    return -1


class _JsonCollection:
    """Shared CRUD over one list in the document."""

    collection: str
    entity: str
    model: type

    def __init__(self, document: JsonDocument):
        self.document = document

    async def _records(self) -> list[dict[str, Any]]:
        return (await self.document.read())[self.collection]

    async def get_all(self):
        return [self.model.model_validate(r) for r in await self._records()]

    async def get_by_id(self, record_id: str):
        for record in await self._records():
            if record.get("id") == record_id:
                return self.model.model_validate(record)
        return None

    async def _insert(self, record):
        def mutate(data: dict[str, Any]):
            records = data[self.collection]
            if _index_of(records, record.id) != -1:
                raise DuplicateEntityError(self.entity, record.id)
            records.append(record.model_dump(mode="json"))
            return record

        return await self.document.update(mutate)

    async def update(self, record_id: str, changes: dict[str, Any]):
        def mutate(data: dict[str, Any]):
            records = data[self.collection]
            index = _index_of(records, record_id)
            if index == -1:
                return None
            merged = merge(self.model.model_validate(records[index]), changes)
            records[index] = merged.model_dump(mode="json")
            return merged

        return await self.document.update(mutate)

    async def delete(self, record_id: str) -> bool:
        def mutate(data: dict[str, Any]) -> bool:
            records = data[self.collection]
            remaining = [r for r in records if r.get("id") != record_id]
            data[self.collection] = remaining
            return len(remaining) != len(records)

        return await self.document.update(mutate)


# =============================================================================
# CATALOG
# =============================================================================

class JsonRestaurantRepository(_JsonCollection, RestaurantRepository):
    collection = "restaurants"
    entity = "Restaurant"
    model = Restaurant

    async def get_active(self) -> list[Restaurant]:
        return [r for r in await self.get_all() if r.is_active]

    async def add(self, data: RestaurantCreate) -> Restaurant:
        return await self._insert(build_restaurant(data))


class JsonCategoryRepository(_JsonCollection, CategoryRepository):
    collection = "categories"
    entity = "Category"
    model = Category

    async def get_active(self) -> list[Category]:
        return [c for c in await self.get_all() if c.is_active]

    async def add(self, data: CategoryCreate) -> Category:
        return await self._insert(build_category(data))


class JsonProductRepository(_JsonCollection, ProductRepository):
    collection = "products"
    entity = "Product"
    model = Product

    async def get_by_restaurant(self, restaurant_id: str) -> list[Product]:
        return [p for p in await self.get_all() if restaurant_id in p.restaurant_ids]

    async def get_by_category(self, category_id: str) -> list[Product]:
        return [p for p in await self.get_all() if p.category == category_id]

    async def add(self, data: ProductCreate) -> Product:
        return await self._insert(build_product(data))

    async def update(self, product_id: str, changes: dict[str, Any]) -> Optional[Product]:
        if "restaurant_ids" in changes:
            changes = {**changes, "restaurant_ids": list(dict.fromkeys(changes["restaurant_ids"]))}
        return await super().update(product_id, changes)


# =============================================================================
# ORDERS
# =============================================================================

class JsonOrderRepository(_JsonCollection, OrderRepository):
    collection = "orders"
    entity = "Order"
    model = Order

    @staticmethod
    def _newest_first(orders: list[Order]) -> list[Order]:
        return sorted(orders, key=lambda o: o.created_at.timestamp(), reverse=True)

    async def get_all(self, status: Optional[OrderStatusEnum] = None) -> list[Order]:
        orders = await super().get_all()
        if status is not None:
            orders = [o for o in orders if o.status == status]
        return self._newest_first(orders)

    async def get_by_restaurant(self, restaurant_id: str) -> list[Order]:
        orders = [o for o in await super().get_all() if o.restaurant_id == restaurant_id]
        return self._newest_first(orders)

    async def add(self, data: OrderCreate) -> Order:
        return await self._insert(build_order(data))


# =============================================================================
# SETTINGS & AUTH
# =============================================================================

class JsonSettingsRepository(SettingsRepository):

    def __init__(self, document: JsonDocument):
        self.document = document

    async def get_all(self) -> SiteSettings:
        stored = (await self.document.read())["settings"]
        return SiteSettings.model_validate(stored) if stored else SiteSettings()

    async def exists(self) -> bool:
        return bool((await self.document.read())["settings"])

    async def update(self, changes: dict[str, Any]) -> SiteSettings:
        def mutate(data: dict[str, Any]) -> SiteSettings:
            current = SiteSettings.model_validate(data["settings"] or {})
            merged = merge(current, changes)
            data["settings"] = merged.model_dump(mode="json")
            return merged

        return await self.document.update(mutate)


class JsonAuthRepository(AuthRepository):

    def __init__(self, document: JsonDocument):
        self.document = document

    async def get_credentials(self) -> Optional[AdminCredentials]:
        stored = (await self.document.read())["admin_credentials"]
        return AdminCredentials.model_validate(stored) if stored else None

    async def set_credentials(self, credentials: AdminCredentials) -> None:
        def mutate(data: dict[str, Any]) -> None:
            data["admin_credentials"] = credentials.model_dump(mode="json")

        await self.document.update(mutate)

    async def create_session(self, session: AdminSession) -> AdminSession:
        def mutate(data: dict[str, Any]) -> AdminSession:
            data["admin_sessions"].append(session.model_dump(mode="json"))
            return session

        return await self.document.update(mutate)

    async def get_session(self, token: str) -> Optional[AdminSession]:
        for record in (await self.document.read())["admin_sessions"]:
            if record.get("token") == token:
                return AdminSession.model_validate(record)
        return None

    async def delete_session(self, token: str) -> bool:
        def mutate(data: dict[str, Any]) -> bool:
            sessions = data["admin_sessions"]
            remaining = [s for s in sessions if s.get("token") != token]
            data["admin_sessions"] = remaining
            return len(remaining) != len(sessions)

        return await self.document.update(mutate)

    async def purge_expired_sessions(self, now: datetime) -> int:
        def mutate(data: dict[str, Any]) -> int:
            sessions = data["admin_sessions"]
            remaining = [
                s for s in sessions
                if AdminSession.model_validate(s).expires_at >= now
            ]
            data["admin_sessions"] = remaining
            return len(sessions) - len(remaining)

        return await self.document.update(mutate)


# =============================================================================
# CARTS
# =============================================================================

class JsonCartRepository(CartRepository):

    def __init__(self, document: JsonDocument):
        self.document = document

    async def get(self, cart_id: str) -> Optional[Cart]:
        for record in (await self.document.read())["carts"]:
            if record.get("id") == cart_id:
                return Cart.model_validate(record)
        return None

    async def save(self, cart: Cart) -> Cart:
        def mutate(data: dict[str, Any]) -> Cart:
            carts = data["carts"]
            record = cart.model_dump(mode="json", exclude={"total_price", "total_items"})
            index = _index_of(carts, cart.id)
            if index == -1:
                carts.append(record)
            else:
                carts[index] = record
            return cart

        return await self.document.update(mutate)

    async def delete(self, cart_id: str) -> bool:
        def mutate(data: dict[str, Any]) -> bool:
            carts = data["carts"]
            remaining = [c for c in carts if c.get("id") != cart_id]
            data["carts"] = remaining
            return len(remaining) != len(carts)

        return await self.document.update(mutate)


# =============================================================================
# STORAGE
# =============================================================================

class JsonStorage(BaseStorage):
    """
    Storage backed by a single JSON file.

    Suited to demos and single-instance deployments; every write rewrites
    the whole file.
    """

    def __init__(self, path: str | Path, lock_timeout: float = 10):
        self.document = JsonDocument(path, lock_timeout=lock_timeout)

        self.restaurants = JsonRestaurantRepository(self.document)
        self.categories = JsonCategoryRepository(self.document)
        self.products = JsonProductRepository(self.document)
        self.orders = JsonOrderRepository(self.document)
        self.settings = JsonSettingsRepository(self.document)
        self.auth = JsonAuthRepository(self.document)
        self.carts = JsonCartRepository(self.document)

        logger.info(f"JsonStorage initialized ({self.document.path})")

    @property
    def backend_name(self) -> str:
        return "json"

    async def init(self) -> None:
        if await self.document.ensure():
            logger.info(f"Created JSON database at {self.document.path}")

    async def ping(self) -> bool:
        try:
            await self.document.read()
            return True
        except Exception as e:
            logger.error(f"JSON database ping failed: {e}")
            return False
