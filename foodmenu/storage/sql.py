"""
SQL Storage Implementation

SQLAlchemy 2 async implementation of the storage interfaces. Works against
SQLite (aiosqlite) for local use and tests, and PostgreSQL (psycopg) in
deployment.

Transaction model:
    Each repository method opens its own AsyncSession, does its work and
    commits. There are no transactions spanning several calls.

Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from foodmenu import models
from foodmenu.database import create_engine, create_sessionmaker, init_db
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

SINGLETON_ID = 1


def _order_values(order: Order) -> dict[str, Any]:
    values = order.model_dump(mode="json", exclude={"created_at", "status"})
    values["status"] = models.OrderStatus(order.status.value)
    values["created_at"] = order.created_at
    return values


async def _insert(session: AsyncSession, row, entity: str, entity_id: str) -> None:
    """Add ``row`` and commit, turning a primary-key clash into DuplicateEntityError."""
    if await session.get(type(row), entity_id) is not None:
        raise DuplicateEntityError(entity, entity_id)
    session.add(row)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise DuplicateEntityError(entity, entity_id) from e


# =============================================================================
# CATALOG
# =============================================================================

@dataclass(frozen=True)
class SqlRestaurantRepository(RestaurantRepository):

    session_factory: async_sessionmaker[AsyncSession]

    async def get_all(self) -> list[Restaurant]:
        async with self.session_factory() as s:
            rows = (await s.execute(select(models.Restaurant))).scalars().all()
            return [Restaurant.model_validate(r) for r in rows]

    async def get_active(self) -> list[Restaurant]:
        async with self.session_factory() as s:
            stmt = select(models.Restaurant).where(models.Restaurant.is_active.is_(True))
            rows = (await s.execute(stmt)).scalars().all()
            return [Restaurant.model_validate(r) for r in rows]

    async def get_by_id(self, restaurant_id: str) -> Optional[Restaurant]:
        async with self.session_factory() as s:
            row = await s.get(models.Restaurant, restaurant_id)
            return Restaurant.model_validate(row) if row else None

    async def add(self, data: RestaurantCreate) -> Restaurant:
        record = build_restaurant(data)
        async with self.session_factory() as s:
            await _insert(s, models.Restaurant(**record.model_dump()), "Restaurant", record.id)
        return record

    async def update(self, restaurant_id: str, changes: dict[str, Any]) -> Optional[Restaurant]:
        async with self.session_factory() as s:
            row = await s.get(models.Restaurant, restaurant_id)
            if row is None:
                return None
            merged = merge(Restaurant.model_validate(row), changes)
            for key, value in merged.model_dump(exclude={"id"}).items():
                setattr(row, key, value)
            await s.commit()
            return merged

    async def delete(self, restaurant_id: str) -> bool:
        async with self.session_factory() as s:
            result = await s.execute(
                delete(models.Restaurant).where(models.Restaurant.id == restaurant_id)
            )
            await s.commit()
            return result.rowcount > 0


@dataclass(frozen=True)
class SqlCategoryRepository(CategoryRepository):

    session_factory: async_sessionmaker[AsyncSession]

    async def get_all(self) -> list[Category]:
        async with self.session_factory() as s:
            rows = (await s.execute(select(models.Category))).scalars().all()
            return [Category.model_validate(r) for r in rows]

    async def get_active(self) -> list[Category]:
        async with self.session_factory() as s:
            stmt = select(models.Category).where(models.Category.is_active.is_(True))
            rows = (await s.execute(stmt)).scalars().all()
            return [Category.model_validate(r) for r in rows]

    async def get_by_id(self, category_id: str) -> Optional[Category]:
        async with self.session_factory() as s:
            row = await s.get(models.Category, category_id)
            return Category.model_validate(row) if row else None

    async def add(self, data: CategoryCreate) -> Category:
        record = build_category(data)
        async with self.session_factory() as s:
            await _insert(s, models.Category(**record.model_dump()), "Category", record.id)
        return record

    async def update(self, category_id: str, changes: dict[str, Any]) -> Optional[Category]:
        async with self.session_factory() as s:
            row = await s.get(models.Category, category_id)
            if row is None:
                return None
            merged = merge(Category.model_validate(row), changes)
            for key, value in merged.model_dump(exclude={"id"}).items():
                setattr(row, key, value)
            await s.commit()
            return merged

    async def delete(self, category_id: str) -> bool:
        async with self.session_factory() as s:
            result = await s.execute(
                delete(models.Category).where(models.Category.id == category_id)
            )
            await s.commit()
            return result.rowcount > 0


@dataclass(frozen=True)
class SqlProductRepository(ProductRepository):

    session_factory: async_sessionmaker[AsyncSession]

    async def get_all(self) -> list[Product]:
        async with self.session_factory() as s:
            rows = (await s.execute(select(models.Product))).scalars().all()
            return [Product.model_validate(r) for r in rows]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        async with self.session_factory() as s:
            row = await s.get(models.Product, product_id)
            return Product.model_validate(row) if row else None

    async def get_by_restaurant(self, restaurant_id: str) -> list[Product]:
        async with self.session_factory() as s:
            stmt = (
                select(models.Product)
                .join(models.ProductRestaurant)
                .where(models.ProductRestaurant.restaurant_id == restaurant_id)
            )
            rows = (await s.execute(stmt)).scalars().all()
            return [Product.model_validate(r) for r in rows]

    async def get_by_category(self, category_id: str) -> list[Product]:
        async with self.session_factory() as s:
            stmt = select(models.Product).where(models.Product.category == category_id)
            rows = (await s.execute(stmt)).scalars().all()
            return [Product.model_validate(r) for r in rows]

    async def add(self, data: ProductCreate) -> Product:
        record = build_product(data)
        async with self.session_factory() as s:
            await _insert(s, models.Product(**record.model_dump()), "Product", record.id)
        return record

    async def update(self, product_id: str, changes: dict[str, Any]) -> Optional[Product]:
        async with self.session_factory() as s:
            row = await s.get(models.Product, product_id)
            if row is None:
                return None
            merged = merge(Product.model_validate(row), changes)
            for key, value in merged.model_dump(exclude={"id"}).items():
                setattr(row, key, value)
            await s.commit()
            return merged

    async def delete(self, product_id: str) -> bool:
        async with self.session_factory() as s:
            row = await s.get(models.Product, product_id)
            if row is None:
                return False
            # ORM delete so the membership rows cascade on SQLite too
            await s.delete(row)
            await s.commit()
            return True


# =============================================================================
# ORDERS
# =============================================================================

@dataclass(frozen=True)
class SqlOrderRepository(OrderRepository):

    session_factory: async_sessionmaker[AsyncSession]

    async def get_all(self, status: Optional[OrderStatusEnum] = None) -> list[Order]:
        stmt = select(models.Order).order_by(models.Order.created_at.desc())
        if status is not None:
            stmt = stmt.where(models.Order.status == models.OrderStatus(status.value))
        async with self.session_factory() as s:
            rows = (await s.execute(stmt)).scalars().all()
            return [Order.model_validate(r) for r in rows]

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        async with self.session_factory() as s:
            row = await s.get(models.Order, order_id)
            return Order.model_validate(row) if row else None

    async def get_by_restaurant(self, restaurant_id: str) -> list[Order]:
        stmt = (
            select(models.Order)
            .where(models.Order.restaurant_id == restaurant_id)
            .order_by(models.Order.created_at.desc())
        )
        async with self.session_factory() as s:
            rows = (await s.execute(stmt)).scalars().all()
            return [Order.model_validate(r) for r in rows]

    async def add(self, data: OrderCreate) -> Order:
        record = build_order(data)
        async with self.session_factory() as s:
            await _insert(s, models.Order(**_order_values(record)), "Order", record.id)
        return record

    async def update(self, order_id: str, changes: dict[str, Any]) -> Optional[Order]:
        async with self.session_factory() as s:
            row = await s.get(models.Order, order_id)
            if row is None:
                return None
            merged = merge(Order.model_validate(row), changes)
            for key, value in _order_values(merged).items():
                if key != "id":
                    setattr(row, key, value)
            await s.commit()
            return merged

    async def delete(self, order_id: str) -> bool:
        async with self.session_factory() as s:
            result = await s.execute(delete(models.Order).where(models.Order.id == order_id))
            await s.commit()
            return result.rowcount > 0


# =============================================================================
# SETTINGS & AUTH
# =============================================================================

@dataclass(frozen=True)
class SqlSettingsRepository(SettingsRepository):

    session_factory: async_sessionmaker[AsyncSession]

    async def get_all(self) -> SiteSettings:
        async with self.session_factory() as s:
            row = await s.get(models.SiteSettings, SINGLETON_ID)
            return SiteSettings.model_validate(row) if row else SiteSettings()

    async def exists(self) -> bool:
        async with self.session_factory() as s:
            return await s.get(models.SiteSettings, SINGLETON_ID) is not None

    async def update(self, changes: dict[str, Any]) -> SiteSettings:
        async with self.session_factory() as s:
            row = await s.get(models.SiteSettings, SINGLETON_ID)
            current = SiteSettings.model_validate(row) if row else SiteSettings()
            merged = merge(current, changes)
            if row is None:
                row = models.SiteSettings(id=SINGLETON_ID)
                s.add(row)
            for key, value in merged.model_dump().items():
                setattr(row, key, value)
            await s.commit()
            return merged


@dataclass(frozen=True)
class SqlAuthRepository(AuthRepository):

    session_factory: async_sessionmaker[AsyncSession]

    async def get_credentials(self) -> Optional[AdminCredentials]:
        async with self.session_factory() as s:
            row = await s.get(models.AdminCredentials, SINGLETON_ID)
            if row is None:
                return None
            return AdminCredentials(username=row.username, password_hash=row.password_hash)

    async def set_credentials(self, credentials: AdminCredentials) -> None:
        async with self.session_factory() as s:
            row = await s.get(models.AdminCredentials, SINGLETON_ID)
            if row is None:
                row = models.AdminCredentials(id=SINGLETON_ID)
                s.add(row)
            row.username = credentials.username
            row.password_hash = credentials.password_hash
            await s.commit()

    async def create_session(self, session: AdminSession) -> AdminSession:
        async with self.session_factory() as s:
            s.add(models.AdminSession(**session.model_dump()))
            await s.commit()
        return session

    async def get_session(self, token: str) -> Optional[AdminSession]:
        async with self.session_factory() as s:
            row = await s.get(models.AdminSession, token)
            return AdminSession.model_validate(row) if row else None

    async def delete_session(self, token: str) -> bool:
        async with self.session_factory() as s:
            result = await s.execute(
                delete(models.AdminSession).where(models.AdminSession.token == token)
            )
            await s.commit()
            return result.rowcount > 0

    async def purge_expired_sessions(self, now: datetime) -> int:
        async with self.session_factory() as s:
            result = await s.execute(
                delete(models.AdminSession).where(models.AdminSession.expires_at < now)
            )
            await s.commit()
            return result.rowcount


# =============================================================================
# CARTS
# =============================================================================

@dataclass(frozen=True)
class SqlCartRepository(CartRepository):

    session_factory: async_sessionmaker[AsyncSession]

    async def get(self, cart_id: str) -> Optional[Cart]:
        async with self.session_factory() as s:
            row = await s.get(models.Cart, cart_id)
            return Cart.model_validate(row) if row else None

    async def save(self, cart: Cart) -> Cart:
        async with self.session_factory() as s:
            row = await s.get(models.Cart, cart.id)
            if row is None:
                row = models.Cart(id=cart.id)
                s.add(row)
            row.restaurant_id = cart.restaurant_id
            row.items = [item.model_dump() for item in cart.items]
            row.updated_at = cart.updated_at
            await s.commit()
        return cart

    async def delete(self, cart_id: str) -> bool:
        async with self.session_factory() as s:
            result = await s.execute(delete(models.Cart).where(models.Cart.id == cart_id))
            await s.commit()
            return result.rowcount > 0


# =============================================================================
# STORAGE
# =============================================================================

class SqlStorage(BaseStorage):
    """
    Storage backed by a relational database through SQLAlchemy.

    Example:
        >>> storage = SqlStorage("sqlite+aiosqlite:///:memory:")
        >>> await storage.init()
        >>> await storage.restaurants.get_all()
    """

    def __init__(self, database_url: str, echo: bool = False, engine: AsyncEngine | None = None):
        self.engine = engine or create_engine(database_url, echo=echo)
        self.session_factory = create_sessionmaker(self.engine)

        self.restaurants = SqlRestaurantRepository(self.session_factory)
        self.categories = SqlCategoryRepository(self.session_factory)
        self.products = SqlProductRepository(self.session_factory)
        self.orders = SqlOrderRepository(self.session_factory)
        self.settings = SqlSettingsRepository(self.session_factory)
        self.auth = SqlAuthRepository(self.session_factory)
        self.carts = SqlCartRepository(self.session_factory)

        logger.info(f"SqlStorage initialized ({self.engine.url.render_as_string(hide_password=True)})")

    @property
    def backend_name(self) -> str:
        return "sql"

    async def init(self) -> None:
        await init_db(self.engine)

    async def ping(self) -> bool:
        try:
            async with self.session_factory() as s:
                await s.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()
