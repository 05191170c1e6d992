"""
SQLAlchemy Database Models

Tables behind the SQL storage backend. Every entity is a flat record keyed
by a string id; the only relation is product <-> restaurant membership.

Version: 1.0.0
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy.orm import relationship

from foodmenu.database import Base
from foodmenu.schemas import OrderStatusEnum as OrderStatus


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Stores timestamps as UTC and loads them back timezone-aware.

    SQLite keeps no offset, so aware values are converted to UTC before
    binding. Naive values are taken to be UTC already.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    address = Column(String(255), nullable=False, default="")
    hours = Column(String(255), nullable=False, default="")
    phone = Column(String(30), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    icon = Column(String(255), nullable=True)
    delivery_time = Column(String(20), nullable=True)

    def __repr__(self):
        return f"<Restaurant {self.id} - {self.name}>"


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self):
        return f"<Category {self.id}>"


class ProductRestaurant(Base):
    """
    Membership of a product in a restaurant's menu.

    ``position`` keeps the order the ids were given in; the first restaurant
    is the one an empty cart binds to.
    """
    __tablename__ = "product_restaurants"

    product_id = Column(
        String(64),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    restaurant_id = Column(String(64), primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)


class Product(Base):
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    category = Column(String(64), nullable=True, index=True)
    price = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=False, default="")
    image = Column(String(255), nullable=True)

    restaurant_links = relationship(
        ProductRestaurant,
        order_by=ProductRestaurant.position,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def restaurant_ids(self) -> list[str]:
        return [link.restaurant_id for link in self.restaurant_links]

    @restaurant_ids.setter
    def restaurant_ids(self, ids: list[str]) -> None:
        # Reuse existing link rows: a delete + insert of the same primary key
        # in one flush would collide.
        existing = {link.restaurant_id: link for link in self.restaurant_links}
        links = []
        for position, rid in enumerate(dict.fromkeys(ids)):
            link = existing.get(rid) or ProductRestaurant(restaurant_id=rid)
            link.position = position
            links.append(link)
        self.restaurant_links = links

    def __repr__(self):
        return f"<Product {self.id} - {self.name}>"


class Order(Base):
    """
    Persisted snapshot of a cart plus customer details.

    Items are stored as JSON exactly as they were at checkout, so later
    product edits never rewrite order history.
    """
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True)
    restaurant_id = Column(String(64), nullable=True, index=True)

    customer_name = Column(String(100), nullable=False)
    customer_phone = Column(String(30), nullable=True)
    customer_email = Column(String(255), nullable=True)
    pickup_time = Column(Integer, nullable=False, default=30)

    items = Column(JSON, nullable=False, default=list)
    total_amount = Column(Float, nullable=False, default=0.0)

    status = Column(
        Enum(OrderStatus),
        default=OrderStatus.NEW,
        nullable=False,
        index=True
    )

    created_at = Column(UTCDateTime, nullable=False, default=_utc_now, index=True)
    updated_at = Column(UTCDateTime, onupdate=_utc_now)

    def __repr__(self):
        return f"<Order #{self.id} - {self.customer_name} - {self.status.value}>"


class SiteSettings(Base):
    """Single-row table (id=1) holding the editable site settings."""
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, default=1)
    site_title = Column(String(100), nullable=False, default="FOOD MENU")
    contact_email = Column(String(255), nullable=False, default="")
    contact_phone = Column(String(30), nullable=False, default="")
    telegram_bot_enabled = Column(Boolean, nullable=False, default=False)
    telegram_bot_token = Column(String(255), nullable=False, default="")
    telegram_chat_id = Column(String(64), nullable=False, default="")


class AdminCredentials(Base):
    """Single-row table (id=1) with the back-office login."""
    __tablename__ = "admin_credentials"

    id = Column(Integer, primary_key=True, default=1)
    username = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)


class AdminSession(Base):
    __tablename__ = "admin_sessions"

    token = Column(String(128), primary_key=True)
    username = Column(String(100), nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=_utc_now)
    expires_at = Column(UTCDateTime, nullable=False, index=True)


class Cart(Base):
    __tablename__ = "carts"

    id = Column(String(64), primary_key=True)
    restaurant_id = Column(String(64), nullable=True)
    items = Column(JSON, nullable=False, default=list)
    updated_at = Column(UTCDateTime, nullable=True, default=_utc_now)
