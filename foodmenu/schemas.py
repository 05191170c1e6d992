"""
Pydantic Schemas for Request/Response Validation

The record models (Restaurant, Category, Product, Order, SiteSettings, Cart)
are what every storage backend returns, so the same classes describe the
stored shape and the API responses. The *Create / *Update models describe
what clients may send.

Version: 1.0.0
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


# =============================================================================
# ENUMS
# =============================================================================

class OrderStatusEnum(str, Enum):
    NEW = "new"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# =============================================================================
# SHARED VALIDATORS
# =============================================================================

def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC datetime; naive input is taken to be UTC."""
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


def _validate_phone(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    cleaned = re.sub(r'[^\d]', '', v)
    if len(cleaned) < 10:
        raise ValueError('Phone number must have at least 10 digits')
    return v


def _validate_email(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    if not re.match(r'^[\w\.\+-]+@[\w\.-]+\.\w+$', v):
        raise ValueError('Invalid email format')
    return v


# =============================================================================
# RESTAURANTS
# =============================================================================

class Restaurant(BaseModel):
    """A restaurant location customers can order from."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: str = ""
    hours: str = ""
    phone: str = ""
    email: str = ""
    is_active: bool = True
    icon: Optional[str] = None
    delivery_time: Optional[str] = None


class RestaurantCreate(BaseModel):
    id: Optional[str] = Field(None, min_length=1, max_length=64, examples=["central"])
    name: str = Field(..., min_length=1, max_length=100, examples=["Food Menu Central"])
    address: str = Field(default="", max_length=255)
    hours: str = Field(default="", max_length=255)
    phone: str = Field(default="", max_length=30)
    email: str = Field(default="", max_length=255)
    is_active: bool = True
    icon: Optional[str] = Field(None, max_length=255)
    delivery_time: Optional[str] = Field(None, max_length=20, examples=["25"])


class RestaurantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    hours: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None
    icon: Optional[str] = Field(None, max_length=255)
    delivery_time: Optional[str] = Field(None, max_length=20)


# =============================================================================
# CATEGORIES
# =============================================================================

class Category(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str = ""
    is_active: bool = True


class CategoryCreate(BaseModel):
    id: Optional[str] = Field(None, min_length=1, max_length=64, examples=["burgers"])
    name: str = Field(..., min_length=1, max_length=100, examples=["Burgers"])
    slug: str = Field(default="", max_length=100, examples=["burgers"])
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


# =============================================================================
# PRODUCTS
# =============================================================================

class Product(BaseModel):
    """A menu item, offered at one or more restaurants."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: Optional[str] = None
    price: float = 0.0
    description: str = ""
    image: Optional[str] = None
    restaurant_ids: List[str] = Field(default_factory=list)


class ProductCreate(BaseModel):
    id: Optional[str] = Field(None, min_length=1, max_length=64, examples=["burger-classic"])
    name: str = Field(..., min_length=1, max_length=100, examples=["CLASSIC BURGER"])
    category: Optional[str] = Field(None, max_length=64, examples=["burgers"])
    price: float = Field(..., ge=0, examples=[450])
    description: str = Field(default="", max_length=2000)
    image: Optional[str] = Field(None, max_length=255, examples=["burger.jpg"])
    restaurant_ids: List[str] = Field(default_factory=list, examples=[["central"]])


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, max_length=64)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=2000)
    image: Optional[str] = Field(None, max_length=255)
    restaurant_ids: Optional[List[str]] = None


# =============================================================================
# ORDERS
# =============================================================================

class OrderItem(BaseModel):
    """Single line of an order, a snapshot of the product at checkout."""
    product_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1, le=999)

    @property
    def total_price(self) -> float:
        return round(self.quantity * self.price, 2)


class Order(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    restaurant_id: Optional[str] = None
    customer_name: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    pickup_time: int = 30
    status: OrderStatusEnum = OrderStatusEnum.NEW
    total_amount: float = 0.0
    items: List[OrderItem] = Field(default_factory=list)
    created_at: datetime

    @field_validator('created_at')
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return _as_utc(v)


class OrderCreate(BaseModel):
    """Request schema for creating a new order."""
    id: Optional[str] = Field(None, min_length=1, max_length=64)
    restaurant_id: Optional[str] = Field(None, max_length=64, examples=["central"])
    customer_name: str = Field(..., min_length=1, max_length=100, examples=["Ivan Petrov"])
    customer_phone: Optional[str] = Field(None, max_length=30, examples=["+7 (916) 123-45-67"])
    customer_email: Optional[str] = Field(None, examples=["ivan@example.com"])
    pickup_time: Optional[int] = Field(None, ge=0, le=24 * 60, examples=[30])
    status: Optional[OrderStatusEnum] = None
    total_amount: Optional[float] = Field(None, ge=0)
    items: List[OrderItem] = Field(..., min_length=1)
    created_at: Optional[datetime] = None

    @field_validator('created_at')
    @classmethod
    def normalize_created_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)

    @field_validator('customer_email')
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _validate_email(v)


class OrderUpdate(BaseModel):
    """Admin-side order edit; usually just a status change."""
    status: Optional[OrderStatusEnum] = None
    customer_name: Optional[str] = Field(None, min_length=1, max_length=100)
    customer_phone: Optional[str] = Field(None, max_length=30)
    customer_email: Optional[str] = None
    pickup_time: Optional[int] = Field(None, ge=0, le=24 * 60)


# =============================================================================
# SITE SETTINGS
# =============================================================================

class SiteSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    site_title: str = "FOOD MENU"
    contact_email: str = ""
    contact_phone: str = ""
    telegram_bot_enabled: bool = False
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""

    @property
    def telegram_configured(self) -> bool:
        return bool(
            self.telegram_bot_enabled
            and self.telegram_bot_token
            and self.telegram_chat_id
        )


class SiteSettingsUpdate(BaseModel):
    site_title: Optional[str] = Field(None, max_length=100)
    contact_email: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=30)
    telegram_bot_enabled: Optional[bool] = None
    telegram_bot_token: Optional[str] = Field(None, max_length=255)
    telegram_chat_id: Optional[str] = Field(None, max_length=64)


class PublicSettings(BaseModel):
    """Subset of site settings the storefront may see."""
    site_title: str
    contact_email: str
    contact_phone: str


class TelegramTestResponse(BaseModel):
    success: bool
    error: Optional[str] = None


# =============================================================================
# ADMIN AUTH
# =============================================================================

class AdminCredentials(BaseModel):
    username: str
    password_hash: str


class AdminSession(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    token: str
    username: str
    created_at: datetime
    expires_at: datetime

    @field_validator('created_at', 'expires_at')
    @classmethod
    def normalize_timestamps(cls, v: datetime) -> datetime:
        return _as_utc(v)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=255)


class LoginResponse(BaseModel):
    success: bool
    token: str
    expires_at: datetime


class CredentialsUpdate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=4, max_length=255)


class MeResponse(BaseModel):
    username: str


# =============================================================================
# CART
# =============================================================================

class CartItem(BaseModel):
    product_id: str
    name: str
    price: float
    quantity: int


class Cart(BaseModel):
    """Server-side shopping cart. Holds items from a single restaurant."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    restaurant_id: Optional[str] = None
    items: List[CartItem] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    @field_validator('updated_at')
    @classmethod
    def normalize_updated_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)

    @computed_field
    @property
    def total_price(self) -> float:
        return round(sum(item.price * item.quantity for item in self.items), 2)

    @computed_field
    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)


class CartItemAdd(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1, le=99)
    restaurant_id: Optional[str] = Field(
        None,
        description="Restaurant the customer is browsing; binds an empty cart",
    )


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., le=99)


class CheckoutRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Ivan Petrov"])
    phone: str = Field(..., max_length=30, examples=["+7 (916) 123-45-67"])
    email: Optional[str] = Field(None, examples=["ivan@example.com"])
    pickup_time: Optional[int] = Field(None, ge=0, le=24 * 60, examples=[30])

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if _validate_phone(v) is None:
            raise ValueError('Phone number is required')
        return v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _validate_email(v)


class CheckoutResponse(BaseModel):
    success: bool
    order: Order


# =============================================================================
# STATISTICS
# =============================================================================

class TopProduct(BaseModel):
    id: str
    name: str
    quantity: int


class DashboardStats(BaseModel):
    restaurant_count: int
    product_count: int
    order_count: int
    total_revenue: float
    recent_orders: List[Order]
    order_status_stats: dict[str, int]
    restaurant_stats: dict[str, int]
    top_products: List[TopProduct]


# =============================================================================
# GENERIC RESPONSES
# =============================================================================

class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    storage: str
    storage_backend: str
    redis: str
    notification_service: str
    timestamp: datetime
