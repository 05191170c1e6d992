"""
Default Data

Restaurants, menu, site settings and admin login written into a fresh store.
Site settings and admin credentials are always ensured; the demo catalog is
only written when SEED_DEMO_DATA is on and the catalog is completely empty.
"""

import logging

from foodmenu.core.config import get_settings
from foodmenu.core.security import hash_password
from foodmenu.schemas import (
    AdminCredentials,
    CategoryCreate,
    ProductCreate,
    RestaurantCreate,
)
from foodmenu.storage.base import BaseStorage

logger = logging.getLogger(__name__)


DEFAULT_RESTAURANTS = [
    {
        "id": "central",
        "name": "Food Menu Central",
        "address": "15 Main Street, Moscow, 123056",
        "hours": "Mon-Fri: 10:00 - 22:00, Sat-Sun: 11:00 - 23:00",
        "phone": "+7 (495) 123-45-67",
        "email": "central@foodmenu.com",
    },
    {
        "id": "west",
        "name": "Food Menu West",
        "address": "30 Kutuzovsky Avenue, Moscow, 121165",
        "hours": "Mon-Sun: 09:00 - 22:00",
        "phone": "+7 (495) 987-65-43",
        "email": "west@foodmenu.com",
    },
    {
        "id": "north",
        "name": "Food Menu North",
        "address": "163A Dmitrovskoye Highway, Moscow, 127280",
        "hours": "Mon-Fri: 10:00 - 21:00, Sat-Sun: 11:00 - 22:00",
        "phone": "+7 (495) 111-22-33",
        "email": "north@foodmenu.com",
    },
]

DEFAULT_CATEGORIES = [
    {"id": "all", "name": "All", "slug": "all"},
    {"id": "burgers", "name": "Burgers", "slug": "burgers"},
    {"id": "coffee", "name": "Coffee", "slug": "coffee"},
    {"id": "pasta", "name": "Pasta", "slug": "pasta"},
    {"id": "soup", "name": "Soups", "slug": "soup"},
    {"id": "pizza", "name": "Pizza", "slug": "pizza"},
    {"id": "dessert", "name": "Desserts", "slug": "dessert"},
]

DEFAULT_PRODUCTS = [
    # Central
    {
        "id": "burger-classic",
        "name": "CLASSIC BURGER",
        "category": "burgers",
        "price": 450,
        "description": "Juicy beef patty, signature sauce, fresh vegetables and crispy bun.",
        "image": "burger.jpg",
        "restaurant_ids": ["central"],
    },
    {
        "id": "coffee-premium",
        "name": "PREMIUM COFFEE",
        "category": "coffee",
        "price": 250,
        "description": "Premium arabica, rich taste, velvety texture and exquisite aftertaste.",
        "image": "coffee.jpg",
        "restaurant_ids": ["central"],
    },
    {
        "id": "pasta-italian",
        "name": "ITALIAN PASTA",
        "category": "pasta",
        "price": 480,
        "description": "Traditional pasta with aromatic sauce, fresh herbs and parmesan.",
        "image": "pasta.jpg",
        "restaurant_ids": ["central"],
    },
    {
        "id": "cheesecake",
        "name": "CHEESECAKE",
        "category": "dessert",
        "price": 320,
        "description": "Delicate creamy cheesecake with a crispy base, fresh berries and vanilla sauce.",
        "image": "dessert.jpg",
        "restaurant_ids": ["central", "west"],
    },
    # West
    {
        "id": "burger-deluxe",
        "name": "DELUXE BURGER",
        "category": "burgers",
        "price": 520,
        "description": "Marbled beef, caramelized onions, fried bacon and cheddar on a brioche bun.",
        "image": "burger.jpg",
        "restaurant_ids": ["west"],
    },
    {
        "id": "cappuccino",
        "name": "CAPPUCCINO",
        "category": "coffee",
        "price": 220,
        "description": "Classic Italian cappuccino with rich espresso and delicate milk foam.",
        "image": "coffee.jpg",
        "restaurant_ids": ["west"],
    },
    {
        "id": "carbonara",
        "name": "PASTA CARBONARA",
        "category": "pasta",
        "price": 520,
        "description": "Guanciale, egg, pecorino romano and freshly ground black pepper.",
        "image": "pasta.jpg",
        "restaurant_ids": ["west"],
    },
    # North
    {
        "id": "burger-bbq",
        "name": "BBQ BURGER",
        "category": "burgers",
        "price": 480,
        "description": "Beef patty, signature BBQ sauce, onion rings and cheddar cheese.",
        "image": "burger.jpg",
        "restaurant_ids": ["north"],
    },
    {
        "id": "latte",
        "name": "CARAMEL LATTE",
        "category": "coffee",
        "price": 270,
        "description": "Latte with caramel syrup, whipped cream and caramel crumble.",
        "image": "coffee.jpg",
        "restaurant_ids": ["north"],
    },
    {
        "id": "apple-pie",
        "name": "APPLE PIE",
        "category": "dessert",
        "price": 280,
        "description": "Homemade apple pie with cinnamon and vanilla ice cream.",
        "image": "dessert.jpg",
        "restaurant_ids": ["north"],
    },
]

DEFAULT_SITE_SETTINGS = {
    "site_title": "FOOD MENU",
    "contact_email": "info@foodmenu.com",
    "contact_phone": "+7 (123) 456-78-90",
    "telegram_bot_enabled": False,
    "telegram_bot_token": "",
    "telegram_chat_id": "",
}


async def _catalog_is_empty(storage: BaseStorage) -> bool:
    return not (
        await storage.restaurants.get_all()
        or await storage.categories.get_all()
        or await storage.products.get_all()
    )


async def seed_defaults(storage: BaseStorage, demo_data: bool | None = None) -> dict[str, int]:
    """
    Write the defaults that are missing from ``storage``.

    Returns counts of what was written, keyed by collection.
    """
    settings = get_settings()
    if demo_data is None:
        demo_data = settings.seed_demo_data

    written = {"settings": 0, "admin_credentials": 0, "restaurants": 0, "categories": 0, "products": 0}

    if not await storage.settings.exists():
        await storage.settings.update(DEFAULT_SITE_SETTINGS)
        written["settings"] = 1

    if await storage.auth.get_credentials() is None:
        await storage.auth.set_credentials(
            AdminCredentials(
                username=settings.default_admin_username,
                password_hash=hash_password(settings.default_admin_password),
            )
        )
        written["admin_credentials"] = 1

    if demo_data and await _catalog_is_empty(storage):
        for data in DEFAULT_RESTAURANTS:
            await storage.restaurants.add(RestaurantCreate(**data))
        for data in DEFAULT_CATEGORIES:
            await storage.categories.add(CategoryCreate(**data))
        for data in DEFAULT_PRODUCTS:
            await storage.products.add(ProductCreate(**data))
        written["restaurants"] = len(DEFAULT_RESTAURANTS)
        written["categories"] = len(DEFAULT_CATEGORIES)
        written["products"] = len(DEFAULT_PRODUCTS)

    if any(written.values()):
        logger.info(f"Seeded defaults: {written}")

    return written
