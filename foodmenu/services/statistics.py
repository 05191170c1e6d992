"""
Dashboard Statistics

Aggregates for the admin dashboard, computed in Python over the stored
orders so both storage backends give identical numbers.
"""

from collections import Counter

from foodmenu.schemas import DashboardStats, TopProduct
from foodmenu.storage.base import BaseStorage

RECENT_ORDERS = 5
TOP_PRODUCTS = 5
UNKNOWN_PRODUCT = "Unknown product"
NO_RESTAURANT = "unknown"


async def get_dashboard_stats(storage: BaseStorage) -> DashboardStats:
    orders = await storage.orders.get_all()
    restaurants = await storage.restaurants.get_all()
    products = await storage.products.get_all()
    product_names = {p.id: p.name for p in products}

    status_stats = Counter(order.status.value for order in orders)
    restaurant_stats = Counter(order.restaurant_id or NO_RESTAURANT for order in orders)

    quantities: Counter[str] = Counter()
    for order in orders:
        for item in order.items:
            if item.product_id:
                quantities[item.product_id] += item.quantity

    top_products = [
        TopProduct(
            id=product_id,
            name=product_names.get(product_id, UNKNOWN_PRODUCT),
            quantity=quantity,
        )
        for product_id, quantity in quantities.most_common(TOP_PRODUCTS)
    ]

    return DashboardStats(
        restaurant_count=len(restaurants),
        product_count=len(products),
        order_count=len(orders),
        total_revenue=round(sum(order.total_amount for order in orders), 2),
        recent_orders=orders[:RECENT_ORDERS],
        order_status_stats=dict(status_stats),
        restaurant_stats=dict(restaurant_stats),
        top_products=top_products,
    )
