"""
                Food Menu Storefront

Restaurant ordering storefront and admin back-office: restaurants,
categories and products, server-side carts, checkout into orders,
dashboard statistics and Telegram order notifications.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
