"""
                        Services Module

Business logic between the HTTP routers and storage.

Services:
    - cart: server-side cart and checkout
    - orders: order creation with its side effects
    - statistics: admin dashboard aggregates
    - notifications: Telegram order notifications (mock / Telegram)
    - excel_manager: process-safe Excel order ledger
"""

from foodmenu.services.excel_manager import ExcelManager

__all__ = ["ExcelManager"]
