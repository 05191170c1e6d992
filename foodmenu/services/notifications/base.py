"""
Notification Service Abstract Base Class

Defines the interface for pushing order notifications to the staff chat.
Supports both Mock (development) and Telegram (production) implementations.

Message building lives here so every provider sends exactly the same text.

Version: 1.0.0
"""

import html
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from foodmenu.core.config import get_settings
from foodmenu.schemas import Order, Restaurant, SiteSettings

logger = logging.getLogger(__name__)

UNKNOWN_RESTAURANT = "Unknown Restaurant"
TEST_MESSAGE = "<b>✅ Test message</b>\n\nTelegram notifications are configured correctly."


@dataclass
class NotificationResult:
    """Result from sending a notification."""
    success: bool
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"
    skipped: bool = False


def format_amount(value: float) -> str:
    """450.0 -> '450', 12.5 -> '12.5', 12345.67 -> '12345.67'."""
    value = round(float(value), 2)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_order_time(created_at: datetime) -> str:
    return f"{created_at:%b} {created_at.day}, {created_at:%Y, %H:%M}"


def format_order_message(
    order: Order,
    restaurant: Optional[Restaurant],
    currency: Optional[str] = None,
) -> str:
    """Build the HTML text posted to the staff chat for a new order."""
    currency = currency or get_settings().currency_symbol
    esc = html.escape

    restaurant_name = restaurant.name if restaurant else UNKNOWN_RESTAURANT
    item_lines = [
        f"• {esc(item.name)} x{item.quantity} - "
        f"{format_amount(item.price * item.quantity)}{currency}"
        for item in order.items
    ]

    lines = [
        f"<b>🔔 NEW ORDER #{esc(order.id)}</b>",
        "",
        f"<b>Customer:</b> {esc(order.customer_name)}",
        f"<b>Phone:</b> {esc(order.customer_phone or 'Not provided')}",
        f"<b>Restaurant:</b> {esc(restaurant_name)}",
        f"<b>Pickup Time:</b> {order.pickup_time} minutes",
        f"<b>Order Time:</b> {format_order_time(order.created_at)}",
        f"<b>Total Amount:</b> {format_amount(order.total_amount)}{currency}",
        "",
        "<b>Order Items:</b>",
        *item_lines,
    ]
    return "\n".join(lines)


class BaseNotificationService(ABC):
    """Abstract base class for notification services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_message(
        self,
        bot_token: str,
        chat_id: str,
        text: str,
    ) -> NotificationResult:
        """Post ``text`` (HTML parse mode) to ``chat_id``."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass

    async def send_order_notification(
        self,
        order: Order,
        restaurant: Optional[Restaurant],
        site_settings: SiteSettings,
    ) -> NotificationResult:
        """
        Notify staff about a new order.

        Skipped (successfully) when Telegram is disabled or incomplete in
        the site settings.
        """
        if not site_settings.telegram_configured:
            logger.debug(f"Telegram not configured, skipping notification for order #{order.id}")
            return NotificationResult(success=True, skipped=True, provider=self.provider_name)

        text = format_order_message(order, restaurant)
        return await self.send_message(
            site_settings.telegram_bot_token,
            site_settings.telegram_chat_id,
            text,
        )

    async def send_test_message(self, site_settings: SiteSettings) -> NotificationResult:
        if not site_settings.telegram_bot_token or not site_settings.telegram_chat_id:
            return NotificationResult(
                success=False,
                error_message="Telegram bot token and chat id are required",
                provider=self.provider_name,
            )
        return await self.send_message(
            site_settings.telegram_bot_token,
            site_settings.telegram_chat_id,
            TEST_MESSAGE,
        )
