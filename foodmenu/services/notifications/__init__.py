"""
Notification Service Factory

Returns Mock or Telegram notification service based on ENV_MODE.

Version: 1.0.0
"""

import logging
from functools import lru_cache

from foodmenu.core.config import get_settings
from foodmenu.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
    format_order_message,
)
from foodmenu.services.notifications.mock import MockNotificationService
from foodmenu.services.notifications.telegram import TelegramNotificationService

logger = logging.getLogger(__name__)


@lru_cache()
def get_notification_service() -> BaseNotificationService:
    """Get the configured notification service."""
    settings = get_settings()

    if settings.use_real_services:
        logger.info(f"Notification Service: Using TelegramNotificationService ({settings.env_mode.value} mode)")
        return TelegramNotificationService()
    else:
        logger.info("Notification Service: Using MockNotificationService (development mode)")
        return MockNotificationService()


def reset_notification_service() -> None:
    """Clear the cached service instance."""
    get_notification_service.cache_clear()


__all__ = [
    "get_notification_service",
    "reset_notification_service",
    "format_order_message",
    "BaseNotificationService",
    "NotificationResult",
    "MockNotificationService",
    "TelegramNotificationService",
]
