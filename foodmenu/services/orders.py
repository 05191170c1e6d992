"""
Order Service

Creates orders and runs their side effects:
    1. Store the order
    2. Notify staff on Telegram (when enabled in site settings)
    3. Queue the Excel ledger export on the Celery worker

Steps 2 and 3 are best effort. Their failures are logged and never undo
or fail the stored order.
"""

import logging
from typing import Optional

from foodmenu.core.config import get_settings
from foodmenu.schemas import Order, OrderCreate
from foodmenu.services.notifications import (
    BaseNotificationService,
    NotificationResult,
    get_notification_service,
)
from foodmenu.storage.base import BaseStorage
from foodmenu.tasks import export_order_to_excel

logger = logging.getLogger(__name__)


async def notify_new_order(
    storage: BaseStorage,
    order: Order,
    notifier: Optional[BaseNotificationService] = None,
) -> NotificationResult:
    notifier = notifier or get_notification_service()
    try:
        site_settings = await storage.settings.get_all()
        restaurant = (
            await storage.restaurants.get_by_id(order.restaurant_id)
            if order.restaurant_id else None
        )
        result = await notifier.send_order_notification(order, restaurant, site_settings)
    except Exception as e:
        logger.exception(f"Error sending notification for order #{order.id}")
        return NotificationResult(success=False, error_message=str(e), provider=notifier.provider_name)

    if not result.success:
        logger.warning(f"Notification for order #{order.id} failed: {result.error_message}")
    return result


def queue_ledger_export(order: Order) -> bool:
    """Queue the Excel export; returns False when it could not be queued."""
    if not get_settings().excel_export_enabled:
        return False
    try:
        export_order_to_excel.delay(order.model_dump(mode="json"))
    except Exception as e:
        logger.error(f"Could not queue Excel export for order #{order.id}: {e}")
        return False
    logger.debug(f"Excel export queued for order #{order.id}")
    return True


async def create_order(
    storage: BaseStorage,
    data: OrderCreate,
    notifier: Optional[BaseNotificationService] = None,
) -> Order:
    """Store a new order and trigger its side effects."""
    order = await storage.orders.add(data)
    logger.info(f"Order #{order.id} created for {order.customer_name} ({order.total_amount})")

    await notify_new_order(storage, order, notifier)
    queue_ledger_export(order)

    return order
