"""
Celery Tasks
Background tasks for the order ledger.
"""

import logging
import time
from datetime import datetime, timezone

from foodmenu.celery_worker import celery_app
from foodmenu.services.excel_manager import ExcelManager

logger = logging.getLogger(__name__)


class LedgerExportError(Exception):
    """Raised so Celery retries a failed ledger append."""


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=5,
    autoretry_for=(LedgerExportError,),
    retry_backoff=True
)
def export_order_to_excel(self, order_data: dict) -> dict:
    """
    Append an order to the Excel ledger.
    This task runs asynchronously via Celery worker.

    Args:
        order_data: Order as a JSON-mode dict (``Order.model_dump(mode="json")``)

    Returns:
        dict: Result of the export operation
    """
    task_id = self.request.id
    order_id = order_data.get('id', 'unknown')

    logger.info(f"Task {task_id}: Processing order #{order_id}")
    start_time = time.time()

    result = ExcelManager.export_order(order_data)

    elapsed = round(time.time() - start_time, 3)
    result['task_id'] = task_id
    result['processing_time_seconds'] = elapsed

    if not result['success']:
        logger.warning(f"Task {task_id}: Order #{order_id} failed after {elapsed}s - {result['message']}")
        # Celery will auto-retry based on configuration
        raise LedgerExportError(result['message'])

    logger.info(f"Task {task_id}: Order #{order_id} completed in {elapsed}s")
    return result


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        'status': 'healthy',
        'worker': 'celery',
        'timestamp': datetime.now(timezone.utc).isoformat()
    }
