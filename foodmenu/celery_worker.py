"""
Celery Worker Configuration
Sets up Celery with Redis as message broker and result backend.

Run with:
    celery -A foodmenu.celery_worker worker --loglevel=info
"""

from celery import Celery

from foodmenu.core.config import get_settings

settings = get_settings()

# Create Celery app
celery_app = Celery(
    'foodmenu_worker',
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=['foodmenu.tasks']
)

# Celery configuration
celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,

    # Ledger appends serialize on one file lock
    worker_prefetch_multiplier=1,

    # Export results are only read while debugging
    result_expires=600,

    # export_order skips order ids already in the ledger
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    broker_connection_retry_on_startup=True,
)


if __name__ == '__main__':
    celery_app.start()
