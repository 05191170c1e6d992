"""
Mock Notification Service

Simulates Telegram messages for development.
Nothing is sent - the message is just logged.

Version: 1.0.0
"""

import asyncio
import logging
import random
import uuid

from foodmenu.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class MockNotificationService(BaseNotificationService):
    """Mock notification service for development."""

    def __init__(self, failure_rate: float = 0.0, latency: tuple[float, float] = (0.0, 0.0)):
        self.failure_rate = failure_rate
        self.latency = latency
        self.sent: list[dict[str, str]] = []
        logger.info(f"MockNotificationService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        """Simulate network latency."""
        low, high = self.latency
        if high > 0:
            await asyncio.sleep(random.uniform(low, high))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def send_message(
        self,
        bot_token: str,
        chat_id: str,
        text: str,
    ) -> NotificationResult:
        """Simulate sending a Telegram message."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock Telegram message failed (simulated) to chat {chat_id}")
            return NotificationResult(
                success=False,
                error_message="Simulated Telegram failure",
                provider="mock"
            )

        message_id = f"tg_mock_{uuid.uuid4().hex[:12]}"
        self.sent.append({"chat_id": chat_id, "text": text})
        logger.info(f"Mock Telegram message to chat {chat_id} (ID: {message_id}):\n{text}")

        return NotificationResult(
            success=True,
            message_id=message_id,
            provider="mock"
        )

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True
