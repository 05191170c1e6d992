"""
Telegram Notification Service

Production implementation posting to the Telegram Bot API
(``POST {api_base}/bot{token}/sendMessage``) with httpx.

Errors are logged and returned as a failed NotificationResult; they are
never raised into the order flow.

Version: 1.0.0
"""

import logging
from typing import Optional

import httpx

from foodmenu.core.config import get_settings
from foodmenu.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class TelegramNotificationService(BaseNotificationService):
    """Notification service backed by the Telegram Bot API."""

    def __init__(
        self,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.api_base = (api_base or settings.telegram_api_base).rstrip("/")
        self.timeout = timeout or settings.telegram_timeout_seconds
        self._transport = transport
        logger.info(f"TelegramNotificationService initialized ({self.api_base})")

    @property
    def provider_name(self) -> str:
        return "telegram"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def send_message(
        self,
        bot_token: str,
        chat_id: str,
        text: str,
    ) -> NotificationResult:
        """Send a message via the Bot API."""
        url = f"{self.api_base}/bot{bot_token}/sendMessage"
        payload = {"chat_id": chat_id, "text": text, "parse_mode": "HTML"}

        try:
            async with self._client() as client:
                response = await client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Telegram API error {e.response.status_code}: {e.response.text}")
            return NotificationResult(
                success=False,
                error_message=f"Telegram API returned {e.response.status_code}",
                provider="telegram"
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Telegram request failed: {e}")
            return NotificationResult(
                success=False,
                error_message=str(e) or type(e).__name__,
                provider="telegram"
            )

        if not data.get("ok"):
            description = data.get("description", "Unknown Telegram error")
            logger.error(f"Telegram rejected message: {description}")
            return NotificationResult(
                success=False,
                error_message=description,
                provider="telegram"
            )

        message_id = str(data.get("result", {}).get("message_id", ""))
        logger.info(f"Telegram message sent to chat {chat_id} (ID: {message_id})")

        return NotificationResult(
            success=True,
            message_id=message_id or None,
            provider="telegram"
        )

    async def health_check(self) -> bool:
        """Check the Bot API host answers."""
        try:
            async with self._client() as client:
                response = await client.get(self.api_base)
            return response.status_code < 500
        except httpx.HTTPError as e:
            logger.error(f"Telegram health check failed: {e}")
            return False
