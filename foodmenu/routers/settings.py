"""
Site Settings Router

Endpoints:
- GET /api/settings/public - Title and contact details (storefront)
- GET /api/settings - All settings incl. Telegram bot (admin)
- PUT /api/settings - Merge-update settings (admin)
- POST /api/settings/telegram/test - Send a test Telegram message (admin)
"""

import logging

from fastapi import APIRouter

from foodmenu.routers.deps import AdminOnly, NotifierDep, StorageDep
from foodmenu.schemas import (
    PublicSettings,
    SiteSettings,
    SiteSettingsUpdate,
    TelegramTestResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/public", response_model=PublicSettings, summary="Public site settings")
async def get_public_settings(storage: StorageDep) -> PublicSettings:
    site = await storage.settings.get_all()
    return PublicSettings(
        site_title=site.site_title,
        contact_email=site.contact_email,
        contact_phone=site.contact_phone,
    )


@router.get("", response_model=SiteSettings, summary="All site settings")
async def read_settings(storage: StorageDep, admin: AdminOnly) -> SiteSettings:
    return await storage.settings.get_all()


@router.put("", response_model=SiteSettings, summary="Update site settings")
async def update_settings(
    data: SiteSettingsUpdate,
    storage: StorageDep,
    admin: AdminOnly,
) -> SiteSettings:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    site = await storage.settings.update(changes)
    logger.info(f"Admin '{admin.username}' updated settings: {sorted(changes)}")
    return site


@router.post(
    "/telegram/test",
    response_model=TelegramTestResponse,
    summary="Send a Telegram test message",
)
async def send_telegram_test(
    storage: StorageDep,
    notifier: NotifierDep,
    admin: AdminOnly,
) -> TelegramTestResponse:
    """Uses the stored bot token and chat id, even while notifications are disabled."""
    site = await storage.settings.get_all()
    result = await notifier.send_test_message(site)
    return TelegramTestResponse(success=result.success, error=result.error_message)
