"""
Shared FastAPI Dependencies

- ``StorageDep``: the configured storage backend
- ``NotifierDep``: the configured notification service
- ``AdminOnly``: bearer-token check for back-office routes
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from foodmenu.core.security import is_expired
from foodmenu.schemas import AdminSession
from foodmenu.services.notifications import BaseNotificationService, get_notification_service
from foodmenu.storage import get_storage
from foodmenu.storage.base import BaseStorage

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401 rather than FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_storage_dep() -> BaseStorage:
    return get_storage()


def get_notifier_dep() -> BaseNotificationService:
    return get_notification_service()


StorageDep = Annotated[BaseStorage, Depends(get_storage_dep)]
NotifierDep = Annotated[BaseNotificationService, Depends(get_notifier_dep)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_admin(
    storage: StorageDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AdminSession:
    """Resolve the bearer token to a live admin session or fail with 401."""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    session = await storage.auth.get_session(credentials.credentials)
    if session is None:
        raise _unauthorized("Invalid or expired session")

    if is_expired(session.expires_at):
        await storage.auth.delete_session(session.token)
        logger.info(f"Expired session for '{session.username}' rejected")
        raise _unauthorized("Invalid or expired session")

    return session


AdminOnly = Annotated[AdminSession, Depends(require_admin)]
