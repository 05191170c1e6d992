"""
Admin Auth Router

Endpoints:
- POST /api/auth/login - Exchange username/password for a bearer token
- POST /api/auth/logout - Revoke the current token (admin)
- GET /api/auth/me - Who is logged in (admin)
- PUT /api/auth/credentials - Change username/password (admin)
"""

import logging

from fastapi import APIRouter, HTTPException, status

from foodmenu.core.security import (
    hash_password,
    new_session_token,
    session_expiry,
    utc_now,
    verify_password,
)
from foodmenu.routers.deps import AdminOnly, StorageDep
from foodmenu.schemas import (
    AdminCredentials,
    AdminSession,
    CredentialsUpdate,
    LoginRequest,
    LoginResponse,
    MeResponse,
    SuccessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse, summary="Admin login")
async def login(data: LoginRequest, storage: StorageDep) -> LoginResponse:
    credentials = await storage.auth.get_credentials()

    if (
        credentials is None
        or data.username != credentials.username
        or not verify_password(credentials.password_hash, data.password)
    ):
        logger.warning(f"Failed admin login for '{data.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    now = utc_now()
    await storage.auth.purge_expired_sessions(now)
    session = await storage.auth.create_session(
        AdminSession(
            token=new_session_token(),
            username=credentials.username,
            created_at=now,
            expires_at=session_expiry(now),
        )
    )

    logger.info(f"Admin '{session.username}' logged in")
    return LoginResponse(success=True, token=session.token, expires_at=session.expires_at)


@router.post("/logout", response_model=SuccessResponse, summary="Admin logout")
async def logout(storage: StorageDep, admin: AdminOnly) -> SuccessResponse:
    await storage.auth.delete_session(admin.token)
    logger.info(f"Admin '{admin.username}' logged out")
    return SuccessResponse()


@router.get("/me", response_model=MeResponse, summary="Current admin")
async def me(admin: AdminOnly) -> MeResponse:
    return MeResponse(username=admin.username)


@router.put("/credentials", response_model=SuccessResponse, summary="Change admin credentials")
async def update_credentials(
    data: CredentialsUpdate,
    storage: StorageDep,
    admin: AdminOnly,
) -> SuccessResponse:
    """Replace the login; existing sessions stay valid until they expire."""
    await storage.auth.set_credentials(
        AdminCredentials(username=data.username, password_hash=hash_password(data.password))
    )
    logger.info(f"Admin '{admin.username}' changed credentials (new username '{data.username}')")
    return SuccessResponse()
