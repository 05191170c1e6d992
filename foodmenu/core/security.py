"""
Admin credential and session helpers.

Passwords are stored as werkzeug hashes; session tokens are random
URL-safe strings with a fixed lifetime.
"""

import secrets
from datetime import datetime, timedelta, timezone

from werkzeug.security import check_password_hash, generate_password_hash

from foodmenu.core.config import get_settings


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def session_expiry(now: datetime | None = None) -> datetime:
    """Expiry timestamp for a session created at ``now``."""
    now = now or utc_now()
    return now + timedelta(minutes=get_settings().admin_session_ttl_minutes)


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    now = now or utc_now()
    # Naive values are UTC
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= now
