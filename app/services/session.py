# app/services/session.py
"""
Session gate for the single operator account.

Design:
- One credential pair, configured through BASIC_AUTH_USER / BASIC_AUTH_PASSWORD
- Login issues a signed, expiring token (HS256 JWT); nothing is stored server side
- Protected routes re-verify the token on every request (see app/deps.py)

Public API:
    authenticate(settings, username, password) -> login payload dict
    issue_session_token(settings, username, now=None) -> (token, expires_at)
    verify_session_token(settings, token) -> {"username", "expires_at"}
"""

from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import structlog
from jose import ExpiredSignatureError, JWTError, jwt

from config import Settings
from app.errors import AuthError, AuthNotConfiguredError

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"


def _require_configured(settings: Settings) -> None:
    if not settings.auth_configured:
        raise AuthNotConfiguredError("Authentication not configured on server.")


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def issue_session_token(
    settings: Settings,
    username: str,
    now: Optional[datetime] = None,
) -> Tuple[str, datetime]:
    now = now or datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=settings.session_ttl_minutes)

    claims = {
        "sub": username,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(claims, settings.session_secret, algorithm=ALGORITHM)
    return token, expires_at


def verify_session_token(settings: Settings, token: str) -> Dict[str, Any]:
    """
    Check signature and expiry, and that the token still belongs to the
    configured operator (changing BASIC_AUTH_USER invalidates old sessions).
    """
    _require_configured(settings)

    try:
        claims = jwt.decode(token, settings.session_secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Session expired")
    except JWTError:
        raise AuthError("Invalid session token")

    username = claims.get("sub")
    if not isinstance(username, str) or not _same(username, settings.basic_auth_user):
        raise AuthError("Invalid session token")

    expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    return {"username": username, "expires_at": expires_at}


def authenticate(settings: Settings, username: Any, password: Any) -> Dict[str, Any]:
    """
    Compare the submitted pair to the configured one. Never touches state,
    so repeated failures never lock the account.
    """
    _require_configured(settings)

    if not isinstance(username, str) or not isinstance(password, str):
        logger.warning("login_rejected", username=repr(username))
        raise AuthError("Invalid username or password")

    user_ok = _same(username, settings.basic_auth_user)
    password_ok = _same(password, settings.basic_auth_password)
    if not (user_ok and password_ok):
        logger.warning("login_rejected", username=username)
        raise AuthError("Invalid username or password")

    token, expires_at = issue_session_token(settings, username)
    logger.info("login_succeeded", username=username)

    return {
        "message": "Login successful",
        "user": {"username": username},
        "access_token": token,
        "token_type": "bearer",
        "expires_at": expires_at.isoformat(),
    }
