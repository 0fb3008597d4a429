# app/deps.py
# Role: Shared FastAPI dependencies.
#       Provides the standard SQLAlchemy session dependency and the session
#       check that guards resource and summary routes.

"""
Shared dependencies for the business dashboard API.
"""

from typing import Any, Dict, Generator, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from config import Settings, get_settings
from db import SessionLocal
from app.errors import AuthError, AuthNotConfiguredError
from app.services.session import verify_session_token

# -------------------------------------------------------------------
# Database dependency
# -------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# -------------------------------------------------------------------
# Session check
# -------------------------------------------------------------------

def current_session(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Verify the caller's "Authorization: Bearer <token>" header.
    Returns {"username", "expires_at"}.
    """
    if not settings.auth_configured:
        raise AuthNotConfiguredError("Authentication not configured on server.")

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Authentication required")
    return verify_session_token(settings, token.strip())


def require_session(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> Optional[Dict[str, Any]]:
    """
    Router-level guard. A no-op when AUTH_REQUIRED is off.
    """
    if not settings.auth_required:
        return None
    return current_session(authorization, settings)
