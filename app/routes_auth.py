# app/routes_auth.py
"""
Login and session re-verification for the single operator.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from config import Settings, get_settings
from app.deps import current_session
from app.services.session import authenticate

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(body: Any = Body(None), settings: Settings = Depends(get_settings)):
    # Missing, null or non-text fields are wrong credentials (401), not a 400
    if not isinstance(body, dict):
        body = {}
    return authenticate(settings, body.get("username"), body.get("password"))


@router.get("/session")
def session(active: Dict[str, Any] = Depends(current_session)):
    """
    Re-verify the bearer token; the client calls this on load instead of
    trusting a stored "logged in" flag.
    """
    return {
        "user": {"username": active["username"]},
        "expires_at": active["expires_at"].isoformat(),
    }
