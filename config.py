# config.py
# Role: Runtime configuration for the business dashboard API.
#       Reads the process environment (and a local .env file) once and exposes
#       an immutable Settings object through get_settings().

"""
Configuration for the business dashboard.

All values come from environment variables; see .env.example for the full list.
get_settings() is cached and doubles as a FastAPI dependency, so tests can
swap it through app.dependency_overrides.
"""

import os
import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Default SQLite location: <project_root>/database/bizdash.db
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "database", "bizdash.db")
DEFAULT_DATABASE_URL = f"sqlite:///{DEFAULT_DB_PATH}"


def _env_truthy(name: str, default: str = "0") -> bool:
    v = os.getenv(name, default)
    return str(v).strip().lower() in ("1", "true", "yes", "y", "on")


def _env_optional(name: str) -> Optional[str]:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL

    # The single operator credential pair
    basic_auth_user: Optional[str] = None
    basic_auth_password: Optional[str] = None

    # Session tokens
    session_secret: str = ""
    session_ttl_minutes: int = 480
    auth_required: bool = True

    cors_origins: Tuple[str, ...] = ("*",)

    log_level: str = "INFO"
    log_json: bool = False

    @property
    def auth_configured(self) -> bool:
        return bool(self.basic_auth_user) and bool(self.basic_auth_password)


def load_settings() -> Settings:
    """
    Build Settings from the current environment.
    """
    origins = os.getenv("CORS_ORIGINS", "*")

    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        basic_auth_user=_env_optional("BASIC_AUTH_USER"),
        basic_auth_password=_env_optional("BASIC_AUTH_PASSWORD"),
        # Without JWT_SECRET, tokens only survive until the process restarts
        session_secret=_env_optional("JWT_SECRET") or secrets.token_urlsafe(32),
        session_ttl_minutes=int(os.getenv("SESSION_TTL_MINUTES", "480")),
        auth_required=_env_truthy("AUTH_REQUIRED", "1"),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_json=_env_truthy("LOG_JSON", "0"),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
