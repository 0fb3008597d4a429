# routes_root.py
"""
Root / basic endpoints (landing, health).
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.deps import get_db
from app.errors import StorageError

router = APIRouter()

logger = structlog.get_logger(__name__)


@router.get("/")
def read_root():
    """
    Simple landing endpoint.
    """
    return {"message": "Business Dashboard API is running!"}


@router.get("/api/health")
def health(db: Session = Depends(get_db)):
    """
    Database round trip; 500 when the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("health_check_failed", error=repr(exc))
        raise StorageError("Database unavailable") from exc
    return {"status": "ok"}
