# main.py
# Role: Application entry point for the business dashboard API.
#       Configures logging, creates database tables on startup,
#       installs middleware and error handlers, and registers all route modules.

"""
Main FastAPI app for the business dashboard.

Here we only:
- create the FastAPI app
- create DB tables on startup
- map domain errors to {"message": ...} responses
- include route modules
"""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from db import Base, engine
from app.errors import AuthError, AuthNotConfiguredError, BizDashError
from app.log import configure_logging
from app.routes_auth import router as auth_router
from app.routes_resources import routers as resource_routers
from app.routes_root import router as root_router
from app.routes_summary import router as summary_router

settings = get_settings()
configure_logging(settings.log_level, settings.log_json)

logger = structlog.get_logger(__name__)


# -------------------------------------------------------------------
# Startup
# -------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables (only if they don't exist yet)
    Base.metadata.create_all(bind=engine)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("database_connected", dialect=engine.dialect.name)

    if not settings.auth_configured:
        logger.warning("auth_not_configured", hint="set BASIC_AUTH_USER and BASIC_AUTH_PASSWORD")

    yield


# FastAPI application instance
app = FastAPI(title="Business Dashboard API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    return response


# -------------------------------------------------------------------
# Error handlers: every error body is {"message": str}
# -------------------------------------------------------------------

@app.exception_handler(BizDashError)
async def domain_error_handler(request: Request, exc: BizDashError):
    headers = None
    if isinstance(exc, AuthError) and not isinstance(exc, AuthNotConfiguredError):
        headers = {"WWW-Authenticate": "Bearer"}

    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, status=exc.status_code, error=exc.message)

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Non-integer ids in the path, or a body that isn't valid JSON
    in_path = any((err.get("loc") or ("",))[0] == "path" for err in exc.errors())
    message = "Invalid id" if in_path else "Invalid request body"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        message = "Resource not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"message": "An unexpected error occurred"},
    )


# -------------------------------------------------------------------
# Include routers
# -------------------------------------------------------------------

# Landing + health
app.include_router(root_router)

# Login and session re-verification
app.include_router(auth_router)

# /api/expenses, /api/earnings, /api/inventory
for router in resource_routers:
    app.include_router(router)

# Dashboard totals and monthly series
app.include_router(summary_router)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=3001, reload=True)
