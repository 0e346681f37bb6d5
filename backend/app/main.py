"""Main FastAPI application."""

import logging
import re
import time
from contextlib import asynccontextmanager

import sqlalchemy.exc
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .database import engine, Base, get_db, session_scope, dialect_name, DATABASE_URL, SUPPORTED_DIALECTS
from .api import (
    auth_router,
    chat_router,
    content_admin_router,
    content_router,
    dashboard_router,
    drafts_router,
    sponsors_router,
    webhooks_router,
)
from .core.config import settings, ConfigurationError, Environment
from .core.logging_config import setup_logging
from .middleware.exception_handler import site_exception_handler
from .middleware.request_context import RequestContextMiddleware
from .exceptions import SiteException
from .services import audit_service

# Setup logging first
setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


def _mask_url(url: str) -> str:
    """Mask password in database URL for safe logging."""
    return re.sub(r'://([^:]+):([^@]+)@', r'://\1:***@', url)


def _init_database() -> None:
    """Check connectivity and create missing tables. Exits with a clear message on failure."""
    masked = _mask_url(DATABASE_URL)
    logger.info(f"Connecting to database: {masked}")

    if dialect_name() not in SUPPORTED_DIALECTS:
        logger.critical(
            f"Unsupported database '{dialect_name()}' in DATABASE_URL: {masked}. "
            f"Use one of: {', '.join(SUPPORTED_DIALECTS)}"
        )
        raise SystemExit(1)

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
        logger.info("Database connection verified")
    except sqlalchemy.exc.SQLAlchemyError as e:
        if dialect_name() == "postgresql":
            hint = (
                "  Possible fixes:\n"
                "    1. Verify PostgreSQL is running: pg_isready -h <host> -p <port>\n"
                "    2. Check DATABASE_URL in .env or environment variables\n"
            )
        else:
            hint = "  Check that the directory exists and is writable.\n"
        logger.critical(
            "Database connection failed.\n"
            f"  DATABASE_URL: {masked}\n"
            f"{hint}"
            f"  Error: {e}"
        )
        raise SystemExit(1) from e


_init_database()


def _log_security_warnings() -> None:
    """Development-mode warnings for settings that production would reject."""
    if settings.jwt_secret_key == "dev-insecure-key-change-me":
        if settings.auth_enabled:
            logger.critical(
                "SECURITY: AUTH_ENABLED=true but JWT_SECRET_KEY is the default. "
                "Anyone can forge session tokens. Generate a secure key: openssl rand -hex 32"
            )
        else:
            logger.warning(
                "SECURITY: JWT_SECRET_KEY is the default. "
                "Set a secure key before enabling auth: openssl rand -hex 32"
            )

    if not settings.auth_enabled:
        logger.warning(
            "SECURITY: Authentication is disabled (AUTH_ENABLED=false). "
            "The dashboard and all admin endpoints are unprotected."
        )

    if not settings.stripe_webhook_secret:
        logger.warning(
            "SECURITY: STRIPE_WEBHOOK_SECRET is empty. "
            "Webhook signature verification is disabled."
        )

    origins = settings.get_cors_origins()
    localhost_origins = [o for o in origins if "localhost" in o or "127.0.0.1" in o]
    if localhost_origins:
        logger.warning(
            "CORS allows localhost origins: %s. Remove these for production.",
            localhost_origins,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle for the site API."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    if settings.environment == Environment.DEVELOPMENT:
        _log_security_warnings()

    if settings.stripe_api_key:
        import stripe
        stripe.api_key = settings.stripe_api_key

    if settings.audit_retention_days > 0:
        with session_scope() as db:
            purged = audit_service.purge_old_entries(db, days=settings.audit_retention_days)
        if purged > 0:
            logger.info(f"Purged {purged} audit log entries older than {settings.audit_retention_days} days")

    yield


app = FastAPI(
    title="RiseUp Site API",
    description=(
        "Content and admin API for the RiseUp Youth Football League website. "
        "Serves editable page content with defaults, stages edits as drafts for "
        "review, keeps a per-key version history with rollback, manages sponsor "
        "submissions, and receives Stripe invoice webhooks.\n\n"
        "**Authentication:** When `AUTH_ENABLED=true`, admin endpoints require a "
        "session token in the `Authorization: Bearer` header or the session cookie. "
        "When `AUTH_ENABLED=false` (default), all endpoints are open."
    ),
    version=APP_VERSION,
    lifespan=lifespan,
)

# Middleware stack, outermost first: CORS wraps request context.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(SiteException, site_exception_handler)

logger.info(
    "RiseUp Site API started | env=%s | db=%s | auth=%s | chat=%s | cors=%s",
    settings.environment.value,
    dialect_name(),
    "enabled" if settings.auth_enabled else "disabled",
    settings.chat_model or "disabled",
    ",".join(settings.get_cors_origins()),
)

app.include_router(auth_router)
app.include_router(content_router)
app.include_router(content_admin_router)
app.include_router(drafts_router)
app.include_router(dashboard_router)
app.include_router(sponsors_router)
app.include_router(webhooks_router)
app.include_router(chat_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "RiseUp Site API",
        "version": APP_VERSION,
        "status": "running"
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check returning database status, uptime, and live content row count.

    Never raises; returns degraded status on DB failure so load balancers
    can still probe without receiving 5xx.
    """
    db_status = "ok"
    content_count = 0
    try:
        db.execute(text("SELECT 1"))
        content_count = db.execute(text("SELECT COUNT(*) FROM site_content")).scalar() or 0
    except sqlalchemy.exc.SQLAlchemyError:
        db_status = "error"

    return {
        "status": "healthy" if db_status == "ok" else "degraded",
        "db": db_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": APP_VERSION,
        "content_count": content_count,
    }
