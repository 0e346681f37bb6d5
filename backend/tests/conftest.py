"""Shared test fixtures for the RiseUp site API test suite.

Tests run against a SQLite file in the system temp directory unless
TEST_DATABASE_URL points somewhere else (e.g. a PostgreSQL test database).
Tables are created by the app on import; each test starts from empty
tables and an empty render cache.
"""

import hashlib
import hmac
import json
import os
import tempfile
import time

# Force auth off and use the test database before any app imports.
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.gettempdir(), "riseup_test.db"),
)
os.environ["AUTH_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret_for_suite"
os.environ["CHAT_MODEL"] = ""
os.environ["CHAT_API_KEY"] = ""

import pytest
from sqlalchemy import text
from fastapi.testclient import TestClient

from app.database import get_db, SessionLocal
from app.main import app
from app.core.config import settings
from app.core.page_cache import page_cache
from app.core.token_factory import create_token
from app.middleware.request_context import _rate_buckets

# Child tables first.
_CLEAN_TABLES = [
    "content_drafts", "content_versions", "site_content",
    "announcement_bar", "section_visibility", "sponsors",
    "webhook_events", "chat_messages", "audit_log", "users",
]


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty every data table before each test.

    Runs before the test (not after) so failures leave data
    available for debugging.
    """
    db = SessionLocal()
    try:
        for table in _CLEAN_TABLES:
            db.execute(text(f"DELETE FROM {table}"))
        db.commit()
    finally:
        db.close()
    page_cache.invalidate_all()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    _rate_buckets.clear()  # Reset rate limiter so tests don't hit 429
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_enabled(monkeypatch):
    """Turn authentication on for one test."""
    monkeypatch.setattr(settings, "auth_enabled", True)


@pytest.fixture()
def admin_user(db):
    from app.services import auth_service
    return auth_service.register_user(db, "admin@riseup.org", "correct-horse", "Admin")


@pytest.fixture()
def auth_headers(admin_user) -> dict:
    """Bearer header for the registered admin."""
    token = create_token(
        subject=admin_user.user_id,
        role=admin_user.role,
        secret=settings.jwt_secret_key,
    )
    return {"Authorization": f"Bearer {token}"}


def stripe_signature(payload: str, secret: str = None, timestamp: int = None) -> str:
    """Build a ``stripe-signature`` header the way Stripe signs deliveries."""
    secret = secret or settings.stripe_webhook_secret
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode()
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def make_stripe_event(
    event_id: str = "evt_test_001",
    event_type: str = "invoice.paid",
    object_id: str = "in_test_001",
) -> str:
    """Serialized Stripe event body."""
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": {"id": object_id, "object": "invoice"}},
    })


def make_sponsor(**overrides) -> dict:
    """Factory for sponsor form payloads."""
    payload = {
        "company_name": "Gridiron Grill",
        "contact_name": "Dana Lee",
        "contact_email": "dana@gridirongrill.com",
        "contact_phone": "555-123-4567",
        "website_url": "https://gridirongrill.com",
        "description": "Family restaurant and proud supporter of youth football.",
        "logo_url": "https://cdn.example.com/logos/gridiron.png",
    }
    payload.update(overrides)
    return payload
