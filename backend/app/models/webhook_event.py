"""Webhook idempotency record."""

from sqlalchemy import Column, Integer, String, DateTime, JSON

from ..database import Base
from .content import utcnow


class WebhookEvent(Base):
    """One row per Stripe event id that has been claimed for processing."""

    __tablename__ = "webhook_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    stripe_event_id = Column(String(255), unique=True, nullable=False)
    event_type = Column(String(120), nullable=False)
    payload = Column(JSON, nullable=True)
    processed_at = Column(DateTime(timezone=True), default=utcnow)
