"""Webhook schemas."""

from pydantic import BaseModel
from typing import Optional


class WebhookResponse(BaseModel):
    """Acknowledgment returned to Stripe."""
    received: bool = True
    status: Optional[str] = None
