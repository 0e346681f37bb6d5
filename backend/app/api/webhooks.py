"""Stripe webhook endpoint for invoice events.

Subscribed events: invoice.finalized, invoice.paid, invoice.voided.
Configure the endpoint URL in the Stripe dashboard as
``https://<host>/api/webhooks/stripe``.
"""

import logging
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.webhook import WebhookResponse
from ..services.webhook_service import WebhookService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


@router.post("/stripe", response_model=WebhookResponse, response_model_exclude_none=True)
async def stripe_webhook(
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Verify, de-duplicate, and handle one Stripe event.

    The raw body is read before any parsing because the signature covers
    the exact bytes Stripe sent. Replays of an already-claimed event id are
    acknowledged with ``status: already_processed`` and not handled again.
    """
    body = await request.body()
    signature = request.headers.get("stripe-signature")
    return WebhookService(db).process(body, signature)
