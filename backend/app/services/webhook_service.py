"""Stripe webhook handling with at-most-once processing per event id.

The event id is claimed with ``INSERT ... ON CONFLICT DO NOTHING`` before
any handler runs, so two concurrent deliveries of the same event cannot
both be handled. A handler that raises releases its claim, so Stripe's
retry of the same event is handled again. If the claim itself fails the
event is still handled and acknowledged; a redelivery may then be handled
twice.
"""

import json
import logging
from typing import Callable, Optional

import sqlalchemy.exc
import stripe
from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import WebhookValidationError
from ..repositories import WebhookEventRepository
from ..schemas.webhook import WebhookResponse

logger = logging.getLogger(__name__)

ALREADY_PROCESSED = "already_processed"


def _event_object(event: dict) -> Optional[dict]:
    return (event.get("data") or {}).get("object")


def _object_id(event: dict) -> Optional[str]:
    return (_event_object(event) or {}).get("id")


def handle_invoice_finalized(event: dict) -> None:
    logger.info("Invoice finalized: %s", _object_id(event), extra={"stripe_event_id": event["id"]})


def handle_invoice_paid(event: dict) -> None:
    logger.info("Invoice paid: %s", _object_id(event), extra={"stripe_event_id": event["id"]})


def handle_invoice_voided(event: dict) -> None:
    logger.info("Invoice voided: %s", _object_id(event), extra={"stripe_event_id": event["id"]})


EVENT_HANDLERS: dict[str, Callable[[dict], None]] = {
    "invoice.finalized": handle_invoice_finalized,
    "invoice.paid": handle_invoice_paid,
    "invoice.voided": handle_invoice_voided,
}


def verify_event(body: bytes, signature: Optional[str]) -> dict:
    """Check the Stripe signature and return the decoded event.

    Raises:
        WebhookValidationError: header missing, signature invalid, or body
            not a Stripe event.
    """
    if not signature:
        logger.error("Webhook rejected: missing stripe-signature header")
        raise WebhookValidationError("Missing stripe-signature header")

    secret = settings.stripe_webhook_secret
    if secret:
        try:
            stripe.Webhook.construct_event(body, signature, secret)
        except (stripe.SignatureVerificationError, ValueError) as e:
            logger.error("Webhook signature verification failed: %s", e)
            raise WebhookValidationError(f"Webhook signature verification failed: {e}")
    else:
        logger.warning("STRIPE_WEBHOOK_SECRET not set; accepting webhook without verification")

    try:
        event = json.loads(body)
    except ValueError:
        raise WebhookValidationError("Webhook body is not valid JSON")
    if not isinstance(event, dict) or not event.get("id") or not event.get("type"):
        raise WebhookValidationError("Webhook body is not a Stripe event")

    data = event.get("data")
    if data is not None and not isinstance(data, dict):
        raise WebhookValidationError("Webhook event data must be an object")
    if data and data.get("object") is not None and not isinstance(data["object"], dict):
        raise WebhookValidationError("Webhook event data.object must be an object")
    return event


class WebhookService:
    """Claims and dispatches verified Stripe events."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WebhookEventRepository(db)

    def claim(self, event: dict) -> bool:
        """Record the event id. False means another delivery already claimed it.

        Storage failures are logged and treated as a successful claim.
        """
        payload = _event_object(event)
        try:
            claimed = self.repo.claim(event["id"], event["type"], payload)
            self.db.commit()
        except sqlalchemy.exc.SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to record webhook event %s: %s", event["id"], e)
            return True
        return claimed

    def release(self, event: dict) -> None:
        try:
            self.repo.release(event["id"])
            self.db.commit()
        except sqlalchemy.exc.SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to release webhook event %s: %s", event["id"], e)

    def process(self, body: bytes, signature: Optional[str]) -> WebhookResponse:
        event = verify_event(body, signature)

        if not self.claim(event):
            logger.info("Webhook event %s already processed, skipping", event["id"])
            return WebhookResponse(received=True, status=ALREADY_PROCESSED)

        handler = EVENT_HANDLERS.get(event["type"])
        if handler is None:
            logger.info("Unhandled event type: %s", event["type"])
        else:
            try:
                handler(event)
            except Exception:
                logger.exception("Handler for webhook event %s failed, releasing claim", event["id"])
                self.release(event)
                raise

        return WebhookResponse(received=True)
