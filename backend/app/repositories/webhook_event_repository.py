"""Webhook idempotency repository."""

from typing import Optional

from ..models import WebhookEvent
from .base import BaseRepository


class WebhookEventRepository(BaseRepository[WebhookEvent]):
    """Records Stripe event ids so each event is handled at most once."""

    model_class = WebhookEvent

    def claim(self, stripe_event_id: str, event_type: str, payload: Optional[dict] = None) -> bool:
        """Atomically record an event id.

        Returns True if this call inserted the row, False if the id was
        already recorded (``INSERT ... ON CONFLICT DO NOTHING``).
        """
        stmt = self._insert().values(
            stripe_event_id=stripe_event_id,
            event_type=event_type,
            payload=payload,
        ).on_conflict_do_nothing(index_elements=["stripe_event_id"])
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def release(self, stripe_event_id: str) -> int:
        """Drop a claim so a redelivery of the event is handled again."""
        return (
            self.db.query(WebhookEvent)
            .filter(WebhookEvent.stripe_event_id == stripe_event_id)
            .delete(synchronize_session=False)
        )
