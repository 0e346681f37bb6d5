"""Tests for the Stripe webhook endpoint — signatures and idempotency."""

import json
from unittest.mock import patch

import pytest
import sqlalchemy.exc

from app.core.config import settings
from app.exceptions import WebhookValidationError
from app.models import WebhookEvent
from app.services import webhook_service
from app.services.webhook_service import WebhookService, verify_event
from tests.conftest import make_stripe_event, stripe_signature

WEBHOOK_URL = "/api/webhooks/stripe"
_DB_DOWN = sqlalchemy.exc.OperationalError("INSERT", {}, Exception("connection refused"))


def _post(client, payload: str, signature: str = None):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["stripe-signature"] = signature
    return client.post(WEBHOOK_URL, content=payload, headers=headers)


class TestVerifyEvent:

    def test_valid_signature(self):
        payload = make_stripe_event()
        event = verify_event(payload.encode(), stripe_signature(payload))
        assert event["id"] == "evt_test_001"
        assert event["type"] == "invoice.paid"

    def test_missing_signature(self):
        with pytest.raises(WebhookValidationError):
            verify_event(make_stripe_event().encode(), None)

    def test_wrong_secret(self):
        payload = make_stripe_event()
        with pytest.raises(WebhookValidationError):
            verify_event(payload.encode(), stripe_signature(payload, secret="whsec_someone_else"))

    def test_tampered_body(self):
        payload = make_stripe_event()
        signature = stripe_signature(payload)
        tampered = payload.replace("in_test_001", "in_test_999")
        with pytest.raises(WebhookValidationError):
            verify_event(tampered.encode(), signature)

    def test_unverified_when_secret_unset(self, monkeypatch):
        monkeypatch.setattr(settings, "stripe_webhook_secret", "")
        event = verify_event(make_stripe_event().encode(), "t=1,v1=ignored")
        assert event["id"] == "evt_test_001"

    def test_body_must_be_an_event(self, monkeypatch):
        monkeypatch.setattr(settings, "stripe_webhook_secret", "")
        with pytest.raises(WebhookValidationError):
            verify_event(b'{"object": "event"}', "t=1,v1=ignored")

    @pytest.mark.parametrize("data", ["oops", ["in_test_001"], {"object": "in_test_001"}])
    def test_malformed_data_is_rejected(self, data):
        payload = json.dumps({"id": "evt_x", "type": "invoice.paid", "data": data})
        with pytest.raises(WebhookValidationError):
            verify_event(payload.encode(), stripe_signature(payload))

    def test_event_without_data_is_accepted(self):
        payload = json.dumps({"id": "evt_x", "type": "invoice.paid"})
        assert verify_event(payload.encode(), stripe_signature(payload))["id"] == "evt_x"


class TestIdempotency:

    def test_first_delivery_is_handled(self, db):
        payload = make_stripe_event()
        calls = []
        with patch.dict(webhook_service.EVENT_HANDLERS, {"invoice.paid": lambda e: calls.append(e["id"])}):
            result = WebhookService(db).process(payload.encode(), stripe_signature(payload))

        assert result.status is None
        assert calls == ["evt_test_001"]
        assert db.query(WebhookEvent).count() == 1

    def test_replay_is_not_handled_again(self, db):
        payload = make_stripe_event()
        calls = []
        with patch.dict(webhook_service.EVENT_HANDLERS, {"invoice.paid": lambda e: calls.append(e["id"])}):
            WebhookService(db).process(payload.encode(), stripe_signature(payload))
            replay = WebhookService(db).process(payload.encode(), stripe_signature(payload))

        assert replay.status == "already_processed"
        assert calls == ["evt_test_001"]
        assert db.query(WebhookEvent).count() == 1

    def test_claim_failure_still_handles(self, db):
        payload = make_stripe_event()
        svc = WebhookService(db)
        calls = []
        with patch.object(svc.repo, "claim", side_effect=_DB_DOWN), \
                patch.dict(webhook_service.EVENT_HANDLERS, {"invoice.paid": lambda e: calls.append(e["id"])}):
            result = svc.process(payload.encode(), stripe_signature(payload))

        assert result.received is True
        assert calls == ["evt_test_001"]

    def test_failed_handler_releases_claim(self, db):
        payload = make_stripe_event()

        def _broken(event):
            raise RuntimeError("ledger unavailable")

        with patch.dict(webhook_service.EVENT_HANDLERS, {"invoice.paid": _broken}):
            with pytest.raises(RuntimeError):
                WebhookService(db).process(payload.encode(), stripe_signature(payload))
        assert db.query(WebhookEvent).count() == 0

        calls = []
        with patch.dict(webhook_service.EVENT_HANDLERS, {"invoice.paid": lambda e: calls.append(e["id"])}):
            retry = WebhookService(db).process(payload.encode(), stripe_signature(payload))
        assert retry.status is None
        assert calls == ["evt_test_001"]
        assert db.query(WebhookEvent).count() == 1


class TestWebhookEndpoint:

    def test_valid_event(self, client):
        payload = make_stripe_event(event_type="invoice.finalized")
        resp = _post(client, payload, stripe_signature(payload))
        assert resp.status_code == 200
        assert resp.json() == {"received": True}

    def test_replay(self, client):
        payload = make_stripe_event(event_id="evt_replay")
        assert _post(client, payload, stripe_signature(payload)).status_code == 200

        resp = _post(client, payload, stripe_signature(payload))
        assert resp.status_code == 200
        assert resp.json() == {"received": True, "status": "already_processed"}

    def test_unknown_event_type_acknowledged(self, client):
        payload = make_stripe_event(event_type="customer.created")
        resp = _post(client, payload, stripe_signature(payload))
        assert resp.status_code == 200
        assert resp.json() == {"received": True}

    def test_bad_signature_is_400(self, client):
        payload = make_stripe_event()
        resp = _post(client, payload, "t=1,v1=deadbeef")
        assert resp.status_code == 400
        assert resp.json()["error"] == "WEBHOOK_VALIDATION_FAILED"

    def test_non_object_data_is_400(self, client):
        payload = json.dumps({"id": "evt_x", "type": "invoice.paid", "data": "oops"})
        resp = _post(client, payload, stripe_signature(payload))
        assert resp.status_code == 400
        assert resp.json()["error"] == "WEBHOOK_VALIDATION_FAILED"

    def test_missing_header_is_400(self, client):
        resp = _post(client, make_stripe_event())
        assert resp.status_code == 400
        assert resp.json()["message"] == "Missing stripe-signature header"

    def test_not_rate_limited(self, client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_per_minute", 1)
        for i in range(3):
            payload = make_stripe_event(event_id=f"evt_burst_{i}")
            assert _post(client, payload, stripe_signature(payload)).status_code == 200
