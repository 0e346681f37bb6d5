"""Tests for the audit trail written by admin actions."""

from datetime import datetime, timedelta, timezone

from app.models import AuditLog
from app.services import audit_service
from app.services.audit_service import AuditAction, ResourceType
from app.services.content_service import ContentService
from app.services.draft_service import DraftService


class TestAuditService:

    def test_log_and_read_back(self, db):
        audit_service.log(db, user_id="u-1", action=AuditAction.PUBLISH, resource_type=ResourceType.DRAFT,
                          resource_id="d-1", details={"content_key": "hero.headline"})
        entries = audit_service.get_by_resource(db, ResourceType.DRAFT, "d-1")
        assert len(entries) == 1
        assert entries[0].action == "publish"
        assert "hero.headline" in entries[0].details

    def test_filter_by_action(self, db):
        audit_service.log(db, user_id="u-1", action=AuditAction.LOGIN, resource_type=ResourceType.USER)
        audit_service.log(db, user_id="u-1", action=AuditAction.APPROVE,
                          resource_type=ResourceType.SPONSOR, resource_id="s-1")
        approvals = audit_service.get_recent(db, action=AuditAction.APPROVE)
        assert [(e.action, e.resource_type) for e in approvals] == [("approve", "sponsor")]

    def test_purge_old_entries(self, db):
        db.add(AuditLog(user_id="u-1", action="login", resource_type="user",
                        created_at=datetime.now(timezone.utc) - timedelta(days=400)))
        db.commit()
        audit_service.log(db, user_id="u-1", action=AuditAction.LOGIN, resource_type=ResourceType.USER)

        assert audit_service.purge_old_entries(db, days=365) == 1
        assert len(audit_service.get_recent(db)) == 1

    def test_purge_disabled(self, db):
        audit_service.log(db, user_id="u-1", action=AuditAction.LOGIN, resource_type=ResourceType.USER)
        assert audit_service.purge_old_entries(db, days=0) == 0


class TestAuditedActions:

    def test_publish_and_cancel_are_audited(self, db):
        svc = DraftService(db)
        published = svc.create_text_draft("hero.headline", "Go")
        cancelled = svc.create_text_draft("hero.subtitle", "Stop")
        svc.publish(published.id, published_by="u-1")
        svc.cancel(cancelled.id, cancelled_by="u-1")

        actions = {(e.action, e.resource_id) for e in audit_service.get_recent(db)}
        assert ("publish", published.id) in actions
        assert ("cancel", cancelled.id) in actions

    def test_inline_edit_is_audited(self, db):
        ContentService(db).save_inline_text("hero.headline", "Edited", user_id="u-2")
        entries = audit_service.get_by_resource(db, ResourceType.CONTENT, "hero.headline")
        assert [(e.action, e.user_id) for e in entries] == [("inline_edit", "u-2")]

    def test_login_records_client_address(self, client, db, auth_enabled, admin_user):
        resp = client.post("/api/auth/login", json={"email": "admin@riseup.org", "password": "correct-horse"})
        assert resp.status_code == 200

        entries = audit_service.get_by_resource(db, ResourceType.USER, admin_user.user_id)
        assert entries[0].action == "login"
        assert entries[0].ip_address == "testclient"
