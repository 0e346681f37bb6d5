"""Unit tests for DraftService — staging, preview, publish, and cancel.

Publishing must apply the change and delete the draft together; a failed
publish leaves both the live site and the draft untouched.
"""

import uuid
from unittest.mock import patch

import pytest
import sqlalchemy.exc

from app.core.page_cache import page_cache, PUBLISH_REVALIDATE_PATHS
from app.exceptions import (
    DatabaseError,
    DraftNotFoundError,
    UnknownDraftTypeError,
    ValidationError,
)
from app.models import AnnouncementBar, ContentDraft, ContentVersion, SiteContent
from app.repositories import AnnouncementRepository
from app.services.content_catalog import DEFAULT_TEXT_CONTENT
from app.services.content_service import ContentService
from app.services.draft_service import DraftService, preview_path_for


def _live_announcements(db):
    return db.query(AnnouncementBar).filter(AnnouncementBar.is_active.is_(True)).all()


class TestPreviewPath:

    def test_announcement_goes_to_homepage(self):
        assert preview_path_for("announcement_bar") == "/"

    def test_known_page_prefix(self):
        assert preview_path_for("about.mission") == "/about"
        assert preview_path_for("flag-football.coaches") == "/flag-football"

    def test_unknown_prefix_goes_to_homepage(self):
        assert preview_path_for("hero.headline") == "/"


class TestCreateDraft:

    def test_text_draft_records_previous_text(self, db):
        draft = DraftService(db).create_text_draft("hero.headline", "New headline", created_by="u-1")
        assert draft.draft_type == "text"
        assert draft.content == {
            "text": "New headline",
            "previousText": DEFAULT_TEXT_CONTENT["hero.headline"],
        }
        assert draft.created_by == "u-1"

    def test_draft_does_not_touch_live_content(self, db):
        DraftService(db).create_text_draft("hero.headline", "Staged only")
        assert db.get(SiteContent, "hero.headline") is None
        assert ContentService(db).get_text("hero.headline") == DEFAULT_TEXT_CONTENT["hero.headline"]

    def test_unsupported_type_rejected(self, db):
        with pytest.raises(ValidationError):
            DraftService(db).create_draft("hero.headline", "video", {"url": "x"})

    def test_announcement_requires_text(self, db):
        with pytest.raises(ValidationError):
            DraftService(db).create_announcement_draft("add")

    def test_announcement_remove_needs_no_text(self, db):
        draft = DraftService(db).create_announcement_draft("remove")
        assert draft.content_key == "announcement_bar"
        assert draft.content == {"action": "remove"}

    def test_announcement_bad_action(self, db):
        with pytest.raises(ValidationError):
            DraftService(db).create_announcement_draft("replace", text="Hi")

    def test_list_pending_newest_first(self, db):
        svc = DraftService(db)
        first = svc.create_text_draft("hero.headline", "First")
        second = svc.create_text_draft("hero.subtitle", "Second")
        ids = [d.id for d in svc.list_pending()]
        assert ids == [second.id, first.id]


class TestPreview:

    def test_text_preview(self, db):
        svc = DraftService(db)
        draft = svc.create_text_draft("hero.headline", "Fall Registration Open")
        preview = svc.preview(draft.id)

        assert preview.change_description == 'Text change for "hero.headline"'
        assert preview.current_value == DEFAULT_TEXT_CONTENT["hero.headline"]
        assert preview.new_value == "Fall Registration Open"
        assert preview.preview_path == "/"
        assert preview.iframe_url == f"/?preview={draft.id}"

    def test_text_preview_unknown_key_has_no_current_value(self, db):
        svc = DraftService(db)
        draft = svc.create_draft("about.mission", "text", {"text": "Our mission"})
        preview = svc.preview(draft.id)
        assert preview.current_value is None
        assert preview.preview_path == "/about"

    def test_image_preview(self, db):
        svc = DraftService(db)
        draft = svc.create_image_draft("header.logo", "/images/logo-2.png")
        preview = svc.preview(draft.id)
        assert preview.change_description == 'Image change for "header.logo"'
        assert preview.current_value == "/images/logo.png"
        assert preview.new_value == "/images/logo-2.png"

    def test_announcement_preview(self, db):
        svc = DraftService(db)
        draft = svc.create_announcement_draft("add", text="Camp starts Monday")
        preview = svc.preview(draft.id)
        assert preview.change_description == 'Announcement: "Camp starts Monday"'
        assert preview.action == "add"
        assert preview.current_value is None

    def test_announcement_remove_preview(self, db):
        svc = DraftService(db)
        draft = svc.create_announcement_draft("remove")
        assert svc.preview(draft.id).change_description == "Remove announcement bar"

    def test_visibility_preview(self, db):
        svc = DraftService(db)
        draft = svc.create_visibility_draft("flag-football.coaches", False)
        preview = svc.preview(draft.id)
        assert preview.change_description == 'Hide section "flag-football.coaches"'
        assert preview.current_value == "visible"
        assert preview.new_value == "hidden"
        assert preview.preview_path == "/flag-football"

    def test_missing_draft(self, db):
        with pytest.raises(DraftNotFoundError):
            DraftService(db).preview("does-not-exist")


class TestPublish:

    def test_publish_text(self, db):
        svc = DraftService(db)
        draft = svc.create_text_draft("hero.headline", "Published headline")
        result = svc.publish(draft.id, published_by="u-1")

        assert result.draft_type == "text"
        assert result.revalidated == list(PUBLISH_REVALIDATE_PATHS)
        assert ContentService(db).get_text("hero.headline") == "Published headline"
        assert db.get(ContentDraft, draft.id) is None

    def test_publish_over_existing_archives_value(self, db):
        content = ContentService(db)
        content.write_content("hero.headline", "text", {"text": "Old"})
        db.commit()

        svc = DraftService(db)
        svc.publish(svc.create_text_draft("hero.headline", "New").id)

        versions = db.query(ContentVersion).filter(ContentVersion.content_key == "hero.headline").all()
        assert [v.content for v in versions] == [{"text": "Old"}]
        assert content.get_text("hero.headline") == "New"

    def test_publish_image(self, db):
        svc = DraftService(db)
        svc.publish(svc.create_image_draft("hero.poster", "/images/new.jpg", alt="Team photo").id)
        image = ContentService(db).get_image("hero.poster")
        assert image.url == "/images/new.jpg"
        assert image.alt == "Team photo"

    def test_publish_announcement_replaces_active(self, db):
        svc = DraftService(db)
        svc.publish(svc.create_announcement_draft("add", text="First").id)
        svc.publish(svc.create_announcement_draft("update", text="Second", link_url="/register").id)

        active = _live_announcements(db)
        assert len(active) == 1
        assert active[0].text == "Second"
        assert active[0].link_url == "/register"

    def test_publish_announcement_remove(self, db):
        svc = DraftService(db)
        svc.publish(svc.create_announcement_draft("add", text="Going away").id)
        svc.publish(svc.create_announcement_draft("remove").id)
        assert _live_announcements(db) == []
        assert AnnouncementRepository(db).count_active() == 0

        svc.publish(svc.create_announcement_draft("add", text="Back again").id)
        assert AnnouncementRepository(db).count_active() == 1

    def test_publish_visibility(self, db):
        svc = DraftService(db)
        svc.publish(svc.create_visibility_draft("homepage.safety", False).id)
        assert ContentService(db).get_section_visibility("homepage.safety") is False

    def test_publish_invalidates_cache(self, db):
        ContentService(db).render_page("/")
        ContentService(db).render_page("/about")
        svc = DraftService(db)
        svc.publish(svc.create_text_draft("hero.headline", "Fresh").id)
        assert "/" not in page_cache
        assert "/about" not in page_cache

    def test_unknown_type_keeps_draft(self, db):
        draft = ContentDraft(
            id=str(uuid.uuid4()), content_key="hero.headline",
            draft_type="bogus", content={"text": "x"},
        )
        db.add(draft)
        db.commit()

        with pytest.raises(UnknownDraftTypeError):
            DraftService(db).publish(draft.id)
        assert db.get(ContentDraft, draft.id) is not None

    def test_failed_write_rolls_back_everything(self, db):
        svc = DraftService(db)
        draft = svc.create_text_draft("hero.headline", "Never live")
        ContentService(db).render_page("/")

        with patch.object(
            svc.content.content_repo, "upsert",
            side_effect=sqlalchemy.exc.OperationalError("stmt", {}, Exception("connection lost")),
        ):
            with pytest.raises(DatabaseError):
                svc.publish(draft.id)

        assert db.get(ContentDraft, draft.id) is not None
        assert db.get(SiteContent, "hero.headline") is None
        assert "/" in page_cache

    def test_publish_missing_draft(self, db):
        with pytest.raises(DraftNotFoundError):
            DraftService(db).publish("does-not-exist")


class TestCancel:

    def test_cancel_deletes_draft(self, db):
        svc = DraftService(db)
        draft = svc.create_text_draft("hero.headline", "Never mind")
        svc.cancel(draft.id)
        assert db.get(ContentDraft, draft.id) is None
        assert db.get(SiteContent, "hero.headline") is None

    def test_cancel_missing_draft(self, db):
        with pytest.raises(DraftNotFoundError):
            DraftService(db).cancel("does-not-exist")


class TestDraftsApi:

    def test_create_and_list(self, client):
        resp = client.post("/api/admin/drafts", json={
            "content_key": "hero.headline", "draft_type": "text", "content": {"text": "API draft"},
        })
        assert resp.status_code == 201
        draft_id = resp.json()["id"]

        listed = client.get("/api/admin/drafts").json()
        assert [d["id"] for d in listed] == [draft_id]

    def test_invalid_type_is_422(self, client):
        resp = client.post("/api/admin/drafts", json={
            "content_key": "hero.headline", "draft_type": "video", "content": {},
        })
        assert resp.status_code == 422

    def test_publish_endpoint(self, client):
        draft_id = client.post("/api/admin/drafts", json={
            "content_key": "hero.headline", "draft_type": "text", "content": {"text": "Live now"},
        }).json()["id"]

        resp = client.post(f"/api/admin/drafts/{draft_id}/publish")
        assert resp.status_code == 200
        assert "/" in resp.json()["revalidated"]
        assert client.get("/api/content/text/hero.headline").json()["text"] == "Live now"
        assert client.get("/api/admin/drafts").json() == []

    def test_camel_case_announcement_link_survives_publish(self, client):
        draft_id = client.post("/api/admin/drafts", json={
            "content_key": "announcement_bar",
            "draft_type": "announcement",
            "content": {
                "action": "add", "text": "Fall signups open",
                "linkUrl": "/register", "linkText": "Sign up",
            },
        }).json()["id"]

        assert client.post(f"/api/admin/drafts/{draft_id}/publish").status_code == 200
        announcement = client.get("/api/announcement").json()
        assert announcement["text"] == "Fall signups open"
        assert announcement["link_url"] == "/register"
        assert announcement["link_text"] == "Sign up"

    def test_cancel_endpoint(self, client):
        draft_id = client.post("/api/admin/drafts", json={
            "content_key": "homepage.safety", "draft_type": "visibility", "content": {"visible": False},
        }).json()["id"]

        assert client.delete(f"/api/admin/drafts/{draft_id}").status_code == 204
        assert client.delete(f"/api/admin/drafts/{draft_id}").status_code == 404

    def test_publish_missing_is_404(self, client):
        resp = client.post("/api/admin/drafts/nope/publish")
        assert resp.status_code == 404
        assert resp.json()["error"] == "DRAFT_NOT_FOUND"


class TestDashboardPreview:

    def test_preview_page(self, client):
        draft_id = client.post("/api/admin/drafts", json={
            "content_key": "hero.headline", "draft_type": "text", "content": {"text": "Preview me"},
        }).json()["id"]

        resp = client.get("/admin/dashboard/preview", params={"draft": draft_id})
        assert resp.status_code == 200
        assert resp.json()["new_value"] == "Preview me"

    def test_missing_draft_param_redirects(self, client):
        resp = client.get("/admin/dashboard/preview", follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/admin/dashboard"

    def test_unknown_draft_redirects(self, client):
        resp = client.get("/admin/dashboard/preview?draft=gone", follow_redirects=False)
        assert resp.status_code == 303
