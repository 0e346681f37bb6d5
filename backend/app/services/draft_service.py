"""Draft service — deep module for the stage/preview/publish lifecycle.

Drafts are proposed changes held apart from live content until an admin
publishes them. Publishing applies the type-specific write and deletes the
draft in one transaction; the public render cache is invalidated only after
that transaction commits.
"""

import logging
from typing import List, Optional

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..core.page_cache import page_cache, PUBLIC_ROUTES, PUBLISH_REVALIDATE_PATHS
from ..exceptions import DatabaseError, UnknownDraftTypeError, ValidationError
from ..models import ContentDraft
from ..repositories import DraftRepository, AnnouncementRepository, VisibilityRepository
from ..schemas.draft import (
    ANNOUNCEMENT_CONTENT_KEY,
    AnnouncementAction,
    DraftPreview,
    DraftResponse,
    DraftType,
    PublishResult,
)
from . import audit_service
from .audit_service import AuditAction, ResourceType
from .content_catalog import DEFAULT_TEXT_CONTENT
from .content_service import ContentService

logger = logging.getLogger(__name__)

DRAFT_LIST_LIMIT = 50


def preview_path_for(content_key: str) -> str:
    """Public route a change to ``content_key`` shows up on.

    Keys are dot-namespaced by page slug (``about.mission``,
    ``flag-football.coaches``); anything unrecognized lands on the homepage.
    """
    if content_key == ANNOUNCEMENT_CONTENT_KEY:
        return "/"
    prefix = "/" + content_key.split(".", 1)[0]
    return prefix if prefix in PUBLIC_ROUTES else "/"


def _coerce_draft_type(draft_type) -> DraftType:
    try:
        return DraftType(draft_type)
    except ValueError:
        raise ValidationError(
            f"Unsupported draft type: {draft_type}. "
            f"Must be one of: {', '.join(t.value for t in DraftType)}",
            field="draft_type",
        )



def _announcement_link(content: dict) -> tuple[Optional[str], Optional[str]]:
    """Link url and text of an announcement draft, in either key spelling.

    Drafts staged through the API may carry ``linkUrl`` / ``linkText``.
    """
    return (
        content.get("link_url") or content.get("linkUrl"),
        content.get("link_text") or content.get("linkText"),
    )

class DraftService:
    """Stages, previews, publishes, and cancels content drafts."""

    def __init__(self, db: Session):
        self.db = db
        self.draft_repo = DraftRepository(db)
        self.announcement_repo = AnnouncementRepository(db)
        self.visibility_repo = VisibilityRepository(db)
        self.content = ContentService(db)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_draft(
        self,
        content_key: str,
        draft_type,
        content: dict,
        created_by: Optional[str] = None,
    ) -> ContentDraft:
        """Stage a change. Nothing visible on the live site changes."""
        draft_type = _coerce_draft_type(draft_type)
        if not content_key:
            raise ValidationError("content_key is required", field="content_key")

        draft = self.draft_repo.create(content_key, draft_type.value, content, created_by)
        self.db.commit()
        self.db.refresh(draft)
        logger.info(
            "Draft created",
            extra={"draft_id": draft.id, "content_key": content_key, "draft_type": draft_type.value},
        )
        return draft

    def create_text_draft(self, content_key: str, text: str, created_by: Optional[str] = None) -> ContentDraft:
        """Text draft carrying the value it replaces, for diffing."""
        previous = self.content.get_text(content_key)
        return self.create_draft(
            content_key, DraftType.TEXT, {"text": text, "previousText": previous}, created_by,
        )

    def create_image_draft(
        self,
        content_key: str,
        url: str,
        alt: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> ContentDraft:
        return self.create_draft(content_key, DraftType.IMAGE, {"url": url, "alt": alt or ""}, created_by)

    def create_announcement_draft(
        self,
        action,
        text: Optional[str] = None,
        link_url: Optional[str] = None,
        link_text: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> ContentDraft:
        try:
            action = AnnouncementAction(action)
        except ValueError:
            raise ValidationError(f"Unsupported announcement action: {action}", field="action")

        content: dict = {"action": action.value}
        if action != AnnouncementAction.REMOVE:
            if not text:
                raise ValidationError("Announcement text is required", field="text")
            content["text"] = text
            if link_url:
                content["link_url"] = link_url
            if link_text:
                content["link_text"] = link_text

        return self.create_draft(ANNOUNCEMENT_CONTENT_KEY, DraftType.ANNOUNCEMENT, content, created_by)

    def create_visibility_draft(
        self,
        section_key: str,
        visible: bool,
        created_by: Optional[str] = None,
    ) -> ContentDraft:
        return self.create_draft(section_key, DraftType.VISIBILITY, {"visible": bool(visible)}, created_by)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_draft(self, draft_id: str) -> ContentDraft:
        """Raises DraftNotFoundError if missing."""
        return self.draft_repo.get_by_id(draft_id)

    def list_pending(self, limit: int = DRAFT_LIST_LIMIT) -> List[ContentDraft]:
        return self.draft_repo.list_recent(limit)

    def preview(self, draft_id: str) -> DraftPreview:
        """Current vs. proposed value for one draft. Read-only."""
        draft = self.get_draft(draft_id)
        content = draft.content or {}
        current_value: Optional[str] = None
        new_value: Optional[str] = None
        action: Optional[str] = None

        if draft.draft_type == DraftType.TEXT.value:
            if draft.content_key in DEFAULT_TEXT_CONTENT:
                current_value = self.content.get_text(draft.content_key)
            new_value = content.get("text") or ""
            description = f'Text change for "{draft.content_key}"'
        elif draft.draft_type == DraftType.IMAGE.value:
            current_value = self.content.get_image(draft.content_key).url
            new_value = content.get("url") or ""
            description = f'Image change for "{draft.content_key}"'
        elif draft.draft_type == DraftType.ANNOUNCEMENT.value:
            action = content.get("action")
            if action == AnnouncementAction.REMOVE.value:
                description = "Remove announcement bar"
            else:
                active = self.content.get_announcement()
                current_value = active.text if active else None
                new_value = content.get("text") or ""
                description = f'Announcement: "{new_value}"'
        elif draft.draft_type == DraftType.VISIBILITY.value:
            visible = bool(content.get("visible"))
            current_value = "visible" if self.content.get_section_visibility(draft.content_key) else "hidden"
            new_value = "visible" if visible else "hidden"
            description = f'{"Show" if visible else "Hide"} section "{draft.content_key}"'
        else:
            description = f'Unsupported change type "{draft.draft_type}"'

        path = preview_path_for(draft.content_key)
        return DraftPreview(
            draft=DraftResponse.model_validate(draft),
            change_description=description,
            current_value=current_value,
            new_value=new_value,
            action=action,
            preview_path=path,
            iframe_url=f"{path}?preview={draft.id}",
        )

    # ------------------------------------------------------------------
    # Publish / cancel
    # ------------------------------------------------------------------

    def publish(self, draft_id: str, published_by: Optional[str] = None) -> PublishResult:
        """Apply a draft to live content and delete it, atomically.

        On any failure the transaction is rolled back, the draft stays for
        retry, and no cached page is invalidated.

        Raises:
            DraftNotFoundError: no such draft.
            UnknownDraftTypeError: the stored type has no publisher.
            DatabaseError: the write failed.
        """
        draft = self.get_draft(draft_id)
        content_key = draft.content_key
        draft_type = draft.draft_type

        try:
            self._apply(draft)
            self.draft_repo.delete(draft)
            self.db.commit()
        except UnknownDraftTypeError:
            self.db.rollback()
            raise
        except sqlalchemy.exc.SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Publish failed for draft %s: %s", draft_id, e)
            raise DatabaseError(f"Failed to publish draft {draft_id}", original_error=e)

        page_cache.invalidate(PUBLISH_REVALIDATE_PATHS)
        audit_service.log(
            self.db, user_id=published_by, action=AuditAction.PUBLISH,
            resource_type=ResourceType.DRAFT, resource_id=draft_id,
            details={"content_key": content_key, "draft_type": draft_type},
        )
        logger.info(
            "Draft published",
            extra={"draft_id": draft_id, "content_key": content_key, "draft_type": draft_type},
        )
        return PublishResult(
            draft_id=draft_id,
            draft_type=draft_type,
            content_key=content_key,
            revalidated=list(PUBLISH_REVALIDATE_PATHS),
        )

    def _apply(self, draft: ContentDraft) -> None:
        """Type-specific write for publish. Does not commit."""
        content = draft.content or {}
        try:
            draft_type = DraftType(draft.draft_type)
        except ValueError:
            raise UnknownDraftTypeError(draft.draft_type)

        if draft_type == DraftType.TEXT:
            self.content.write_content(draft.content_key, "text", {"text": content.get("text") or ""})
        elif draft_type == DraftType.IMAGE:
            payload = {"url": content.get("url") or "", "alt": content.get("alt") or ""}
            if content.get("position") is not None:
                payload["position"] = content["position"]
            self.content.write_content(draft.content_key, "image", payload)
        elif draft_type == DraftType.ANNOUNCEMENT:
            self.announcement_repo.deactivate_all()
            if content.get("action") != AnnouncementAction.REMOVE.value:
                link_url, link_text = _announcement_link(content)
                self.announcement_repo.create(
                    text=content.get("text") or "",
                    link_url=link_url,
                    link_text=link_text,
                )
        elif draft_type == DraftType.VISIBILITY:
            self.visibility_repo.upsert(draft.content_key, bool(content.get("visible")))
        else:
            raise UnknownDraftTypeError(draft.draft_type)

    def cancel(self, draft_id: str, cancelled_by: Optional[str] = None) -> None:
        """Discard a draft. Raises DraftNotFoundError if missing."""
        draft = self.get_draft(draft_id)
        self.draft_repo.delete(draft)
        self.db.commit()
        audit_service.log(
            self.db, user_id=cancelled_by, action=AuditAction.CANCEL,
            resource_type=ResourceType.DRAFT, resource_id=draft_id,
        )
        logger.info("Draft cancelled", extra={"draft_id": draft_id})
