"""Content service — deep module for the live content store.

Owns reads with default fallbacks, inline edits, and the single write path
into site_content. Every write archives the value it replaces into
content_versions and prunes that key's history to the retention limit, in
the caller's transaction, so history and rollback never depend on
database triggers.
"""

import logging
from typing import Optional

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.page_cache import page_cache, normalize_route, PUBLIC_ROUTES
from ..exceptions import PageNotFoundError
from ..models import SiteContent, AnnouncementBar
from ..repositories import (
    ContentRepository,
    VersionRepository,
    AnnouncementRepository,
    VisibilityRepository,
)
from ..schemas.content import (
    ImageContent,
    SaveResult,
    EditableContentItem,
    AnnouncementResponse,
    PageRenderResponse,
)
from . import audit_service
from .audit_service import AuditAction, ResourceType
from .content_catalog import (
    DEFAULT_TEXT_CONTENT,
    DEFAULT_IMAGE_CONTENT,
    TEXT_CONTENT_DESCRIPTIONS,
    describe,
)

logger = logging.getLogger(__name__)


class ContentService:
    """Reads and writes live site content."""

    def __init__(self, db: Session):
        self.db = db
        self.content_repo = ContentRepository(db)
        self.version_repo = VersionRepository(db)
        self.announcement_repo = AnnouncementRepository(db)
        self.visibility_repo = VisibilityRepository(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_text(self, content_key: str) -> str:
        """Stored text for a key, else its default, else empty string."""
        row = self.content_repo.get(content_key)
        if row is not None and isinstance(row.content, dict) and row.content.get("text"):
            return row.content["text"]
        return DEFAULT_TEXT_CONTENT.get(content_key, "")

    def get_image(self, content_key: str) -> ImageContent:
        """Stored image for a key, else its default (empty URL if unknown)."""
        default = DEFAULT_IMAGE_CONTENT.get(content_key, {"url": "", "alt": ""})
        row = self.content_repo.get(content_key)
        if row is not None and isinstance(row.content, dict) and row.content.get("url"):
            return ImageContent(
                url=row.content["url"],
                alt=row.content.get("alt") or default["alt"],
                position=row.content.get("position"),
            )
        return ImageContent(**default)

    def get_page_content(self, page: str) -> dict[str, str]:
        """All text for a page, with defaults for every known key of that page."""
        content: dict[str, str] = {}
        for row in self.content_repo.list_by_page(page):
            if row.content_type == "text" and isinstance(row.content, dict):
                content[row.content_key] = row.content.get("text") or ""

        for key, info in TEXT_CONTENT_DESCRIPTIONS.items():
            if info.page == page and not content.get(key):
                content[key] = DEFAULT_TEXT_CONTENT[key]
        return content

    def get_section_visibility(self, section_key: str) -> bool:
        """Sections are visible unless explicitly hidden."""
        row = self.visibility_repo.get(section_key)
        return True if row is None else bool(row.is_visible)

    def get_announcement(self) -> Optional[AnnouncementBar]:
        return self.announcement_repo.get_active()

    def list_editable_content(self) -> list[EditableContentItem]:
        """Every known text key with its description and current value."""
        return [
            EditableContentItem(
                content_key=key,
                description=info.description,
                current_value=self.get_text(key),
                page=info.page,
                section=info.section,
            )
            for key, info in TEXT_CONTENT_DESCRIPTIONS.items()
        ]

    def render_page(self, path: str) -> PageRenderResponse:
        """Page payload for a public route, served from the render cache when warm.

        Raises PageNotFoundError for anything outside PUBLIC_ROUTES.
        """
        route = normalize_route(path)
        if route is None:
            raise PageNotFoundError(path)

        cached = page_cache.get(route)
        if cached is not None:
            return cached.model_copy(update={"cached": True})

        page = PUBLIC_ROUTES[route]
        announcement = self.get_announcement()
        rendered = PageRenderResponse(
            path=route,
            page=page,
            content=self.get_page_content(page),
            announcement=AnnouncementResponse.model_validate(announcement) if announcement else None,
            sections={row.section_key: bool(row.is_visible) for row in self.visibility_repo.list_all()},
        )
        page_cache.set(route, rendered)
        return rendered

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def write_content(
        self,
        content_key: str,
        content_type: str,
        content: dict,
        page: Optional[str] = None,
        section: Optional[str] = None,
    ) -> SiteContent:
        """Replace the live value for a key, archiving the previous one.

        Does not commit; callers own the transaction.
        """
        current = self.content_repo.get(content_key)
        if current is not None:
            self.version_repo.create(content_key, current.content)
            pruned = self.version_repo.prune(content_key, settings.version_retention_per_key)
            if pruned:
                logger.debug("Pruned %d old version(s) of %s", pruned, content_key)

        info = describe(content_key)
        if info is not None:
            page = page or info.page
            section = section or info.section

        return self.content_repo.upsert(content_key, content_type, content, page, section)

    def save_inline_text(
        self,
        content_key: str,
        text: str,
        page: Optional[str] = None,
        section: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> SaveResult:
        """Write a text field straight to live content (no draft)."""
        return self._save_inline(
            content_key, "text", {"text": text}, page, section, user_id,
            failure_message="Failed to save content",
        )

    def save_inline_image(
        self,
        content_key: str,
        url: str,
        alt: Optional[str] = None,
        position: Optional[dict] = None,
        page: Optional[str] = None,
        section: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> SaveResult:
        """Write an image slot straight to live content (no draft)."""
        payload: dict = {"url": url, "alt": alt or ""}
        if position is not None:
            payload["position"] = position
        return self._save_inline(
            content_key, "image", payload, page, section, user_id,
            failure_message="Failed to save image",
        )

    def _save_inline(
        self,
        content_key: str,
        content_type: str,
        payload: dict,
        page: Optional[str],
        section: Optional[str],
        user_id: Optional[str],
        failure_message: str,
    ) -> SaveResult:
        try:
            self.write_content(content_key, content_type, payload, page, section)
            self.db.commit()
        except sqlalchemy.exc.SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Error saving inline %s for %s: %s", content_type, content_key, e)
            return SaveResult(success=False, error=failure_message)

        page_cache.invalidate_all()
        audit_service.log(
            self.db, user_id=user_id, action=AuditAction.INLINE_EDIT,
            resource_type=ResourceType.CONTENT, resource_id=content_key,
            details={"content_type": content_type},
        )
        logger.info("Inline %s saved", content_type, extra={"content_key": content_key})
        return SaveResult(success=True)
