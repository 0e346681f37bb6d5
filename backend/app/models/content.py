"""Site content, draft, and version models.

site_content holds the live value of every editable field, content_drafts
stages proposed changes awaiting review, and content_versions archives each
superseded value for rollback.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Index, Integer, String, DateTime, JSON

from ..database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SiteContent(Base):
    """Live content for one dot-namespaced key (e.g. ``hero.headline``).

    ``content`` is ``{"text"}`` for text, ``{"url", "alt", "position"?}``
    for images, and ``{"visible"}`` for visibility entries.
    """

    __tablename__ = "site_content"
    __table_args__ = (
        Index("ix_site_content_page", "page"),
    )

    content_key = Column(String(255), primary_key=True)
    # Allowed values: text, image, visibility
    content_type = Column(String(20), nullable=False, default="text")
    content = Column(JSON, nullable=False)
    page = Column(String(100), nullable=True)
    section = Column(String(100), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class ContentDraft(Base):
    """Staged change awaiting human review.

    ``content_key`` is deliberately not a foreign key: a draft may target a
    key that has no site_content row yet.
    """

    __tablename__ = "content_drafts"
    __table_args__ = (
        Index("ix_content_drafts_created_at", "created_at"),
    )

    id = Column(String(36), primary_key=True)
    content_key = Column(String(255), nullable=False)
    # Allowed values: see schemas.draft.DraftType
    draft_type = Column(String(20), nullable=False)
    content = Column(JSON, nullable=False)
    created_by = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class ContentVersion(Base):
    """Append-only archive of superseded site_content values."""

    __tablename__ = "content_versions"
    __table_args__ = (
        Index("ix_content_versions_key_changed", "content_key", "changed_at"),
        Index("ix_content_versions_changed_at", "changed_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_key = Column(String(255), nullable=False)
    content = Column(JSON, nullable=False)
    changed_at = Column(DateTime(timezone=True), default=utcnow)
