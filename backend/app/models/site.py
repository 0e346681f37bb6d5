"""Announcement bar and section visibility models."""

from sqlalchemy import Boolean, Column, Index, Integer, String, Text, DateTime

from ..database import Base
from .content import utcnow


class AnnouncementBar(Base):
    """Banner shown above the navigation on every page.

    Old rows are kept with ``is_active=False``; at most one row is active
    after any publish.
    """

    __tablename__ = "announcement_bar"
    __table_args__ = (
        Index("ix_announcement_bar_active", "is_active"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    text = Column(Text, nullable=False)
    link_url = Column(Text, nullable=True)
    link_text = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class SectionVisibility(Base):
    """Show/hide switch for a page section (e.g. ``homepage.safety``)."""

    __tablename__ = "section_visibility"

    section_key = Column(String(255), primary_key=True)
    is_visible = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
