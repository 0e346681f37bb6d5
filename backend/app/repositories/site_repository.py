"""Announcement bar and section visibility repositories."""

from datetime import datetime, timezone
from typing import List, Optional

from ..models import AnnouncementBar, SectionVisibility
from .base import BaseRepository


class AnnouncementRepository(BaseRepository[AnnouncementBar]):
    """Announcement rows; at most one is expected to be active."""

    model_class = AnnouncementBar

    def get_active(self) -> Optional[AnnouncementBar]:
        """Newest active announcement, if any."""
        return (
            self.db.query(AnnouncementBar)
            .filter(AnnouncementBar.is_active.is_(True))
            .order_by(AnnouncementBar.created_at.desc(), AnnouncementBar.id.desc())
            .first()
        )

    def count_active(self) -> int:
        """At most one once publishing has gone through ``deactivate_all``."""
        return self.db.query(AnnouncementBar).filter(AnnouncementBar.is_active.is_(True)).count()

    def deactivate_all(self) -> int:
        """Mark every active announcement inactive. Returns rows changed."""
        return (
            self.db.query(AnnouncementBar)
            .filter(AnnouncementBar.is_active.is_(True))
            .update(
                {"is_active": False, "updated_at": datetime.now(timezone.utc)},
                synchronize_session=False,
            )
        )

    def create(
        self,
        text: str,
        link_url: Optional[str] = None,
        link_text: Optional[str] = None,
    ) -> AnnouncementBar:
        row = AnnouncementBar(
            text=text,
            link_url=link_url or None,
            link_text=link_text or None,
            is_active=True,
        )
        self.db.add(row)
        self.db.flush()
        return row


class VisibilityRepository(BaseRepository[SectionVisibility]):
    """Section show/hide switches keyed by section_key."""

    model_class = SectionVisibility
    id_column = "section_key"

    def get(self, section_key: str) -> Optional[SectionVisibility]:
        return self.get_by_id_optional(section_key)

    def list_all(self) -> List[SectionVisibility]:
        return self.db.query(SectionVisibility).order_by(SectionVisibility.section_key).all()

    def upsert(self, section_key: str, is_visible: bool) -> SectionVisibility:
        now = datetime.now(timezone.utc)
        stmt = self._insert().values(
            section_key=section_key, is_visible=is_visible, updated_at=now,
        ).on_conflict_do_update(
            index_elements=["section_key"],
            set_={"is_visible": is_visible, "updated_at": now},
        )
        self.db.execute(stmt)
        return self.db.get(SectionVisibility, section_key, populate_existing=True)
