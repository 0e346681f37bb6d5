"""Site content repository."""

from datetime import datetime, timezone
from typing import List, Optional

from ..models import SiteContent
from .base import BaseRepository


class ContentRepository(BaseRepository[SiteContent]):
    """Reads and upserts live content rows keyed by content_key."""

    model_class = SiteContent
    id_column = "content_key"

    def get(self, content_key: str) -> Optional[SiteContent]:
        return self.get_by_id_optional(content_key)

    def list_by_page(self, page: str) -> List[SiteContent]:
        return self.db.query(SiteContent).filter(SiteContent.page == page).all()

    def count(self) -> int:
        return self.db.query(SiteContent).count()

    def upsert(
        self,
        content_key: str,
        content_type: str,
        content: dict,
        page: Optional[str] = None,
        section: Optional[str] = None,
    ) -> SiteContent:
        """Insert or replace the row for content_key in one statement.

        ``page`` and ``section`` only overwrite existing values when given.
        """
        now = datetime.now(timezone.utc)
        values = {
            "content_key": content_key,
            "content_type": content_type,
            "content": content,
            "page": page,
            "section": section,
            "updated_at": now,
        }
        update = {"content_type": content_type, "content": content, "updated_at": now}
        if page is not None:
            update["page"] = page
        if section is not None:
            update["section"] = section

        stmt = self._insert().values(**values).on_conflict_do_update(
            index_elements=["content_key"],
            set_=update,
        )
        self.db.execute(stmt)
        return self.db.get(SiteContent, content_key, populate_existing=True)
