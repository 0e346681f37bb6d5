"""Draft repository for database operations."""

import uuid
from typing import List, Optional

from ..models import ContentDraft
from ..exceptions import DraftNotFoundError
from .base import BaseRepository


class DraftRepository(BaseRepository[ContentDraft]):
    """Repository for staged content changes."""

    model_class = ContentDraft
    not_found_error = DraftNotFoundError

    def create(
        self,
        content_key: str,
        draft_type: str,
        content: dict,
        created_by: Optional[str] = None,
    ) -> ContentDraft:
        draft = ContentDraft(
            id=str(uuid.uuid4()),
            content_key=content_key,
            draft_type=draft_type,
            content=content,
            created_by=created_by or None,
        )
        self.db.add(draft)
        self.db.flush()
        return draft

    def list_recent(self, limit: int = 50) -> List[ContentDraft]:
        return (
            self.db.query(ContentDraft)
            .order_by(ContentDraft.created_at.desc())
            .limit(limit)
            .all()
        )

    def delete(self, draft: ContentDraft) -> None:
        self.db.delete(draft)
        self.db.flush()
