"""Version repository for database operations."""

from typing import List

from ..models import ContentVersion
from ..exceptions import VersionNotFoundError
from .base import BaseRepository


class VersionRepository(BaseRepository[ContentVersion]):
    """Append-only archive of superseded content values."""

    model_class = ContentVersion
    not_found_error = VersionNotFoundError

    def create(self, content_key: str, content: dict) -> ContentVersion:
        """Archive a superseded value."""
        db_version = ContentVersion(content_key=content_key, content=content)
        self.db.add(db_version)
        self.db.flush()
        return db_version

    def prune(self, content_key: str, keep: int) -> int:
        """Delete all but the newest ``keep`` versions of content_key.

        Returns the number of rows removed.
        """
        stale_ids = [
            row.id
            for row in self.db.query(ContentVersion.id)
            .filter(ContentVersion.content_key == content_key)
            .order_by(ContentVersion.changed_at.desc(), ContentVersion.id.desc())
            .offset(keep)
            .all()
        ]
        if not stale_ids:
            return 0
        return (
            self.db.query(ContentVersion)
            .filter(ContentVersion.id.in_(stale_ids))
            .delete(synchronize_session=False)
        )

    def get_recent(self, limit: int = 100) -> List[ContentVersion]:
        """Newest versions across all keys."""
        return (
            self.db.query(ContentVersion)
            .order_by(ContentVersion.changed_at.desc(), ContentVersion.id.desc())
            .limit(limit)
            .all()
        )
