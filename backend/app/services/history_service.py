"""Version history and rollback."""

import logging
from collections import OrderedDict
from typing import Optional

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.page_cache import page_cache, PUBLISH_REVALIDATE_PATHS
from ..exceptions import DatabaseError
from ..models import SiteContent
from ..repositories import ContentRepository, VersionRepository
from ..schemas.version import HistoryResponse, VersionResponse
from . import audit_service
from .audit_service import AuditAction, ResourceType
from .content_service import ContentService

logger = logging.getLogger(__name__)


def _infer_content_type(content: dict) -> str:
    if "url" in content:
        return "image"
    if "visible" in content:
        return "visibility"
    return "text"


class HistoryService:
    """Lists archived versions and restores them."""

    def __init__(self, db: Session):
        self.db = db
        self.version_repo = VersionRepository(db)
        self.content_repo = ContentRepository(db)
        self.content = ContentService(db)

    def list_history(self, restored: bool = False) -> HistoryResponse:
        """Recent versions, at most ``version_retention_per_key`` per key, newest first.

        Only the newest ``history_fetch_limit`` rows are read, so a key that
        was edited long ago may show fewer versions than are retained.
        """
        per_key = settings.version_retention_per_key
        grouped: "OrderedDict[str, list]" = OrderedDict()
        for version in self.version_repo.get_recent(settings.history_fetch_limit):
            bucket = grouped.setdefault(version.content_key, [])
            if len(bucket) < per_key:
                bucket.append(version)

        versions = [v for bucket in grouped.values() for v in bucket]
        versions.sort(key=lambda v: (v.changed_at, v.id), reverse=True)

        return HistoryResponse(
            versions=[VersionResponse.model_validate(v) for v in versions],
            content_keys=list(grouped.keys()),
            total=len(versions),
            restored=restored,
        )

    def rollback(self, version_id: int, restored_by: Optional[str] = None) -> SiteContent:
        """Make an archived value live again.

        The value being replaced is archived first, so a rollback can
        itself be rolled back.

        Raises:
            VersionNotFoundError: no such version.
            DatabaseError: the write failed.
        """
        version = self.version_repo.get_by_id(version_id)
        content_key = version.content_key
        content = dict(version.content or {})

        current = self.content_repo.get(content_key)
        content_type = current.content_type if current is not None else _infer_content_type(content)

        try:
            row = self.content.write_content(content_key, content_type, content)
            self.db.commit()
        except sqlalchemy.exc.SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Rollback to version %s failed: %s", version_id, e)
            raise DatabaseError(f"Failed to restore version {version_id}", original_error=e)

        page_cache.invalidate(PUBLISH_REVALIDATE_PATHS)
        audit_service.log(
            self.db, user_id=restored_by, action=AuditAction.ROLLBACK,
            resource_type=ResourceType.CONTENT, resource_id=content_key,
            details={"version_id": version_id},
        )
        logger.info("Content restored", extra={"content_key": content_key, "version_id": version_id})
        self.db.refresh(row)
        return row
