"""Audit trail for admin actions on the site.

Every change that reaches the live site (publish, rollback, inline edit),
every discarded draft, sponsor approval, and dashboard login leaves one
immutable row. Writing never raises, so a failed audit insert cannot undo
an already-committed publish.

    audit_service.log(db, user_id="a1b2c3d4", action=AuditAction.PUBLISH,
                      resource_type=ResourceType.DRAFT, resource_id=draft.id,
                      details={"content_key": "hero.headline"})
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Union

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..models.user import AuditLog

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    PUBLISH = "publish"
    CANCEL = "cancel"
    ROLLBACK = "rollback"
    INLINE_EDIT = "inline_edit"
    APPROVE = "approve"
    LOGIN = "login"


class ResourceType(str, Enum):
    DRAFT = "draft"
    CONTENT = "content"
    SPONSOR = "sponsor"
    USER = "user"


def _value(member: Union[Enum, str]) -> str:
    return member.value if isinstance(member, Enum) else str(member)


def log(
    db: Session,
    user_id: Optional[str],
    action: Union[AuditAction, str],
    resource_type: Union[ResourceType, str],
    resource_id: Optional[str] = None,
    details: Optional[dict] = None,
    ip_address: Optional[str] = None,
) -> None:
    """Record one admin action. Failures are logged and swallowed."""
    try:
        entry = AuditLog(
            user_id=user_id,
            action=_value(action),
            resource_type=_value(resource_type),
            resource_id=resource_id,
            details=json.dumps(details, default=str) if details else None,
            ip_address=ip_address,
        )
        db.add(entry)
        db.commit()
    except sqlalchemy.exc.SQLAlchemyError as e:
        logger.warning("Failed to write audit entry for %s: %s", _value(action), e)
        db.rollback()


def get_recent(
    db: Session,
    limit: int = 100,
    action: Optional[Union[AuditAction, str]] = None,
) -> list[AuditLog]:
    """Newest entries first, optionally only one kind of action."""
    query = db.query(AuditLog)
    if action is not None:
        query = query.filter(AuditLog.action == _value(action))
    return query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()


def get_by_resource(
    db: Session,
    resource_type: Union[ResourceType, str],
    resource_id: str,
    limit: int = 100,
) -> list[AuditLog]:
    """Who touched one draft, content key, sponsor, or account, newest first."""
    return (
        db.query(AuditLog)
        .filter(AuditLog.resource_type == _value(resource_type), AuditLog.resource_id == resource_id)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
        .all()
    )


def purge_old_entries(db: Session, days: int = 365) -> int:
    """Delete entries older than ``days``; ``days <= 0`` keeps everything.

    Runs once at startup. Returns the number of rows removed and never raises.
    """
    if days <= 0:
        return 0

    cutoff = datetime.now(timezone.utc) - timedelta(days=days)
    try:
        count = (
            db.query(AuditLog)
            .filter(AuditLog.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
        return count
    except sqlalchemy.exc.SQLAlchemyError as e:
        logger.warning("Failed to purge audit entries: %s", e)
        db.rollback()
        return 0
