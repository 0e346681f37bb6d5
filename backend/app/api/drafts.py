"""Draft API endpoints (auth required)."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.draft import DraftCreate, DraftResponse, PublishResult
from ..services.draft_service import DraftService

router = APIRouter(prefix="/api/admin/drafts", tags=["drafts"])


@router.post("", response_model=DraftResponse, status_code=201)
def create_draft(
    body: DraftCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Stage a change for review. Live content is untouched."""
    return DraftService(db).create_draft(body.content_key, body.draft_type, body.content, auth.user_id)


@router.get("", response_model=List[DraftResponse])
def list_drafts(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Pending drafts, newest first."""
    return DraftService(db).list_pending(limit)


@router.post("/{draft_id}/publish", response_model=PublishResult)
def publish_draft(
    draft_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Apply a draft to the live site and delete it."""
    return DraftService(db).publish(draft_id, published_by=auth.user_id)


@router.delete("/{draft_id}", status_code=204)
def cancel_draft(
    draft_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    DraftService(db).cancel(draft_id, cancelled_by=auth.user_id)
    return Response(status_code=204)
