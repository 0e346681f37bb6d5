"""Admin dashboard endpoints.

Unauthenticated requests are redirected to the login page instead of
receiving a 401, since these are navigated to in a browser. Sponsor
approval is admin-only and answers 401 or 403 instead.

    GET  /admin/dashboard/preview?draft=<id>
    GET  /admin/dashboard/history?restored=<bool>
    POST /admin/dashboard/history/{version_id}/restore
    GET  /admin/dashboard/sponsors
    POST /admin/dashboard/sponsors/{sponsor_id}/approve
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_admin, require_dashboard_session
from ..database import get_db
from ..exceptions import DraftNotFoundError
from ..schemas.draft import DraftPreview
from ..schemas.sponsor import AdminSponsorList, SponsorResponse
from ..schemas.version import HistoryResponse
from ..services.draft_service import DraftService
from ..services.history_service import HistoryService
from ..services.sponsor_service import SponsorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/dashboard", tags=["dashboard"])

DASHBOARD_PATH = "/admin/dashboard"


@router.get("/preview", response_model=DraftPreview)
def preview_draft(
    draft: Optional[str] = Query(None, description="Draft id"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_dashboard_session),
):
    """Current vs. proposed value for a draft.

    A missing or unknown draft id sends the admin back to the dashboard.
    """
    if not draft:
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)
    try:
        return DraftService(db).preview(draft)
    except DraftNotFoundError:
        logger.info("Preview requested for unknown draft %s", draft)
        return RedirectResponse(url=DASHBOARD_PATH, status_code=303)


@router.get("/history", response_model=HistoryResponse)
def list_history(
    restored: bool = Query(False, description="Show the restored-successfully banner"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_dashboard_session),
):
    return HistoryService(db).list_history(restored=restored)


@router.post("/history/{version_id}/restore")
def restore_version(
    version_id: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_dashboard_session),
):
    """Make an archived value live again, then return to the history page."""
    HistoryService(db).rollback(version_id, restored_by=auth.user_id)
    return RedirectResponse(url=f"{DASHBOARD_PATH}/history?restored=true", status_code=303)


@router.get("/sponsors", response_model=AdminSponsorList)
def list_sponsors(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_dashboard_session),
):
    """Pending submissions first, then approved."""
    return SponsorService(db).list_for_admin()


@router.post("/sponsors/{sponsor_id}/approve", response_model=SponsorResponse)
def approve_sponsor(
    sponsor_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_admin),
):
    return SponsorService(db).approve(sponsor_id, approved_by=auth.user_id)
