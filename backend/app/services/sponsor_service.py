"""Sponsor submissions and approval."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Sponsor
from ..models.sponsor import SPONSOR_APPROVED, SPONSOR_PENDING
from ..repositories import SponsorRepository
from ..schemas.sponsor import SponsorCreate, AdminSponsorList, SponsorResponse
from . import audit_service
from .audit_service import AuditAction, ResourceType

logger = logging.getLogger(__name__)


class SponsorService:
    """Pending submissions become public only after an admin approves them."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SponsorRepository(db)

    def submit(self, data: SponsorCreate) -> Sponsor:
        sponsor = self.repo.create(
            company_name=data.company_name,
            contact_name=data.contact_name,
            contact_email=str(data.contact_email),
            contact_phone=data.contact_phone.strip(),
            website_url=data.website_url,
            description=data.description or None,
            logo_url=data.logo_url,
        )
        self.db.commit()
        self.db.refresh(sponsor)
        logger.info("Sponsor submitted", extra={"sponsor_id": sponsor.id})
        return sponsor

    def approve(self, sponsor_id: str, approved_by: Optional[str] = None) -> Sponsor:
        """Move a sponsor to approved. Approving twice keeps the first timestamp.

        Raises SponsorNotFoundError if missing.
        """
        sponsor = self.repo.get_by_id(sponsor_id)
        if sponsor.status == SPONSOR_APPROVED:
            return sponsor

        now = datetime.now(timezone.utc)
        sponsor.status = SPONSOR_APPROVED
        sponsor.approved_at = now
        sponsor.approved_by = approved_by
        sponsor.updated_at = now
        self.db.commit()
        self.db.refresh(sponsor)

        audit_service.log(
            self.db, user_id=approved_by, action=AuditAction.APPROVE,
            resource_type=ResourceType.SPONSOR, resource_id=sponsor_id,
        )
        logger.info("Sponsor approved", extra={"sponsor_id": sponsor_id})
        return sponsor

    def list_for_admin(self) -> AdminSponsorList:
        sponsors = self.repo.list_for_admin()
        return AdminSponsorList(
            pending=[SponsorResponse.model_validate(s) for s in sponsors if s.status == SPONSOR_PENDING],
            approved=[SponsorResponse.model_validate(s) for s in sponsors if s.status == SPONSOR_APPROVED],
        )

    def list_approved(self) -> List[Sponsor]:
        return self.repo.list_approved()
