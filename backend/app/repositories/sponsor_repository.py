"""Sponsor repository for database operations."""

import uuid
from typing import List

from sqlalchemy import case

from ..models import Sponsor
from ..models.sponsor import SPONSOR_APPROVED, SPONSOR_PENDING
from ..exceptions import SponsorNotFoundError
from .base import BaseRepository


class SponsorRepository(BaseRepository[Sponsor]):
    """Repository for sponsor submissions."""

    model_class = Sponsor
    not_found_error = SponsorNotFoundError

    def create(self, **fields) -> Sponsor:
        sponsor = Sponsor(id=str(uuid.uuid4()), status=SPONSOR_PENDING, **fields)
        self.db.add(sponsor)
        self.db.flush()
        return sponsor

    def list_for_admin(self) -> List[Sponsor]:
        """Pending first, then approved; newest first within each group."""
        pending_first = case((Sponsor.status == SPONSOR_PENDING, 0), else_=1)
        return (
            self.db.query(Sponsor)
            .order_by(pending_first, Sponsor.created_at.desc())
            .all()
        )

    def list_approved(self) -> List[Sponsor]:
        """Public sponsor grid query."""
        return (
            self.db.query(Sponsor)
            .filter(Sponsor.status == SPONSOR_APPROVED)
            .order_by(Sponsor.approved_at.asc())
            .all()
        )
