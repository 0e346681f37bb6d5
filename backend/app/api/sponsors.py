"""Public sponsor endpoints: the approved grid and the partner form."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.sponsor import SponsorCreate, SponsorPublic, SponsorResponse
from ..services.sponsor_service import SponsorService

router = APIRouter(prefix="/api/sponsors", tags=["sponsors"])


@router.get("", response_model=List[SponsorPublic])
def list_approved_sponsors(db: Session = Depends(get_db)):
    return SponsorService(db).list_approved()


@router.post("", response_model=SponsorResponse, status_code=201)
def submit_sponsor(body: SponsorCreate, db: Session = Depends(get_db)):
    """Submit a partner application. It stays hidden until an admin approves it."""
    return SponsorService(db).submit(body)
