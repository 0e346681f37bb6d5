"""Sponsor model."""

from sqlalchemy import Column, Index, String, Text, DateTime

from ..database import Base
from .content import utcnow

SPONSOR_PENDING = "pending"
SPONSOR_APPROVED = "approved"


class Sponsor(Base):
    """Partner submission shown in the public sponsor grid once approved.

    Status transitions: pending -> approved (one way, admin action).
    """

    __tablename__ = "sponsors"
    __table_args__ = (
        Index("ix_sponsors_status_created", "status", "created_at"),
    )

    id = Column(String(36), primary_key=True)
    company_name = Column(String(255), nullable=False)
    contact_name = Column(String(255), nullable=False)
    contact_email = Column(String(255), nullable=False)
    contact_phone = Column(String(50), nullable=False)
    website_url = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=SPONSOR_PENDING)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    approved_by = Column(String(50), nullable=True)
