"""Sponsor schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional


def _require_http_url(v: str) -> str:
    v = v.strip()
    if not v.startswith(("http://", "https://")) or len(v) <= len("https://"):
        raise ValueError("URL must start with http:// or https://")
    return v


class SponsorCreate(BaseModel):
    """Partner submission form."""
    company_name: str = Field(..., min_length=2, description="Company name")
    contact_name: str = Field(..., min_length=2, description="Contact name")
    contact_email: EmailStr
    contact_phone: str = Field(..., min_length=10, description="Phone number (at least 10 digits)")
    website_url: str
    description: Optional[str] = Field(None, max_length=500)
    logo_url: str

    @field_validator("website_url", "logo_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _require_http_url(v)

    @field_validator("company_name", "contact_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Must be at least 2 characters")
        return v


class SponsorResponse(BaseModel):
    """Full sponsor record for the admin dashboard."""
    id: str
    company_name: str
    contact_name: str
    contact_email: str
    contact_phone: str
    website_url: str
    description: Optional[str] = None
    logo_url: str
    status: str
    created_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None

    class Config:
        from_attributes = True


class SponsorPublic(BaseModel):
    """Sponsor grid entry; contact details are not exposed."""
    id: str
    company_name: str
    website_url: str
    logo_url: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class AdminSponsorList(BaseModel):
    pending: list[SponsorResponse]
    approved: list[SponsorResponse]
