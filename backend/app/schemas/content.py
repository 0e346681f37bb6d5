"""Site content schemas."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Dict


class ImagePosition(BaseModel):
    """Focal point of an image, as percentages."""
    x: float
    y: float


class ImageContent(BaseModel):
    url: str
    alt: str = ""
    position: Optional[ImagePosition] = None


class SiteContentResponse(BaseModel):
    """Schema for a live content row."""
    content_key: str
    content_type: str
    content: dict
    page: Optional[str] = None
    section: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TextContentResponse(BaseModel):
    content_key: str
    text: str


class InlineTextUpdate(BaseModel):
    """Inline edit of a text field from the dashboard."""
    text: str
    page: Optional[str] = None
    section: Optional[str] = None


class InlineImageUpdate(BaseModel):
    """Inline edit of an image slot from the dashboard."""
    url: str = Field(..., min_length=1)
    alt: Optional[str] = None
    position: Optional[ImagePosition] = None
    page: Optional[str] = None
    section: Optional[str] = None


class SaveResult(BaseModel):
    """Outcome of an inline save. Failures are reported, not raised."""
    success: bool
    error: Optional[str] = None


class EditableContentItem(BaseModel):
    content_key: str
    description: str
    current_value: str
    page: str
    section: str


class AnnouncementResponse(BaseModel):
    id: int
    text: str
    link_url: Optional[str] = None
    link_text: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SectionVisibilityResponse(BaseModel):
    section_key: str
    is_visible: bool


class PageRenderResponse(BaseModel):
    """Everything a public page needs from the content store."""
    path: str
    page: str
    content: Dict[str, str]
    announcement: Optional[AnnouncementResponse] = None
    sections: Dict[str, bool] = {}
    cached: bool = False
