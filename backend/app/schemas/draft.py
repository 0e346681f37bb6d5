"""Draft schemas."""

from enum import Enum
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class DraftType(str, Enum):
    """Every kind of change the publisher knows how to apply.

    Adding a member requires a matching branch in DraftService.publish,
    which raises UnknownDraftTypeError for anything unhandled.
    """
    TEXT = "text"
    IMAGE = "image"
    ANNOUNCEMENT = "announcement"
    VISIBILITY = "visibility"


class AnnouncementAction(str, Enum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


ANNOUNCEMENT_CONTENT_KEY = "announcement_bar"


class DraftCreate(BaseModel):
    """Schema for staging a change."""
    content_key: str = Field(..., min_length=1, max_length=255)
    draft_type: DraftType
    content: dict

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "content_key": "hero.headline",
                    "draft_type": "text",
                    "content": {"text": "Registration Open"},
                }
            ]
        }
    }


class DraftResponse(BaseModel):
    id: str
    content_key: str
    draft_type: str
    content: dict
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DraftPreview(BaseModel):
    """Current vs. proposed value for the review page.

    ``iframe_url`` points at the live public route; it shows the published
    page, not the draft.
    """
    draft: DraftResponse
    change_description: str
    current_value: Optional[str] = None
    new_value: Optional[str] = None
    action: Optional[str] = None
    preview_path: str
    iframe_url: str


class PublishResult(BaseModel):
    draft_id: str
    draft_type: str
    content_key: str
    revalidated: list[str]
