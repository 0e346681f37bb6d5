"""Site content API endpoints.

Public reads:
    GET /api/content/text/{key}
    GET /api/content/image/{key}
    GET /api/pages?path=/about
    GET /api/announcement
    GET /api/sections/{key}/visibility

Inline edits (auth required):
    PUT /api/admin/content/text/{key}
    PUT /api/admin/content/image/{key}
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.content import (
    AnnouncementResponse,
    ImageContent,
    InlineImageUpdate,
    InlineTextUpdate,
    PageRenderResponse,
    SaveResult,
    SectionVisibilityResponse,
    TextContentResponse,
)
from ..services.content_service import ContentService

router = APIRouter(prefix="/api", tags=["content"])
admin_router = APIRouter(prefix="/api/admin/content", tags=["content"])


@router.get("/content/text/{content_key}", response_model=TextContentResponse)
def get_text_content(content_key: str, db: Session = Depends(get_db)):
    """Live text for a key, falling back to its default."""
    return TextContentResponse(content_key=content_key, text=ContentService(db).get_text(content_key))


@router.get("/content/image/{content_key}", response_model=ImageContent)
def get_image_content(content_key: str, db: Session = Depends(get_db)):
    return ContentService(db).get_image(content_key)


@router.get("/pages", response_model=PageRenderResponse)
def render_page(
    path: str = Query("/", description="Public route, e.g. /about"),
    db: Session = Depends(get_db),
):
    """Everything a public page needs, served from the render cache when warm.

    404 for paths that are not public routes.
    """
    return ContentService(db).render_page(path)


@router.get("/announcement", response_model=Optional[AnnouncementResponse])
def get_announcement(db: Session = Depends(get_db)):
    """The active announcement bar, or null."""
    return ContentService(db).get_announcement()


@router.get("/sections/{section_key}/visibility", response_model=SectionVisibilityResponse)
def get_section_visibility(section_key: str, db: Session = Depends(get_db)):
    return SectionVisibilityResponse(
        section_key=section_key,
        is_visible=ContentService(db).get_section_visibility(section_key),
    )


@admin_router.put("/text/{content_key}", response_model=SaveResult)
def save_inline_text(
    content_key: str,
    body: InlineTextUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Save a text field directly to live content. Failures come back as ``success: false``."""
    return ContentService(db).save_inline_text(
        content_key, body.text, page=body.page, section=body.section, user_id=auth.user_id,
    )


@admin_router.put("/image/{content_key}", response_model=SaveResult)
def save_inline_image(
    content_key: str,
    body: InlineImageUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return ContentService(db).save_inline_image(
        content_key,
        body.url,
        alt=body.alt,
        position=body.position.model_dump() if body.position else None,
        page=body.page,
        section=body.section,
        user_id=auth.user_id,
    )
