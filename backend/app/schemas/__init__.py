"""Pydantic schemas for API validation."""

from .content import (
    ImageContent,
    SiteContentResponse,
    SaveResult,
    PageRenderResponse,
)
from .draft import (
    DraftType,
    DraftCreate,
    DraftResponse,
    DraftPreview,
    PublishResult,
)
from .version import (
    VersionResponse,
    HistoryResponse,
)
from .sponsor import (
    SponsorCreate,
    SponsorResponse,
    SponsorPublic,
)

__all__ = [
    "ImageContent",
    "SiteContentResponse",
    "SaveResult",
    "PageRenderResponse",
    "DraftType",
    "DraftCreate",
    "DraftResponse",
    "DraftPreview",
    "PublishResult",
    "VersionResponse",
    "HistoryResponse",
    "SponsorCreate",
    "SponsorResponse",
    "SponsorPublic",
]
