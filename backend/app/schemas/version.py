"""Version schemas."""

from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional


class VersionResponse(BaseModel):
    """Schema for an archived content value."""
    id: int
    content_key: str
    content: dict
    changed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HistoryResponse(BaseModel):
    """Version history page payload."""
    versions: List[VersionResponse]
    content_keys: List[str]
    total: int
    restored: bool = False
