"""Data access repositories."""

from .base import BaseRepository
from .content_repository import ContentRepository
from .draft_repository import DraftRepository
from .version_repository import VersionRepository
from .site_repository import AnnouncementRepository, VisibilityRepository
from .sponsor_repository import SponsorRepository
from .webhook_event_repository import WebhookEventRepository
from .chat_message_repository import ChatMessageRepository

__all__ = [
    "BaseRepository",
    "ContentRepository",
    "DraftRepository",
    "VersionRepository",
    "AnnouncementRepository",
    "VisibilityRepository",
    "SponsorRepository",
    "WebhookEventRepository",
    "ChatMessageRepository",
]
