"""Business logic services."""

from .content_service import ContentService
from .draft_service import DraftService
from .history_service import HistoryService
from .sponsor_service import SponsorService
from .webhook_service import WebhookService
from .chat_service import ChatService

__all__ = [
    "ContentService",
    "DraftService",
    "HistoryService",
    "SponsorService",
    "WebhookService",
    "ChatService",
]
