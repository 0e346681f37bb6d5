"""Database models."""

from .content import SiteContent, ContentDraft, ContentVersion
from .site import AnnouncementBar, SectionVisibility
from .sponsor import Sponsor
from .webhook_event import WebhookEvent
from .chat_message import ChatMessage
from .user import User, AuditLog

__all__ = [
    "SiteContent", "ContentDraft", "ContentVersion",
    "AnnouncementBar", "SectionVisibility",
    "Sponsor", "WebhookEvent", "ChatMessage",
    "User", "AuditLog",
]
