"""API routes."""

from .content import router as content_router, admin_router as content_admin_router
from .drafts import router as drafts_router
from .dashboard import router as dashboard_router
from .sponsors import router as sponsors_router
from .webhooks import router as webhooks_router
from .chat import router as chat_router
from .auth_routes import router as auth_router

__all__ = [
    "content_router",
    "content_admin_router",
    "drafts_router",
    "dashboard_router",
    "sponsors_router",
    "webhooks_router",
    "chat_router",
    "auth_router",
]
