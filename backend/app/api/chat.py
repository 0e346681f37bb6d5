"""Chat content editor endpoints (auth required).

    POST /admin/api/chat          — send the conversation, get a reply
    GET  /admin/api/chat/history  — the caller's stored messages
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.chat import ChatRequest, ChatResponse, ChatMessageResponse
from ..services.chat_service import ChatService

router = APIRouter(prefix="/admin/api/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
def chat(
    body: ChatRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Run the chat editor. Responds 503 when no model is configured."""
    return ChatService(db).chat(body.messages, user_id=auth.user_id)


@router.get("/history", response_model=List[ChatMessageResponse])
def chat_history(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return ChatService(db).get_history(auth.user_id, limit)
