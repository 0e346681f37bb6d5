"""Chat editor schemas."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, List, Optional


class ChatMessagePart(BaseModel):
    type: str
    text: Optional[str] = None


class ChatUIMessage(BaseModel):
    """Message as sent by the chat drawer (plain content or typed parts)."""
    role: str
    content: Optional[str] = None
    parts: Optional[List[ChatMessagePart]] = None


class ChatRequest(BaseModel):
    messages: List[ChatUIMessage] = Field(..., min_length=1)


class ToolResult(BaseModel):
    """Outcome of one tool call made by the model."""
    tool: str
    arguments: dict = {}
    result: dict[str, Any]


class ChatResponse(BaseModel):
    reply: str
    tool_results: List[ToolResult] = []
    model: str


class ChatMessageResponse(BaseModel):
    id: int
    role: str
    content: str
    tool_calls: Optional[list] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
