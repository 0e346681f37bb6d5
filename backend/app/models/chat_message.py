"""Chat editor message history."""

from sqlalchemy import Column, Index, Integer, String, Text, DateTime, JSON

from ..database import Base
from .content import utcnow


class ChatMessage(Base):
    """A user or assistant turn in the admin chat editor."""

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(50), nullable=False)
    # Allowed values: user, assistant
    role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    tool_calls = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
