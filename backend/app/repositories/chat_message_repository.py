"""Chat message repository."""

from typing import List, Optional

from ..models import ChatMessage
from .base import BaseRepository


class ChatMessageRepository(BaseRepository[ChatMessage]):
    model_class = ChatMessage

    def create(
        self,
        user_id: str,
        role: str,
        content: str,
        tool_calls: Optional[list] = None,
    ) -> ChatMessage:
        message = ChatMessage(
            user_id=user_id,
            role=role,
            content=content,
            tool_calls=tool_calls or None,
        )
        self.db.add(message)
        self.db.flush()
        return message

    def get_history(self, user_id: str, limit: int = 50) -> List[ChatMessage]:
        """The newest ``limit`` messages for a user, oldest first."""
        rows = (
            self.db.query(ChatMessage)
            .filter(ChatMessage.user_id == user_id)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(rows))
