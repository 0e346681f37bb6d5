"""Chat content editor — natural-language edits through tool calls.

The model is called via LiteLLM with the tools from ``chat_tools``. Each
tool call is executed and its result fed back until the model answers in
plain text or the round limit is reached. Tools only create drafts; the
admin still reviews and publishes.
"""

import json
import logging
from typing import Optional

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import ChatNotConfiguredError
from ..models import ChatMessage
from ..repositories import ChatMessageRepository
from ..schemas.chat import ChatUIMessage, ChatResponse, ToolResult
from .chat_tools import ChatTools

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful assistant for the RiseUp Youth Football League website.
You help administrators update website content using natural language commands.

## What You Can Do
- Update text content (headlines, descriptions, button text)
- Manage the announcement bar (add, update, or remove)
- Toggle section visibility (show or hide sections)
- List all editable content

## Available Content Keys
| Key | Description | Location |
|-----|-------------|----------|
| hero.headline | Main headline on homepage | Homepage hero section |
| hero.subtitle | Subtitle text below headline | Homepage hero section |
| hero.cta_primary | Primary button text (e.g., "Register Now") | Homepage hero section |
| hero.cta_secondary | Secondary button text (e.g., "Learn More") | Homepage hero section |
| programs.section_title | Title of the programs grid | Homepage programs section |

## How You Work
1. When asked to make a change, use the appropriate tool to create a draft
2. The tool creates a preview for the admin to review
3. Tell the admin to check the preview page
4. They can publish or cancel from the preview

## Guidelines
- Be conversational and friendly
- If a request is ambiguous, ask clarifying questions with numbered options
- If asked to do something outside your capabilities, politely explain what you can do instead
- After a change is prepared, remind them to review and publish from the preview
- Keep responses concise but helpful"""

FALLBACK_REPLY = "I've prepared the requested changes. Please review them in the preview."
ERROR_REPLY = "Unable to reach the AI service right now. Please try again later."


def to_model_messages(messages: list[ChatUIMessage]) -> list[dict]:
    """Flatten UI messages into role/content pairs, dropping empty ones.

    A text part, when present, takes precedence over ``content``.
    """
    result: list[dict] = []
    for msg in messages:
        content = msg.content or ""
        for part in msg.parts or []:
            if part.type == "text" and part.text:
                content = part.text
                break
        if not content.strip():
            continue
        if msg.role not in ("user", "assistant"):
            continue
        result.append({"role": msg.role, "content": content})
    return result


def _tool_call_dict(call) -> dict:
    return {
        "id": call.id,
        "type": "function",
        "function": {"name": call.function.name, "arguments": call.function.arguments or "{}"},
    }


class ChatService:
    """Runs the tool-calling loop and keeps per-user chat history."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ChatMessageRepository(db)

    @staticmethod
    def is_configured() -> bool:
        return bool(settings.chat_model and settings.chat_api_key)

    def chat(self, messages: list[ChatUIMessage], user_id: str) -> ChatResponse:
        """Answer the latest message, executing any tool calls the model makes.

        Raises ChatNotConfiguredError when no model is set.
        """
        if not self.is_configured():
            raise ChatNotConfiguredError()

        model_messages = to_model_messages(messages)
        tools = ChatTools(self.db, user_id=user_id)
        tool_results: list[ToolResult] = []
        conversation: list[dict] = [{"role": "system", "content": SYSTEM_PROMPT}, *model_messages]
        reply = ""

        import litellm

        for _ in range(settings.chat_max_tool_rounds):
            chat_kwargs: dict = {
                "model": settings.chat_model,
                "api_key": settings.chat_api_key,
                "messages": conversation,
                "tools": tools.definitions(),
                "max_tokens": 1024,
                "temperature": 0.3,
                "timeout": 30,
            }
            if settings.chat_api_base:
                chat_kwargs["api_base"] = settings.chat_api_base

            try:
                response = litellm.completion(**chat_kwargs)
            except Exception:
                logger.exception("Chat completion failed")
                reply = ERROR_REPLY
                break

            message = response.choices[0].message
            calls = getattr(message, "tool_calls", None) or []
            if not calls:
                reply = message.content or ""
                break

            conversation.append({
                "role": "assistant",
                "content": message.content or "",
                "tool_calls": [_tool_call_dict(c) for c in calls],
            })
            for call in calls:
                result = tools.execute(call.function.name, call.function.arguments)
                try:
                    arguments = json.loads(call.function.arguments or "{}")
                except ValueError:
                    arguments = {}
                tool_results.append(ToolResult(
                    tool=call.function.name,
                    arguments=arguments if isinstance(arguments, dict) else {},
                    result=result,
                ))
                conversation.append({
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": json.dumps(result, default=str),
                })
        else:
            logger.warning("Chat tool loop hit the %d round limit", settings.chat_max_tool_rounds)

        if not reply and tool_results:
            reply = FALLBACK_REPLY

        self._save_turn(user_id, model_messages, reply, tool_results)
        return ChatResponse(reply=reply, tool_results=tool_results, model=settings.chat_model)

    def get_history(self, user_id: str, limit: int = 50) -> list[ChatMessage]:
        return self.repo.get_history(user_id, limit)

    def _save_turn(
        self,
        user_id: str,
        model_messages: list[dict],
        reply: str,
        tool_results: list[ToolResult],
    ) -> None:
        """Persist the latest user message and the reply. Never raises."""
        latest_user: Optional[str] = next(
            (m["content"] for m in reversed(model_messages) if m["role"] == "user"), None,
        )
        try:
            if latest_user:
                self.repo.create(user_id, "user", latest_user)
            if reply:
                self.repo.create(
                    user_id, "assistant", reply,
                    tool_calls=[r.model_dump() for r in tool_results] or None,
                )
            self.db.commit()
        except sqlalchemy.exc.SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Failed to save chat message: %s", e)
