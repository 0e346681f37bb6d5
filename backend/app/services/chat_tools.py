"""Tools the chat editor model may call.

Each tool's arguments are a pydantic model; the JSON schema sent to the
model is generated from it and every call is validated against it before
running. Tools only ever stage drafts, so nothing the model does reaches
the live site without an admin publishing it.
"""

import json
import logging
from typing import Callable, Literal, Optional

import pydantic
import sqlalchemy.exc
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..exceptions import SiteException
from ..schemas.draft import AnnouncementAction
from .content_catalog import CHAT_EDITABLE_TEXT_KEYS
from .content_service import ContentService
from .draft_service import DraftService

logger = logging.getLogger(__name__)

PREVIEW_URL = "/admin/dashboard/preview?draft={draft_id}"

EditableTextKey = Literal[CHAT_EDITABLE_TEXT_KEYS]


def _truncate(text: str, limit: int = 50) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


class UpdateTextContentArgs(BaseModel):
    content_key: EditableTextKey = Field(
        ...,
        description=(
            "The content field to update. Options: hero.headline (main headline), "
            "hero.subtitle (subtitle text), hero.cta_primary (primary button), "
            "hero.cta_secondary (secondary button), programs.section_title (section title)"
        ),
    )
    new_text: str = Field(..., description="The new text content to set")


class UpdateAnnouncementBarArgs(BaseModel):
    action: AnnouncementAction = Field(
        ..., description="add a new announcement, update the existing one, or remove it",
    )
    text: Optional[str] = Field(None, description="The announcement text (required for add/update)")
    link_url: Optional[str] = Field(None, description="Optional URL to link to when the announcement is clicked")
    link_text: Optional[str] = Field(
        None, description='Optional text for the link (e.g., "Learn more", "Register now")',
    )


class ToggleSectionVisibilityArgs(BaseModel):
    section_key: str = Field(
        ..., min_length=1,
        description="The section identifier (e.g., 'homepage.safety', 'flag-football.coaches')",
    )
    visible: bool = Field(..., description="Whether the section should be visible (true) or hidden (false)")


class ListEditableContentArgs(BaseModel):
    pass


class ChatTools:
    """Executes tool calls against the draft and content services."""

    def __init__(self, db: Session, user_id: Optional[str] = None):
        self.db = db
        self.user_id = user_id
        self.drafts = DraftService(db)
        self.content = ContentService(db)
        self._registry: dict[str, tuple[str, type[BaseModel], Callable[[BaseModel], dict], str]] = {
            "update_text_content": (
                "Update a text content field on the website. Use this when the user wants to "
                "change text like headlines, subtitles, or button text.",
                UpdateTextContentArgs,
                self.update_text_content,
                "Failed to prepare the change",
            ),
            "update_announcement_bar": (
                "Add, update, or remove the announcement bar at the top of the website. "
                "The announcement bar appears above the navigation on all pages.",
                UpdateAnnouncementBarArgs,
                self.update_announcement_bar,
                "Failed to prepare the announcement",
            ),
            "toggle_section_visibility": (
                "Show or hide a section on the website. Use this when the user wants to "
                "temporarily remove or restore a section.",
                ToggleSectionVisibilityArgs,
                self.toggle_section_visibility,
                "Failed to prepare visibility change",
            ),
            "list_editable_content": (
                "List all content fields that can be edited on the website. Use this when the "
                "user asks what they can change or wants to see current content values.",
                ListEditableContentArgs,
                self.list_editable_content,
                "Unable to fetch content list",
            ),
        }

    def definitions(self) -> list[dict]:
        """OpenAI-style function definitions, as accepted by litellm."""
        return [
            {
                "type": "function",
                "function": {
                    "name": name,
                    "description": description,
                    "parameters": args_model.model_json_schema(),
                },
            }
            for name, (description, args_model, _, _) in self._registry.items()
        ]

    def execute(self, name: str, raw_arguments) -> dict:
        """Run one tool call. Failures are returned as results, never raised."""
        entry = self._registry.get(name)
        if entry is None:
            return {"success": False, "message": f"Unknown tool: {name}", "error": "unknown_tool"}
        _, args_model, handler, failure_message = entry

        try:
            if isinstance(raw_arguments, str):
                raw_arguments = json.loads(raw_arguments or "{}")
            args = args_model.model_validate(raw_arguments or {})
        except (ValueError, pydantic.ValidationError) as e:
            logger.warning("Rejected arguments for tool %s: %s", name, e)
            return {"success": False, "message": f"{failure_message}: invalid arguments", "error": str(e)}

        try:
            return handler(args)
        except (SiteException, sqlalchemy.exc.SQLAlchemyError) as e:
            self.db.rollback()
            error = e.message if isinstance(e, SiteException) else str(e)
            logger.warning("Tool %s failed: %s", name, error)
            return {"success": False, "message": f"{failure_message}: {error}", "error": error}

    # ------------------------------------------------------------------
    # Tool implementations
    # ------------------------------------------------------------------

    def update_text_content(self, args: UpdateTextContentArgs) -> dict:
        current = self.content.get_text(args.content_key)
        draft = self.drafts.create_text_draft(args.content_key, args.new_text, self.user_id)
        return {
            "success": True,
            "draftId": draft.id,
            "previewUrl": PREVIEW_URL.format(draft_id=draft.id),
            "message": (
                f'I\'ve prepared to change "{args.content_key}" from "{_truncate(current)}" '
                f'to "{_truncate(args.new_text)}". Please review the preview and publish when ready.'
            ),
        }

    def update_announcement_bar(self, args: UpdateAnnouncementBarArgs) -> dict:
        if args.action != AnnouncementAction.REMOVE and not args.text:
            return {"success": False, "message": "Please provide the announcement text."}

        draft = self.drafts.create_announcement_draft(
            args.action, args.text, args.link_url, args.link_text, self.user_id,
        )
        if args.action == AnnouncementAction.REMOVE:
            summary = "remove the announcement bar"
        else:
            summary = f'{args.action.value} the announcement bar with "{_truncate(args.text)}"'
        return {
            "success": True,
            "draftId": draft.id,
            "previewUrl": PREVIEW_URL.format(draft_id=draft.id),
            "message": f"I've prepared to {summary}. Please review the preview to see how it will look.",
        }

    def toggle_section_visibility(self, args: ToggleSectionVisibilityArgs) -> dict:
        draft = self.drafts.create_visibility_draft(args.section_key, args.visible, self.user_id)
        verb = "show" if args.visible else "hide"
        return {
            "success": True,
            "draftId": draft.id,
            "previewUrl": PREVIEW_URL.format(draft_id=draft.id),
            "message": f'I\'ve prepared to {verb} the "{args.section_key}" section. Please review the preview.',
        }

    def list_editable_content(self, args: ListEditableContentArgs) -> dict:
        items = self.content.list_editable_content()
        lines = "\n".join(
            f'- **{item.content_key}**: {item.description}\n  Current: "{_truncate(item.current_value, 60)}"'
            for item in items
        )
        return {
            "success": True,
            "content": [item.model_dump() for item in items],
            "message": (
                f"Here's all the content you can edit:\n\n{lines}\n\n"
                "Just tell me which one you'd like to change and what the new text should be."
            ),
        }
