"""Custom exception hierarchy for the RiseUp site API."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Content errors
    DRAFT_NOT_FOUND = "DRAFT_NOT_FOUND"
    UNKNOWN_DRAFT_TYPE = "UNKNOWN_DRAFT_TYPE"
    VERSION_NOT_FOUND = "VERSION_NOT_FOUND"
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"

    # Sponsor errors
    SPONSOR_NOT_FOUND = "SPONSOR_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"

    # Webhook errors
    WEBHOOK_VALIDATION_FAILED = "WEBHOOK_VALIDATION_FAILED"

    # Auth
    UNAUTHORIZED = "UNAUTHORIZED"
    LOGIN_REQUIRED = "LOGIN_REQUIRED"
    FORBIDDEN = "FORBIDDEN"
    RATE_LIMITED = "RATE_LIMITED"

    # Upstream services
    CHAT_NOT_CONFIGURED = "CHAT_NOT_CONFIGURED"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class SiteException(Exception):
    """
    Base exception for all site API errors.

    Provides structured error responses with:
    - Human-readable message
    - Machine-readable error code
    - HTTP status code
    - Optional additional details
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class DraftNotFoundError(SiteException):
    """Draft not found in database."""

    def __init__(self, draft_id: str):
        super().__init__(
            f"Draft not found: {draft_id}",
            ErrorCode.DRAFT_NOT_FOUND,
            status_code=404,
            details={"draft_id": draft_id}
        )


class UnknownDraftTypeError(SiteException):
    """Draft type is not one the publisher knows how to apply."""

    def __init__(self, draft_type: str):
        super().__init__(
            f"Unknown draft type: {draft_type}",
            ErrorCode.UNKNOWN_DRAFT_TYPE,
            status_code=400,
            details={"draft_type": draft_type}
        )


class VersionNotFoundError(SiteException):
    """Version not found in database."""

    def __init__(self, version_id: str):
        super().__init__(
            f"Version not found: {version_id}",
            ErrorCode.VERSION_NOT_FOUND,
            status_code=404,
            details={"version_id": version_id}
        )


class PageNotFoundError(SiteException):
    """Path is not one of the public routes backed by editable content."""

    def __init__(self, path: str):
        super().__init__(
            f"No public page at: {path}",
            ErrorCode.PAGE_NOT_FOUND,
            status_code=404,
            details={"path": path}
        )


class SponsorNotFoundError(SiteException):
    """Sponsor not found in database."""

    def __init__(self, sponsor_id: str):
        super().__init__(
            f"Sponsor not found: {sponsor_id}",
            ErrorCode.SPONSOR_NOT_FOUND,
            status_code=404,
            details={"sponsor_id": sponsor_id}
        )


class ValidationError(SiteException):
    """Validation failed for user input."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class WebhookValidationError(SiteException):
    """Webhook signature missing or invalid."""

    def __init__(self, message: str = "Invalid webhook signature"):
        super().__init__(
            message,
            ErrorCode.WEBHOOK_VALIDATION_FAILED,
            status_code=400,
        )


class AuthenticationError(SiteException):
    """Request lacks valid authentication credentials."""

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
        )


class LoginRequiredError(SiteException):
    """Dashboard page requested without a session. Rendered as a redirect."""

    def __init__(self, login_path: str = "/admin/login"):
        super().__init__(
            "Login required",
            ErrorCode.LOGIN_REQUIRED,
            status_code=303,
            details={"location": login_path}
        )
        self.location = login_path


class ForbiddenError(SiteException):
    """Authenticated user lacks permission for the requested action."""

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(
            message,
            ErrorCode.FORBIDDEN,
            status_code=403,
        )


class ChatNotConfiguredError(SiteException):
    """Chat editor called while no model is configured."""

    def __init__(self):
        super().__init__(
            "AI service not configured. Set CHAT_MODEL and CHAT_API_KEY to enable the chat editor.",
            ErrorCode.CHAT_NOT_CONFIGURED,
            status_code=503,
        )


class DatabaseError(SiteException):
    """Database operation failed."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message,
            ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=details
        )
