"""Authentication module — deep module exposing FastAPI dependencies.

Public interface:
    ``require_auth``              — AuthContext or 401, for JSON APIs.
    ``optional_auth``             — AuthContext or None, never raises.
    ``require_admin``             — AuthContext, 403 unless the user is an admin.
    ``require_dashboard_session`` — AuthContext, or a redirect to the login
                                    page for dashboard pages.

Tokens are read from ``Authorization: Bearer`` first, then from the session
cookie set at login. When ``settings.auth_enabled`` is False every
dependency returns an anonymous admin so local development needs no login.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import settings
from .token_factory import TokenPayload, decode_token
from ..database import get_db
from ..exceptions import AuthenticationError, ForbiddenError, LoginRequiredError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)

LOGIN_PATH = "/admin/login"


@dataclass(frozen=True)
class AuthContext:
    """Identity and role of the caller."""

    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


_ANONYMOUS = AuthContext(user_id="anonymous", role="admin")


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name) or None


def _resolve(request: Request, credentials, db: Session) -> Optional[AuthContext]:
    """AuthContext for a valid token, None when no usable token is present."""
    token = _extract_token(request, credentials)
    if token is None:
        return None
    payload = decode_token(token, settings.jwt_secret_key, settings.jwt_algorithm)
    if payload is None:
        return None
    return _load_auth_context(payload, db)


def require_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Require a valid session token. Raises 401 otherwise."""
    if not settings.auth_enabled:
        return _ANONYMOUS

    auth = _resolve(request, credentials, db)
    if auth is None:
        raise AuthenticationError("Invalid or missing authentication token")
    return auth


def optional_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[AuthContext]:
    """AuthContext when a valid token is present, else None. Never raises."""
    if not settings.auth_enabled:
        return _ANONYMOUS
    try:
        return _resolve(request, credentials, db)
    except AuthenticationError:
        return None


def require_admin(
    auth: AuthContext = Depends(require_auth),
) -> AuthContext:
    """Require the authenticated user to be an admin. Raises 403 otherwise."""
    if not auth.is_admin:
        raise ForbiddenError("Admin access required")
    return auth


def require_dashboard_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Like require_auth, but unauthenticated visitors are sent to the login page."""
    if not settings.auth_enabled:
        return _ANONYMOUS

    try:
        auth = _resolve(request, credentials, db)
    except AuthenticationError:
        auth = None
    if auth is None:
        raise LoginRequiredError(LOGIN_PATH)
    return auth


def _load_auth_context(payload: TokenPayload, db: Session) -> AuthContext:
    from ..models.user import User

    user = db.query(User).filter(User.user_id == payload.sub).first()
    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    return AuthContext(user_id=user.user_id, role=user.role)
