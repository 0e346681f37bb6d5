"""Authentication API endpoints.

    POST /api/auth/register  — create an account (open for the first user, admin-only after)
    POST /api/auth/login     — authenticate; sets the session cookie and returns the token
    POST /api/auth/logout    — clear the session cookie
    GET  /api/auth/me        — current user
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, optional_auth, require_auth
from ..core.config import settings
from ..core.token_factory import create_token
from ..database import get_db
from ..exceptions import AuthenticationError, ForbiddenError
from ..models.user import User
from ..services import audit_service, auth_service
from ..services.audit_service import AuditAction, ResourceType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


# --- Request/Response schemas ---


class RegisterRequest(BaseModel):
    email: str = Field(..., description="Email address")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    display_name: str = Field(..., description="Display name")
    role: str = Field("editor", description="admin or editor (ignored for the first account)")

    model_config = {
        "json_schema_extra": {
            "examples": [{"email": "coach@riseup.org", "password": "securepass", "display_name": "Coach D"}]
        }
    }


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    user_id: str
    display_name: str
    email: str
    role: str
    is_active: bool

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


# --- Endpoints ---


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=201,
    summary="Register a dashboard account",
    description="The first registration is open and creates the admin. After that, admin auth is required.",
)
def register_user(
    body: RegisterRequest,
    db: Session = Depends(get_db),
    auth: Optional[AuthContext] = Depends(optional_auth),
):
    if db.query(User).count() > 0 and (auth is None or not auth.is_admin):
        raise ForbiddenError("Only admins can register new users")

    return auth_service.register_user(
        db, body.email, body.password, body.display_name, role=body.role,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Authenticate and start a dashboard session",
)
def login(body: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, body.email, body.password)
    token = create_token(
        subject=user.user_id,
        role=user.role,
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_hours=settings.session_expires_hours,
    )
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expires_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.environment.value == "production",
    )
    audit_service.log(
        db, user_id=user.user_id, action=AuditAction.LOGIN, resource_type=ResourceType.USER,
        resource_id=user.user_id, ip_address=request.client.host if request.client else None,
    )
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/logout", status_code=204, summary="End the dashboard session")
def logout():
    response = Response(status_code=204)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/me", response_model=UserResponse, summary="Get current user")
def get_me(auth: AuthContext = Depends(require_auth), db: Session = Depends(get_db)):
    user = auth_service.get_user_by_id(db, auth.user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user
