"""Authentication service — dashboard accounts and password checks.

Passwords are hashed with bcrypt via passlib and never stored or logged in
plaintext. The first account registered becomes the admin; later accounts
are editors.
"""

import logging
import uuid
from typing import Optional

from passlib.hash import bcrypt
from sqlalchemy.orm import Session

from ..exceptions import ValidationError, AuthenticationError
from ..models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
USER_ID_LENGTH = 8


def register_user(
    db: Session,
    email: str,
    password: str,
    display_name: str,
    role: str = "editor",
) -> User:
    """Create a dashboard account.

    Raises ValidationError if the email is taken or inputs are invalid.
    """
    email = email.strip().lower()
    if not email or "@" not in email:
        raise ValidationError("Valid email address required", field="email")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password")
    if not display_name.strip():
        raise ValidationError("Display name required", field="display_name")
    if role not in ("admin", "editor"):
        raise ValidationError(f"Invalid role: {role}. Must be admin or editor.", field="role")

    existing = db.query(User).filter(User.email == email).first()
    if existing is not None:
        raise ValidationError("Email already registered", field="email")

    # FOR UPDATE so two concurrent first registrations cannot both become admin.
    is_first_user = db.query(User).with_for_update().count() == 0
    effective_role = "admin" if is_first_user else role

    user = User(
        user_id=str(uuid.uuid4())[:USER_ID_LENGTH],
        display_name=display_name.strip(),
        email=email,
        password_hash=bcrypt.hash(password),
        role=effective_role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    if is_first_user:
        logger.info("First user registered as admin: %s", email)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Validate credentials and return the user.

    Raises AuthenticationError on unknown email, wrong password, or inactive account.
    """
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if user is None or not bcrypt.verify(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    return user


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.user_id == user_id).first()
