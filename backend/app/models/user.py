"""User and AuditLog models.

Admins authenticate with email/password and receive JWT session tokens.
AuditLog records every publish, rollback, inline edit, and approval.
"""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, Text
from sqlalchemy.sql import func
from ..database import Base


class User(Base):
    """Dashboard account.

    Roles:
        admin  — full access including user registration
        editor — can edit, publish, and approve
    """

    __tablename__ = "users"

    user_id = Column(String(50), primary_key=True)
    display_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(String(20), nullable=False, default="editor")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class AuditLog(Base):
    """Immutable record of state-changing operations.

    Written by the service layer, never modified by the application.
    Fields:
        action        — publish, cancel, rollback, inline_edit, approve, login
        resource_type — draft, content, sponsor, user
        resource_id   — ID of the affected resource
        details       — JSON string with additional context
    """

    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(50), nullable=True)
    action = Column(String(50), nullable=False)
    resource_type = Column(String(50), nullable=False)
    resource_id = Column(String(255), nullable=True)
    details = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
