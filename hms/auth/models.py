"""
User Model - Stores the identities that can sign in to the portal.

Each user carries exactly one role, which decides the dashboard they are
routed to and the role-scoped URLs they may open.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from datetime import datetime, timezone
import enum
from typing import Optional
from ..database import Base

class UserRole(str, enum.Enum):
    """
    Enumeration for user roles in the hospital management system.

    Roles:
    - ADMIN: System administrators
    - DOCTOR: Medical practitioners
    - PATIENT: Patients using the portal
    - STAFF: General hospital staff
    - PHARMACY: Pharmacy staff
    """
    ADMIN = "ADMIN"
    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"
    STAFF = "STAFF"
    PHARMACY = "PHARMACY"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["UserRole"]:
        """Case-insensitive lookup; returns None for anything outside the set."""
        if not value:
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

class User(Base):
    """
    User Model - Stores all user information in the system

    Fields:
    - id: Primary key assigned by the database
    - email: Login name, stored exactly as submitted
    - password_hash: bcrypt hash of the password (never store raw passwords)
    - full_name: Display name (optional)
    - role: Upper-cased role tag
    - created_at: Timestamp when user was created
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    # Plain string so rows with a role outside UserRole still load
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def user_role(self) -> Optional[UserRole]:
        """The stored role as a UserRole, or None if it is not a known role."""
        return UserRole.parse(self.role)

    def __repr__(self):
        return f"<User id={self.id} email={self.email!r} role={self.role}>"

def _utcnow() -> datetime:
    # Naive UTC, comparable with what SQLite hands back
    return datetime.now(timezone.utc).replace(tzinfo=None)

class LoginSession(Base):
    """
    LoginSession Model - One row per live login

    The session cookie carries ``token`` next to the role claim; a cookie
    whose token has no row here is treated as logged out, even if its
    signature is still valid.

    Fields:
    - token: Random per-login identifier stored in the session cookie
    - user_id: The logged-in user
    - created_at: When the login happened (naive UTC)
    """
    __tablename__ = "login_sessions"

    token = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
