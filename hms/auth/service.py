"""
Authentication service layer for business logic.
"""
import logging
from sqlalchemy.orm import Session
from typing import Optional

from ..core.security import hash_password, verify_password, password_too_long, MAX_PASSWORD_BYTES
from .models import User, UserRole
from .repository import get_user_by_email, add_user
from .exceptions import (
    InvalidCredentialsException,
    EmailAlreadyExistsException,
    InvalidRoleException,
    ValidationFailedException,
)

# Set up logging
logger = logging.getLogger(__name__)

async def register_user(
    db: Session,
    email: Optional[str],
    password: Optional[str],
    role: Optional[str],
    full_name: Optional[str] = None,
) -> User:
    """
    Register a new user with the given role.

    Args:
        db: Database session
        email: User's email address, stored exactly as given
        password: User's plain text password
        role: Role name, any case
        full_name: User's display name (optional)

    Returns:
        User: The newly stored user

    Raises:
        ValidationFailedException: If email or password is empty, or the
            password is longer than 72 bytes as UTF-8
        InvalidRoleException: If role is not one of the known roles
        EmailAlreadyExistsException: If email already exists
        PersistenceFailureException: If the write fails
    """
    if not email or not password:
        raise ValidationFailedException()
    if password_too_long(password):
        logger.warning(f"Registration rejected: password over {MAX_PASSWORD_BYTES} bytes for {email}")
        raise ValidationFailedException(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    user_role = UserRole.parse(role)
    if user_role is None:
        logger.warning(f"Registration rejected: unknown role {role!r} for {email}")
        raise InvalidRoleException()

    logger.info(f"Registration attempt for email: {email} as {user_role.value}")

    # Check if email already exists
    if get_user_by_email(db, email) is not None:
        logger.warning(f"Registration failed: Email {email} already registered")
        raise EmailAlreadyExistsException()

    user_obj = User(
        email=email,
        full_name=full_name or None,
        password_hash=hash_password(password),
        role=user_role.value,
    )
    add_user(db, user_obj)
    logger.info(f"User account created: {user_obj.id} ({user_role.value})")
    return user_obj

async def authenticate_user(db: Session, email: Optional[str], password: Optional[str]) -> User:
    """
    Check an email/password pair against the stored hash.

    Args:
        db: Database session
        email: Submitted email
        password: Submitted plain text password

    Returns:
        User: The matching user

    Raises:
        InvalidCredentialsException: Unknown email or wrong password, indistinguishably
    """
    user = get_user_by_email(db, email) if email else None

    if not user or not verify_password(password or "", user.password_hash):
        logger.warning(f"Login failed: Invalid credentials for {email}")
        raise InvalidCredentialsException()

    logger.info(f"Login successful: User {user.id} ({email})")
    return user
