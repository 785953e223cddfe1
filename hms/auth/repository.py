"""
Data access for User and LoginSession records.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .models import User, UserRole, LoginSession
from .exceptions import EmailAlreadyExistsException, PersistenceFailureException

logger = logging.getLogger(__name__)

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Exact, case-sensitive lookup by email."""
    return db.query(User).filter(User.email == email).first()

def admin_exists(db: Session) -> bool:
    return db.query(User).filter(User.role == UserRole.ADMIN.value).count() > 0

def add_user(db: Session, user: User) -> User:
    """
    Persist a new user in a single commit.

    Args:
        db: Database session
        user: Unsaved User instance

    Returns:
        User: The stored user with its id populated

    Raises:
        EmailAlreadyExistsException: If the unique email constraint rejects the row
        PersistenceFailureException: If the store is unreachable or rejects the write
    """
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        # Another request registered the same email after our existence check
        logger.warning(f"Unique constraint rejected user {user.email}")
        raise EmailAlreadyExistsException()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to persist user {user.email}: {str(e)}")
        raise PersistenceFailureException()
    return user

def create_login_session(db: Session, user: User, max_age_seconds: int) -> str:
    """
    Record a new login for ``user`` and return its token.

    Rows of this user older than ``max_age_seconds`` are dropped in the same
    commit; their cookies have expired anyway.

    Raises:
        PersistenceFailureException: If the store rejects the write
    """
    cutoff = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(seconds=max_age_seconds)
    token = secrets.token_urlsafe(32)
    try:
        db.query(LoginSession).filter(
            LoginSession.user_id == user.id,
            LoginSession.created_at < cutoff,
        ).delete(synchronize_session=False)
        db.add(LoginSession(token=token, user_id=user.id))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to record login for user {user.id}: {str(e)}")
        raise PersistenceFailureException("Login failed")
    return token

def login_session_exists(db: Session, token: Optional[str]) -> bool:
    if not token:
        return False
    return db.query(LoginSession).filter(LoginSession.token == token).first() is not None

def delete_login_session(db: Session, token: Optional[str]) -> None:
    """Forget a login; unknown or empty tokens are ignored."""
    if not token:
        return
    try:
        db.query(LoginSession).filter(LoginSession.token == token).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to end login session: {str(e)}")
        raise PersistenceFailureException("Logout failed")
