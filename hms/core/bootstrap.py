"""
Bootstrap utilities for first admin creation.
Creates the first admin user from settings when the system has none.
"""
import logging
from sqlalchemy.orm import Session

from ..auth.models import User, UserRole
from ..auth.repository import admin_exists, get_user_by_email, add_user
from ..auth.exceptions import AuthException
from ..config import settings
from .security import hash_password, password_too_long, MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)

def create_bootstrap_admin(db: Session) -> bool:
    """
    Create the first admin user from settings.

    Args:
        db: Database session

    Returns:
        bool: True if admin was created successfully, False otherwise
    """
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.warning("Bootstrap admin credentials not provided in environment variables")
        return False

    if password_too_long(settings.bootstrap_admin_password):
        logger.error(f"❌ BOOTSTRAP_ADMIN_PASSWORD is longer than {MAX_PASSWORD_BYTES} bytes")
        return False

    # Check if email already exists (safety check)
    if get_user_by_email(db, settings.bootstrap_admin_email) is not None:
        logger.warning(f"Bootstrap failed: Email {settings.bootstrap_admin_email} already exists")
        return False

    bootstrap_admin = User(
        email=settings.bootstrap_admin_email,
        full_name=settings.bootstrap_admin_name,
        password_hash=hash_password(settings.bootstrap_admin_password),
        role=UserRole.ADMIN.value,
    )

    try:
        add_user(db, bootstrap_admin)
    except AuthException as e:
        logger.error(f"❌ Failed to create bootstrap admin: {e.detail}")
        return False

    logger.info(f"✅ Bootstrap admin created successfully: {bootstrap_admin.email} (ID: {bootstrap_admin.id})")
    return True

def bootstrap_admin_if_needed(db: Session) -> None:
    """
    Check if admin exists and create bootstrap admin if needed.
    This function should be called during application startup.

    Args:
        db: Database session
    """
    logger.info("🔍 Checking for existing admin users...")

    if admin_exists(db):
        logger.info("✅ Admin users found. Bootstrap not needed.")
        return

    if create_bootstrap_admin(db):
        logger.info("🎉 Bootstrap admin creation completed successfully!")
    else:
        logger.info("💡 To create the first admin, set BOOTSTRAP_ADMIN_EMAIL and BOOTSTRAP_ADMIN_PASSWORD in your .env file.")
