"""
Core security utilities for password handling.
"""
import logging
from passlib.context import CryptContext

# Set up logging
logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of a secret
MAX_PASSWORD_BYTES = 72

# Password hashing context; longer secrets raise instead of being truncated
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__truncate_error=True)

def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES

def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password, at most 72 bytes as UTF-8

    Returns:
        str: Salted hash, different on every call for the same input

    Raises:
        ValueError: If the password is longer than 72 bytes
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash. A hash that passlib cannot
        identify counts as a mismatch, and so does a password longer than
        72 bytes, which no stored hash can have come from.
    """
    if not hashed_password or password_too_long(plain_password):
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash has an unrecognized format")
        return False
