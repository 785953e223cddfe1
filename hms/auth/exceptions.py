"""
Authentication-specific exceptions.

Every exception here carries a message that is safe to show to the caller;
internal details stay in the server log.
"""
from fastapi import HTTPException, status

class AuthException(HTTPException):
    """Base class for authentication exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class InvalidCredentialsException(AuthException):
    """Exception raised when credentials are invalid."""
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class UnauthenticatedException(AuthException):
    """Exception raised when a protected path is requested without a session."""
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

class ForbiddenException(AuthException):
    """Exception raised when the session role does not match the path's role."""
    def __init__(self, detail: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class EmailAlreadyExistsException(AuthException):
    """Exception raised when email already exists."""
    def __init__(self, detail: str = "Email already exists"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class InvalidRoleException(AuthException):
    """Exception raised when a registration names a role outside UserRole."""
    def __init__(self, detail: str = "Invalid role"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class ValidationFailedException(AuthException):
    """Exception raised when registration input is missing or malformed."""
    def __init__(self, detail: str = "Email and password are required"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class ViewNotFoundException(AuthException):
    """Exception raised for a role-scoped path with no registered view."""
    def __init__(self, detail: str = "Page not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class PersistenceFailureException(AuthException):
    """Exception raised when the user store rejects or cannot perform a write."""
    def __init__(self, detail: str = "Registration failed"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
