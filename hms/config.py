"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string (PostgreSQL in production)
        secret_key: Secret key used to sign the session cookie
        session_cookie: Name of the session cookie
        session_max_age: Session lifetime in seconds
        session_https_only: Whether the session cookie is marked Secure

        # CORS settings
        cors_origins: Origins allowed to call the JSON API

        # Bootstrap admin settings (optional)
        bootstrap_admin_email: Optional admin email for first admin creation
        bootstrap_admin_password: Optional admin password for first admin creation
        bootstrap_admin_name: Display name for the bootstrap admin
    """
    # Database settings
    database_url: str = "sqlite:///./hms.db"

    # Session settings
    secret_key: str
    session_cookie: str = "HMS_SESSION"
    session_max_age: int = 1800
    session_https_only: bool = False

    # CORS settings
    cors_origins: List[str] = ["http://localhost:3000"]

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "System Administrator"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

    @field_validator("database_url")
    @classmethod
    def normalize_postgres_scheme(cls, value: str) -> str:
        # SQLAlchemy only accepts the postgresql:// scheme
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value

# Create settings instance
settings = Settings()
