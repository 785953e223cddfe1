"""
User Schemas - Pydantic models for registration input and API responses.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class RegistrationRequest(BaseModel):
    """
    Registration Schema - Parameters accepted by both registration surfaces

    Fields:
    - email: Login name, kept exactly as submitted
    - password: Plain text password (hashed before storage)
    - role: Role name in any case
    - full_name: Display name, submitted as ``name`` by the registration forms
    """
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    full_name: Optional[str] = Field(None, alias="name")

class AuthResult(BaseModel):
    """
    Result body returned by the JSON endpoints.

    Fields:
    - success: Whether the operation succeeded
    - message: Human-readable outcome
    """
    success: bool
    message: str
