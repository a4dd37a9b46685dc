"""
Pydantic schemas for the registration and login endpoints.

Both fields are optional at the schema level on purpose: a missing or empty
field is a 400 "Email and password are required." raised by the service,
not a generic body validation error. No format or strength rules are applied.
"""

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Request body for POST /register and POST /login."""
    email: str | None = None
    password: str | None = None


class MessageResponse(BaseModel):
    """Response body carrying only a human-readable message."""
    message: str


class RegisterResponse(BaseModel):
    """Response body for a successful registration."""
    message: str
    user_id: int = Field(serialization_alias="userId")
