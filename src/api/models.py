"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, StrictStr


class CredentialsRequest(BaseModel):
    """
    Request body shared by sign-up and sign-in.

    Fields must be JSON strings. Missing fields default to empty and are
    then rejected by the domain format policy with its usual message.
    Length rules live in the domain, not here, so one policy applies
    to every caller.
    """

    username: StrictStr = ""
    password: StrictStr = ""


class SignupResponse(BaseModel):
    """Response model for successful registration."""

    ok: bool = True


class SigninResponse(BaseModel):
    """Response model for successful authentication."""

    ok: bool = True
    username: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str
