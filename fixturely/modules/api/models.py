"""
Fixturely request and response models.

These models define the structure of data accepted from and returned
to API clients.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from ..records import strip_all_spaces


# Request Models (API Input)


class SignupRequest(BaseModel):
    """Request to create an account."""

    name: str = Field(..., description="Display name", min_length=1, max_length=100)
    email: str = Field(
        ...,
        description="Account email address",
        max_length=254,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
    )
    password: str = Field(..., description="Plaintext password", min_length=6, max_length=128)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Reject names made only of whitespace."""
        if not strip_all_spaces(v):
            raise ValueError("Name must not be blank")
        return v.strip()

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        """Emails are stored lowercase without surrounding spaces."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class LoginRequest(BaseModel):
    """Request to log in with email and password."""

    email: str = Field(..., description="Account email address")
    password: str = Field(..., description="Plaintext password")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


# Response Models


class UserResponse(BaseModel):
    """Public view of a user record."""

    id: str
    name: str
    email: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserResponse":
        """Build the public view, dropping the password hash."""
        return cls(id=str(record["id"]), name=record["name"], email=record["email"])


class AuthResponse(BaseModel):
    """Token and user returned on signup and login."""

    token: str
    user: UserResponse
