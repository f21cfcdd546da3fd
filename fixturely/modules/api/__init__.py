"""
API Module - Black Box Interface

Purpose: Request models and the uniform response envelope
Interface: success_response(), error_response(), server_error(), models
Hidden: JSON encoding of responses

The API module only shapes data - it contains no business logic.
"""

from .models import AuthResponse, LoginRequest, SignupRequest, UserResponse
from .responses import (
    GENERIC_SERVER_ERROR,
    error_response,
    method_not_allowed,
    server_error,
    success_response,
)

__all__ = [
    "AuthResponse",
    "GENERIC_SERVER_ERROR",
    "LoginRequest",
    "SignupRequest",
    "UserResponse",
    "error_response",
    "method_not_allowed",
    "server_error",
    "success_response",
]
