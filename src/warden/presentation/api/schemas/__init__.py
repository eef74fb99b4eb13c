"""Pydantic schemas for API request/response models."""

from warden.presentation.api.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
)
from warden.presentation.api.schemas.common import (
    Envelope,
    ErrorEnvelope,
    MessageResponse,
)
from warden.presentation.api.schemas.users import UpdateProfileRequest

__all__ = [
    "AuthResponse",
    "Envelope",
    "ErrorEnvelope",
    "ForgotPasswordRequest",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "ResetPasswordRequest",
    "UpdateProfileRequest",
    "UserResponse",
]
