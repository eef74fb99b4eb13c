"""Authentication schemas for request/response models."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from warden_identity import User

# Names are trimmed; passwords are taken verbatim
PersonName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=2, max_length=50),
]


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (8-128 characters)",
    )
    first_name: PersonName
    last_name: PersonName

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123",
                "first_name": "Ada",
                "last_name": "Lovelace",
            },
        },
    )


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123",
            },
        },
    )


class ForgotPasswordRequest(BaseModel):
    """Request schema for requesting a password reset email."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request schema for resetting a password; the token is in the path."""

    password: str = Field(..., min_length=8, max_length=128)


class UserResponse(BaseModel):
    """Response schema for user data. Never carries credential fields."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    profile_picture: str | None = None
    is_email_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_picture=user.profile_picture,
            is_email_verified=user.is_email_verified,
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    """Response schema for authentication (register/login/verify)."""

    user: UserResponse
    access_token: str
    token_type: str = Field(default="bearer")
    expires_in: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user": {
                    "id": "550e8400-e29b-41d4-a716-446655440000",
                    "email": "user@example.com",
                    "first_name": "Ada",
                    "last_name": "Lovelace",
                    "profile_picture": None,
                    "is_email_verified": False,
                    "created_at": "2024-12-05T10:30:00Z",
                },
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "expires_in": 86400,
            },
        },
    )
