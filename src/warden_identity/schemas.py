"""Identity schemas and data structures.

These are simple data classes used for transferring identity
data between components.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from warden_identity.domain.user import User

PASSWORD_RESET_ACKNOWLEDGEMENT = "If an account exists, a reset email will be sent"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded session token payload.

    Attributes
    ----------
    user_id
        The unique identifier of the user
    email
        The user's email address
    issued_at
        When the token was signed
    expires_at
        Token expiration timestamp
    """

    user_id: UUID
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class AuthenticatedSession:
    """A user together with a freshly issued session token."""

    user: User
    access_token: str
    expires_in: int  # seconds


@dataclass(frozen=True)
class PasswordResetAcknowledgement:
    """Generic answer to a reset request; identical whether or not the email exists."""

    message: str = PASSWORD_RESET_ACKNOWLEDGEMENT
