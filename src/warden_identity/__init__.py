"""Warden Identity - credential and token lifecycle management.

This package handles all identity-related concerns:
- User credential records (password hash, verification, reset, OAuth link)
- Registration, email verification and login
- Password reset with single-use hashed tokens
- OAuth sign-in (upsert by provider subject)
- Session tokens (signed JWTs)
- Outbound notifications (verification and reset emails)
"""

from warden_identity.application import (
    CredentialLifecycleService,
    Failure,
    NotificationError,
    NotificationGateway,
    NotificationKind,
    Result,
    Success,
    unwrap,
)
from warden_identity.domain.user import (
    DuplicateKeyError,
    Email,
    InvalidEmailError,
    OAuthProfile,
    StaleRecordError,
    StoreError,
    User,
    UserRepository,
)
from warden_identity.exceptions import (
    ConcurrentModificationError,
    DuplicateIdentityError,
    EmailNotVerifiedError,
    ErrorKind,
    IdentityError,
    InvalidCredentialsError,
    InvalidEmailAddressError,
    InvalidResetTokenError,
    InvalidTokenError,
    MissingEmailError,
    NotificationFailureError,
    StoreFailureError,
    UserNotFoundError,
    WeakPasswordError,
)
from warden_identity.schemas import (
    AuthenticatedSession,
    PasswordResetAcknowledgement,
    TokenPayload,
)
from warden_identity.services import (
    JWTService,
    OpaqueTokenService,
    PasswordHashingService,
)

__all__ = [
    # Domain - User
    "DuplicateKeyError",
    "Email",
    "InvalidEmailError",
    "OAuthProfile",
    "StaleRecordError",
    "StoreError",
    "User",
    "UserRepository",
    # Exceptions
    "ConcurrentModificationError",
    "DuplicateIdentityError",
    "EmailNotVerifiedError",
    "ErrorKind",
    "IdentityError",
    "InvalidCredentialsError",
    "InvalidEmailAddressError",
    "InvalidResetTokenError",
    "InvalidTokenError",
    "MissingEmailError",
    "NotificationFailureError",
    "StoreFailureError",
    "UserNotFoundError",
    "WeakPasswordError",
    # Schemas
    "AuthenticatedSession",
    "PasswordResetAcknowledgement",
    "TokenPayload",
    # Services
    "JWTService",
    "OpaqueTokenService",
    "PasswordHashingService",
    # Application
    "CredentialLifecycleService",
    "Failure",
    "NotificationError",
    "NotificationGateway",
    "NotificationKind",
    "Result",
    "Success",
    "unwrap",
]
