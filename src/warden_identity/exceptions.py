"""Identity and authentication exceptions.

Every failure of a credential lifecycle operation is one of these. Each
carries a stable ``kind`` so the presentation layer can map it to a
transport status without inspecting the message.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable error kinds for API clients.

    These values are part of the public API contract. Should not be changed.
    """

    DUPLICATE_IDENTITY = "DUPLICATE_IDENTITY"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_EMAIL = "INVALID_EMAIL"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    MISSING_EMAIL = "MISSING_EMAIL"
    NOT_FOUND = "NOT_FOUND"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
    STORE_FAILURE = "STORE_FAILURE"
    NOTIFICATION_FAILURE = "NOTIFICATION_FAILURE"


class IdentityError(Exception):
    """Base exception for all identity errors."""

    kind: ErrorKind = ErrorKind.STORE_FAILURE

    def __init__(self, message: str = "Identity error"):
        self.message = message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value!r}, message={self.message!r})"


class DuplicateIdentityError(IdentityError):
    """Raised when registering an email that already has an account."""

    kind = ErrorKind.DUPLICATE_IDENTITY

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class InvalidCredentialsError(IdentityError):
    """Raised when email or password is incorrect.

    Also used for unknown emails so callers cannot tell which accounts exist.
    """

    kind = ErrorKind.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class EmailNotVerifiedError(IdentityError):
    """Raised when a local-password account logs in before verifying."""

    kind = ErrorKind.EMAIL_NOT_VERIFIED

    def __init__(self, message: str = "Please verify your email"):
        super().__init__(message)


class InvalidTokenError(IdentityError):
    """Raised when a verification or session token is invalid."""

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class InvalidResetTokenError(IdentityError):
    """Raised when a password reset token is invalid or expired."""

    kind = ErrorKind.INVALID_OR_EXPIRED_TOKEN

    def __init__(self, message: str = "Invalid or expired reset token"):
        super().__init__(message)


class InvalidEmailAddressError(IdentityError):
    """Raised when an email address is not syntactically valid."""

    kind = ErrorKind.INVALID_EMAIL

    def __init__(self, message: str = "Invalid email address"):
        super().__init__(message)


class MissingEmailError(IdentityError):
    """Raised when an OAuth provider did not supply an email claim."""

    kind = ErrorKind.MISSING_EMAIL

    def __init__(self, message: str = "No email provided by the identity provider"):
        super().__init__(message)


class UserNotFoundError(IdentityError):
    """Raised when an authenticated user's record no longer exists."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class WeakPasswordError(IdentityError):
    """Raised when a password doesn't meet strength requirements."""

    kind = ErrorKind.WEAK_PASSWORD

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class ConcurrentModificationError(IdentityError):
    """Raised when a record changed underneath an update."""

    kind = ErrorKind.CONCURRENT_MODIFICATION

    def __init__(self, message: str = "The account was modified concurrently, retry"):
        super().__init__(message)


class StoreFailureError(IdentityError):
    """Raised when the credential store fails unexpectedly."""

    kind = ErrorKind.STORE_FAILURE

    def __init__(self, message: str = "Credential store unavailable"):
        super().__init__(message)


class NotificationFailureError(IdentityError):
    """Raised when a notification that the operation depends on was not delivered."""

    kind = ErrorKind.NOTIFICATION_FAILURE

    def __init__(self, message: str = "Error sending email"):
        super().__init__(message)
