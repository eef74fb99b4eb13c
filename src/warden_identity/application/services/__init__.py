"""Application services for the identity domain."""

from warden_identity.application.services.credential_lifecycle_service import (
    CredentialLifecycleService,
    FailedLoginCallback,
)

__all__ = [
    "CredentialLifecycleService",
    "FailedLoginCallback",
]
