"""Application layer: use-case orchestration and its outbound ports."""

from warden_identity.application.ports import (
    NotificationError,
    NotificationGateway,
    NotificationKind,
)
from warden_identity.application.results import Failure, Result, Success, unwrap
from warden_identity.application.services import CredentialLifecycleService

__all__ = [
    "CredentialLifecycleService",
    "Failure",
    "NotificationError",
    "NotificationGateway",
    "NotificationKind",
    "Result",
    "Success",
    "unwrap",
]
