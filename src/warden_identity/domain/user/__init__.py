"""User domain: aggregate, value objects, repository contract, exceptions."""

from warden_identity.domain.user.aggregates import User
from warden_identity.domain.user.exceptions import (
    DuplicateKeyError,
    InvalidEmailError,
    StaleRecordError,
    StoreError,
)
from warden_identity.domain.user.repositories import UserRepository
from warden_identity.domain.user.value_objects import Email, OAuthProfile

__all__ = [
    "DuplicateKeyError",
    "Email",
    "InvalidEmailError",
    "OAuthProfile",
    "StaleRecordError",
    "StoreError",
    "User",
    "UserRepository",
]
