"""User repository interface (the credential store contract)."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from warden_identity.domain.user.aggregates.user import User
from warden_identity.domain.user.value_objects.email import Email


class UserRepository(ABC):
    """Repository interface for User aggregates.

    Lookups return None when nothing matches. ``create`` and ``save`` raise
    ``DuplicateKeyError`` when the email or OAuth subject id is already
    taken; ``save`` raises ``StaleRecordError`` when the stored version no
    longer matches the aggregate's version. Other persistence failures are
    raised as ``StoreError``.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their email address (case-insensitive)."""

    @abstractmethod
    async def find_by_oauth_subject(self, subject_id: str) -> Optional[User]:
        """Find a user linked to the given OAuth subject id."""

    @abstractmethod
    async def find_by_verification_token(self, token: str) -> Optional[User]:
        """Find the user holding a pending verification token."""

    @abstractmethod
    async def find_by_reset_token(
        self,
        token_hash: str,
        not_expired_at: datetime,
    ) -> Optional[User]:
        """Find the user whose reset digest matches and expires after the given time."""

    @abstractmethod
    async def create(self, user: User) -> None:
        """Insert a new user."""

    @abstractmethod
    async def save(self, user: User) -> None:
        """Atomically update an existing user (compare-and-swap on version)."""
