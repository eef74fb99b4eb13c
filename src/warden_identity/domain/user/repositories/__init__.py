"""User repository interfaces."""

from warden_identity.domain.user.repositories.user_repository import UserRepository

__all__ = ["UserRepository"]
