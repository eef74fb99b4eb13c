"""SQLAlchemy implementation for warden_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- UserModel: SQLAlchemy model for users
- UserRepositorySQLAlchemy: Credential store implementation
"""

from warden_identity.infrastructure.persistence.sqlalchemy.base import (
    IdentityBase,
    TimestampMixin,
)
from warden_identity.infrastructure.persistence.sqlalchemy.models import UserModel
from warden_identity.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
)

__all__ = [
    "IdentityBase",
    "TimestampMixin",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
