"""SQLAlchemy implementation of UserRepository."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Union
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from warden_identity.domain.shared.time import ensure_tz_aware
from warden_identity.domain.user import (
    DuplicateKeyError,
    Email,
    StaleRecordError,
    StoreError,
    User,
    UserRepository,
)
from warden_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures as StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Credential store %s failed: %s", operation, e)
        raise StoreError(f"{operation} failed") from e


def _duplicate_field(error: IntegrityError) -> str:
    if "oauth_subject_id" in str(error.orig):
        return "oauth_subject_id"
    return "email"


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface.

    ``save`` is a compare-and-swap on the ``version`` column, so two
    sessions that loaded the same row cannot both write it back.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        return await self._find_one(select(UserModel).where(UserModel.id == user_id))

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email(email).value
        return await self._find_one(
            select(UserModel).where(UserModel.email == email_value),
        )

    async def find_by_oauth_subject(self, subject_id: str) -> User | None:
        return await self._find_one(
            select(UserModel).where(UserModel.oauth_subject_id == subject_id),
        )

    async def find_by_verification_token(self, token: str) -> User | None:
        if not token:
            return None
        return await self._find_one(
            select(UserModel).where(UserModel.verification_token == token),
        )

    async def find_by_reset_token(
        self,
        token_hash: str,
        not_expired_at: datetime,
    ) -> User | None:
        if not token_hash:
            return None
        stmt = select(UserModel).where(
            UserModel.reset_token == token_hash,
            UserModel.reset_token_expiry > not_expired_at,
        )
        return await self._find_one(stmt)

    async def create(self, user: User) -> None:
        self._session.add(self._map_to_model(user))
        try:
            await self._session.flush()
        except IntegrityError as e:
            # A failed flush leaves the transaction unusable
            await self._session.rollback()
            field = _duplicate_field(e)
            logger.info("Rejected duplicate %s for new user %s", field, user.id)
            raise DuplicateKeyError(field) from e
        except SQLAlchemyError as e:
            logger.error("Credential store create failed: %s", e)
            raise StoreError("create failed") from e

        logger.info("Created user: %s (email: %s)", user.id, user.email)

    async def save(self, user: User) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id, UserModel.version == user.version)
            .values(
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                password_hash=user.password_hash,
                oauth_subject_id=user.oauth_subject_id,
                profile_picture=user.profile_picture,
                is_email_verified=user.is_email_verified,
                verification_token=user.verification_token,
                reset_token=user.reset_token,
                reset_token_expiry=user.reset_token_expiry,
                updated_at=user.updated_at,
                version=user.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateKeyError(_duplicate_field(e)) from e
        except SQLAlchemyError as e:
            logger.error("Credential store save failed: %s", e)
            raise StoreError("save failed") from e

        if result.rowcount == 0:
            raise StaleRecordError(user.id)

        user.increment_version()
        logger.debug("Updated user: %s (version %s)", user.id, user.version)

    async def _find_one(self, stmt: Select) -> User | None:
        # Bulk UPDATEs bypass the identity map, always reload row state
        stmt = stmt.execution_options(populate_existing=True)
        with _store_errors("lookup"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            password_hash=model.password_hash,
            oauth_subject_id=model.oauth_subject_id,
            profile_picture=model.profile_picture,
            is_email_verified=model.is_email_verified,
            verification_token=model.verification_token,
            reset_token=model.reset_token,
            reset_token_expiry=(
                ensure_tz_aware(model.reset_token_expiry)
                if model.reset_token_expiry
                else None
            ),
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
            version=model.version,
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            password_hash=user.password_hash,
            oauth_subject_id=user.oauth_subject_id,
            profile_picture=user.profile_picture,
            is_email_verified=user.is_email_verified,
            verification_token=user.verification_token,
            reset_token=user.reset_token,
            reset_token_expiry=user.reset_token_expiry,
            created_at=user.created_at,
            updated_at=user.updated_at,
            version=user.version,
        )
