"""Credential lifecycle: registration, verification, login, reset, OAuth, profile."""

from __future__ import annotations

import functools
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional, TypeVar
from uuid import UUID

from warden_identity.application.ports import (
    NotificationError,
    NotificationGateway,
    NotificationKind,
)
from warden_identity.application.results import Failure, Result, Success
from warden_identity.domain.shared.time import utc_now
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
    IdentityError,
    InvalidCredentialsError,
    InvalidEmailAddressError,
    InvalidResetTokenError,
    InvalidTokenError,
    MissingEmailError,
    NotificationFailureError,
    StoreFailureError,
    UserNotFoundError,
)
from warden_identity.schemas import AuthenticatedSession, PasswordResetAcknowledgement
from warden_identity.services import (
    JWTService,
    OpaqueTokenService,
    PasswordHashingService,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

FailedLoginCallback = Callable[[], None]


def _lifecycle_operation(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[Result[T, IdentityError]]]:
    """Turn a raising transition into one that returns a tagged result.

    Store exceptions that a transition did not translate itself are mapped
    to their generic identity errors here, so nothing storage-specific
    reaches the caller.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Result[T, IdentityError]:
        try:
            return Success(value=await func(*args, **kwargs))
        except IdentityError as e:
            return Failure(error=e)
        except InvalidEmailError as e:
            logger.info("Rejected email address in %s: %s", func.__name__, e)
            return Failure(error=InvalidEmailAddressError(str(e)))
        except DuplicateKeyError as e:
            logger.info("Duplicate identity key on %s: %s", func.__name__, e.field)
            return Failure(error=DuplicateIdentityError())
        except StaleRecordError as e:
            logger.warning("Concurrent update on %s: %s", func.__name__, e.user_id)
            return Failure(error=ConcurrentModificationError())
        except StoreError as e:
            logger.error("Credential store failure in %s: %s", func.__name__, e)
            return Failure(error=StoreFailureError())

    return wrapper


class CredentialLifecycleService:
    """
    Application service for the credential and token lifecycle.

    Implements every state transition of a user's authentication fields
    on top of the credential store, the password hasher, the token services
    and the notification gateway. Each public operation returns
    ``Success(value=...)`` or ``Failure(error=IdentityError)``.

    Policies:
    - Registration creates an unverified account and still issues a
      session token, so the client can ask for a new verification email.
    - The verification email is best-effort; a delivery failure is logged
      and does not undo the registration.
    - A failed password reset email rolls the reset fields back.
    """

    RESET_TOKEN_EXPIRY = timedelta(hours=1)

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        token_service: OpaqueTokenService,
        jwt_service: JWTService,
        notification_gateway: NotificationGateway,
        reset_token_expiry: timedelta = RESET_TOKEN_EXPIRY,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._token_service = token_service
        self._jwt_service = jwt_service
        self._notifications = notification_gateway
        self._reset_token_expiry = reset_token_expiry
        self._clock = clock

    def _issue_session(self, user: User) -> AuthenticatedSession:
        access_token = self._jwt_service.create_access_token(
            user_id=user.id,
            email=user.email,
        )
        return AuthenticatedSession(
            user=user,
            access_token=access_token,
            expires_in=self._jwt_service.access_token_ttl_seconds,
        )

    async def _find_by_email(self, email: str) -> Optional[User]:
        try:
            return await self._user_repo.find_by_email(Email(email))
        except InvalidEmailError:
            return None

    def _send_best_effort(self, user: User, kind: NotificationKind, token: str) -> None:
        try:
            self._notifications.send(user.email, kind, token)
        except NotificationError as e:
            logger.error("Failed to send %s to user %s: %s", kind.value, user.id, e)

    @_lifecycle_operation
    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> AuthenticatedSession:
        normalized = Email(email)
        if await self._user_repo.find_by_email(normalized) is not None:
            raise DuplicateIdentityError

        password_hash = self._password_service.hash(password)
        verification_token = self._token_service.generate()
        user = User.register(
            email=normalized,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            verification_token=verification_token,
        )
        try:
            await self._user_repo.create(user)
        except DuplicateKeyError as e:
            raise DuplicateIdentityError from e

        self._send_best_effort(user, NotificationKind.VERIFICATION_EMAIL, verification_token)

        logger.info("User registered: %s", user.id)
        return self._issue_session(user)

    @_lifecycle_operation
    async def verify_email(self, token: str) -> AuthenticatedSession:
        user = await self._user_repo.find_by_verification_token(token)
        if user is None:
            raise InvalidTokenError("Invalid verification token")

        user.mark_email_verified()
        try:
            await self._user_repo.save(user)
        except StaleRecordError as e:
            # Someone else consumed the token between our read and write
            raise InvalidTokenError("Invalid verification token") from e

        logger.info("Email verified for user: %s", user.id)
        return self._issue_session(user)

    @_lifecycle_operation
    async def resend_verification(self, user_id: UUID) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError

        if user.is_email_verified:
            return user

        verification_token = self._token_service.generate()
        user.issue_verification_token(verification_token)
        await self._user_repo.save(user)

        self._send_best_effort(user, NotificationKind.VERIFICATION_EMAIL, verification_token)
        logger.info("Verification email re-issued for user: %s", user.id)
        return user

    @_lifecycle_operation
    async def login(
        self,
        email: str,
        password: str,
        on_failed_login: FailedLoginCallback | None = None,
    ) -> AuthenticatedSession:
        user = await self._find_by_email(email)
        if user is None or not self._password_service.verify(
            password,
            user.password_hash,
        ):
            if on_failed_login is not None:
                on_failed_login()
            raise InvalidCredentialsError

        if not user.is_email_verified:
            raise EmailNotVerifiedError

        logger.info("User logged in: %s", user.id)
        return self._issue_session(user)

    @_lifecycle_operation
    async def forgot_password(self, email: str) -> PasswordResetAcknowledgement:
        user = await self._find_by_email(email)
        if user is None:
            # Silent success to prevent email enumeration
            logger.debug("Password reset requested for unknown email")
            return PasswordResetAcknowledgement()

        raw_token = self._token_service.generate()
        user.start_password_reset(
            token_hash=self._token_service.hash_token(raw_token),
            expires_at=self._clock() + self._reset_token_expiry,
        )
        await self._user_repo.save(user)

        try:
            self._notifications.send(user.email, NotificationKind.PASSWORD_RESET, raw_token)
        except NotificationError as e:
            logger.error("Failed to send password reset email to user %s: %s", user.id, e)
            # An undeliverable token must not stay live
            user.clear_password_reset()
            await self._user_repo.save(user)
            raise NotificationFailureError("Error sending reset email") from e

        logger.info("Password reset email sent to user: %s", user.id)
        return PasswordResetAcknowledgement()

    @_lifecycle_operation
    async def reset_password(self, token: str, new_password: str) -> User:
        token_hash = self._token_service.hash_token(token)
        user = await self._user_repo.find_by_reset_token(
            token_hash,
            not_expired_at=self._clock(),
        )
        if user is None:
            raise InvalidResetTokenError

        user.change_password_hash(self._password_service.hash(new_password))
        try:
            await self._user_repo.save(user)
        except StaleRecordError as e:
            raise InvalidResetTokenError from e

        logger.info("Password reset completed for user: %s", user.id)
        return user

    @_lifecycle_operation
    async def oauth_upsert(self, profile: OAuthProfile) -> AuthenticatedSession:
        user = await self._user_repo.find_by_oauth_subject(profile.subject_id)
        if user is not None:
            if user.refresh_from_oauth(profile):
                await self._user_repo.save(user)
            return self._issue_session(user)

        try:
            email = Email(profile.email or "")
        except InvalidEmailError as e:
            raise MissingEmailError from e

        user = await self._user_repo.find_by_email(email)
        if user is not None:
            user.link_oauth(profile)
            await self._user_repo.save(user)
            logger.info("Linked OAuth identity to existing user: %s", user.id)
            return self._issue_session(user)

        user = User.from_oauth(profile)
        try:
            await self._user_repo.create(user)
        except DuplicateKeyError:
            # A concurrent first login created the record first
            existing = await self._user_repo.find_by_oauth_subject(profile.subject_id)
            if existing is None:
                raise
            return self._issue_session(existing)

        logger.info("User created from OAuth login: %s", user.id)
        return self._issue_session(user)

    @_lifecycle_operation
    async def update_profile(  # noqa: PLR0913
        self,
        user_id: UUID,
        first_name: str,
        last_name: str,
        current_password: str | None = None,
        new_password: str | None = None,
    ) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError

        user.update_profile(first_name=first_name, last_name=last_name)

        if current_password and new_password:
            if not self._password_service.verify(current_password, user.password_hash):
                raise InvalidCredentialsError("Current password is incorrect")
            user.change_password_hash(self._password_service.hash(new_password))
            logger.info("Password changed for user: %s", user.id)

        await self._user_repo.save(user)
        return user

    @_lifecycle_operation
    async def get_profile(self, user_id: UUID) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError
        return user

    @_lifecycle_operation
    async def authenticate(self, access_token: str) -> User:
        payload = self._jwt_service.verify_token(access_token)
        user = await self._user_repo.find_by_id(payload.user_id)
        if user is None:
            raise InvalidTokenError("User not found")
        return user
