"""FastAPI dependency injection for the Warden API.

Provides dependencies for:
- Database sessions
- Identity services (hashing, tokens, notifications, lifecycle)
- Authentication (current user from the session token)
- The Google OAuth client
"""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Annotated, AsyncGenerator, TypeVar

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from warden.presentation.api.config import get_api_settings
from warden_config.settings import Settings
from warden_identity import (
    CredentialLifecycleService,
    Failure,
    IdentityError,
    JWTService,
    NotificationGateway,
    OpaqueTokenService,
    PasswordHashingService,
    Result,
    Success,
    User,
)
from warden_identity.infrastructure.email import (
    LoggingNotificationGateway,
    SmtpNotificationGateway,
)
from warden_identity.infrastructure.oauth import GoogleOAuthClient
from warden_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Security scheme for session tokens
security = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


# -----------------------------------------------------------------------------
# Database Engine & Session
# -----------------------------------------------------------------------------


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async database engine for an application instance.

    In-memory SQLite gets a single shared connection so that every session
    sees the same database.

    Returns
    -------
    AsyncEngine instance
    """
    if database_url.startswith("sqlite"):
        db_path = database_url.split("///")[-1] if "///" in database_url else ""
        if not db_path or db_path == ":memory:":
            return create_async_engine(
                database_url,
                echo=False,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        # Ensure data directory exists for SQLite
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Creates an async session for the request from the application's
    session maker.

    Yields
    ------
    AsyncSession for database operations
    """
    async with request.app.state.session_maker() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


async def settle(result: Result[T, IdentityError], session: AsyncSession) -> T:
    """Commit on success and return the value; roll back and raise on failure.

    The raised identity error is rendered by the registered exception
    handler.
    """
    match result:
        case Success(value=value):
            await session.commit()
            return value
        case Failure(error=error):
            await session.rollback()
            raise error


# -----------------------------------------------------------------------------
# Identity Services
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_hours=settings.jwt_access_token_expire_hours,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService(rounds=settings.password_hash_rounds)


def get_token_service() -> OpaqueTokenService:
    return OpaqueTokenService()


def get_notification_gateway(settings: SettingsDep) -> NotificationGateway:
    """SMTP delivery when enabled, otherwise a gateway that only logs."""
    if settings.smtp_enabled:
        return SmtpNotificationGateway(settings)
    return LoggingNotificationGateway()


async def get_lifecycle_service(
    session: DBSession,
    settings: SettingsDep,
    jwt_service: JWTService = Depends(get_jwt_service),
    password_service: PasswordHashingService = Depends(get_password_service),
    token_service: OpaqueTokenService = Depends(get_token_service),
    notification_gateway: NotificationGateway = Depends(get_notification_gateway),
) -> CredentialLifecycleService:
    """
    Get the credential lifecycle service with all dependencies.

    This service orchestrates registration, verification, login, password
    reset, OAuth sign-in and profile updates.
    """
    return CredentialLifecycleService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
        token_service=token_service,
        jwt_service=jwt_service,
        notification_gateway=notification_gateway,
        reset_token_expiry=timedelta(minutes=settings.reset_token_expire_minutes),
    )


# Type alias for injected lifecycle service
LifecycleService = Annotated[
    CredentialLifecycleService,
    Depends(get_lifecycle_service),
]


def get_google_client(settings: SettingsDep) -> GoogleOAuthClient:
    if not settings.google_oauth_enabled:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Google login is not enabled",
        )
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret.get_secret_value(),
        callback_url=settings.google_callback_url,
    )


GoogleClient = Annotated[GoogleOAuthClient, Depends(get_google_client)]


# -----------------------------------------------------------------------------
# Current User (Session Token Authentication)
# -----------------------------------------------------------------------------


async def get_current_user(
    lifecycle: LifecycleService,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Extracts the bearer token from the Authorization header, verifies it
    and loads the corresponding User.

    Raises
    ------
    HTTPException
        401 if token is missing, invalid, or user not found
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    match await lifecycle.authenticate(credentials.credentials):
        case Success(value=user):
            return user
        case Failure(error=error):
            logger.warning("Rejected session token: %s", error.message)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )


# Type alias for injected current user
CurrentUser = Annotated[User, Depends(get_current_user)]
