"""Authentication router: registration, verification, login, reset, Google sign-in."""

import logging
import secrets
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Cookie, Request, status
from fastapi.responses import RedirectResponse

from warden.presentation.api.dependencies import (
    CurrentUser,
    DBSession,
    GoogleClient,
    LifecycleService,
    SettingsDep,
    settle,
)
from warden.presentation.api.schemas import (
    AuthResponse,
    Envelope,
    ErrorEnvelope,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
)
from warden_config.settings import Settings
from warden_identity import (
    AuthenticatedSession,
    ErrorKind,
    Failure,
    Success,
)
from warden_identity.infrastructure.oauth import OAuthProviderError

logger = logging.getLogger(__name__)

router = APIRouter()

# Cookie carrying the CSRF state of the Google sign-in round trip
OAUTH_STATE_COOKIE = "warden_oauth_state"
OAUTH_STATE_MAX_AGE = 600

ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope},
    401: {"model": ErrorEnvelope},
    403: {"model": ErrorEnvelope},
    409: {"model": ErrorEnvelope},
}


def _auth_response(session: AuthenticatedSession) -> Envelope[AuthResponse]:
    return Envelope[AuthResponse](
        value=AuthResponse(
            user=UserResponse.from_user(session.user),
            access_token=session.access_token,
            expires_in=session.expires_in,
        ),
    )


def _frontend_login_redirect(settings: Settings, **params: str) -> RedirectResponse:
    base = settings.frontend_base_url.rstrip("/")
    response = RedirectResponse(
        url=f"{base}/login?{urlencode(params)}",
        status_code=status.HTTP_302_FOUND,
    )
    response.delete_cookie(OAUTH_STATE_COOKIE, path="/api/v1/auth/google")
    return response


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={
        201: {"description": "User registered, verification email sent"},
        400: {"model": ErrorEnvelope, "description": "Weak password"},
        409: {"model": ErrorEnvelope, "description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    lifecycle: LifecycleService,
    session: DBSession,
) -> Envelope[AuthResponse]:
    """
    Register with email and password.

    The account starts unverified; a verification link is emailed. The
    returned token only allows requesting a new verification email until
    the address is confirmed.
    """
    result = await lifecycle.register(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return _auth_response(await settle(result, session))


@router.post(
    "/login",
    summary="Authenticate user",
    responses=ERROR_RESPONSES,
)
async def login(
    request: LoginRequest,
    http_request: Request,
    lifecycle: LifecycleService,
    session: DBSession,
) -> Envelope[AuthResponse]:
    """Authenticate with email and password."""
    client_host = http_request.client.host if http_request.client else "unknown"

    def _record_failed_login() -> None:
        logger.warning("Failed login attempt from %s", client_host)

    result = await lifecycle.login(
        email=request.email,
        password=request.password,
        on_failed_login=_record_failed_login,
    )
    return _auth_response(await settle(result, session))


@router.get(
    "/verify-email/{token}",
    summary="Verify email address",
    responses=ERROR_RESPONSES,
)
async def verify_email(
    token: str,
    lifecycle: LifecycleService,
    session: DBSession,
) -> Envelope[AuthResponse]:
    """Consume a verification token and sign the user in."""
    result = await lifecycle.verify_email(token)
    return _auth_response(await settle(result, session))


@router.post(
    "/resend-verification",
    summary="Send a new verification email",
    responses=ERROR_RESPONSES,
)
async def resend_verification(
    user: CurrentUser,
    lifecycle: LifecycleService,
    session: DBSession,
) -> Envelope[MessageResponse]:
    result = await lifecycle.resend_verification(user.id)
    refreshed = await settle(result, session)
    message = (
        "Email already verified"
        if refreshed.is_email_verified
        else "Verification email sent"
    )
    return Envelope[MessageResponse](value=MessageResponse(message=message))


@router.post(
    "/forgot-password",
    summary="Request password reset",
    responses={
        200: {"description": "Same answer whether or not the email exists"},
        502: {"model": ErrorEnvelope, "description": "Reset email could not be sent"},
    },
)
async def forgot_password(
    request: ForgotPasswordRequest,
    lifecycle: LifecycleService,
    session: DBSession,
) -> Envelope[MessageResponse]:
    """Request a password reset email."""
    result = await lifecycle.forgot_password(request.email)
    match result:
        case Failure(error=error) if error.kind is ErrorKind.NOTIFICATION_FAILURE:
            # The reset fields were cleared after the failed send; keep that
            await session.commit()
            raise error
    acknowledgement = await settle(result, session)
    return Envelope[MessageResponse](
        value=MessageResponse(message=acknowledgement.message),
    )


@router.post(
    "/reset-password/{token}",
    summary="Reset password with token",
    responses=ERROR_RESPONSES,
)
async def reset_password(
    token: str,
    request: ResetPasswordRequest,
    lifecycle: LifecycleService,
    session: DBSession,
) -> Envelope[MessageResponse]:
    """Reset password with a token."""
    result = await lifecycle.reset_password(token, request.password)
    await settle(result, session)
    return Envelope[MessageResponse](
        value=MessageResponse(message="Password reset successful"),
    )


@router.get(
    "/google",
    summary="Start Google sign-in",
    status_code=status.HTTP_302_FOUND,
)
async def google_login(
    google: GoogleClient,
    settings: SettingsDep,
) -> RedirectResponse:
    """Redirect to Google's consent screen."""
    state = secrets.token_urlsafe(32)
    response = RedirectResponse(
        url=google.authorization_url(state),
        status_code=status.HTTP_302_FOUND,
    )
    response.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=state,
        max_age=OAUTH_STATE_MAX_AGE,
        httponly=True,
        secure=settings.api_cookie_secure,
        samesite="lax",
        path="/api/v1/auth/google",
    )
    return response


@router.get(
    "/google/callback",
    summary="Complete Google sign-in",
    status_code=status.HTTP_302_FOUND,
)
async def google_callback(  # noqa: PLR0913
    google: GoogleClient,
    lifecycle: LifecycleService,
    session: DBSession,
    settings: SettingsDep,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    expected_state: Annotated[str | None, Cookie(alias=OAUTH_STATE_COOKIE)] = None,
) -> RedirectResponse:
    """
    Exchange the authorization code, sign the user in and hand the session
    token to the frontend via ``/login?token=...``.

    Every failure redirects to ``/login?error=...`` instead.
    """
    if error or not code:
        logger.warning("Google sign-in aborted: %s", error or "no code")
        return _frontend_login_redirect(settings, error="true")

    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.warning("Google sign-in rejected: state mismatch")
        return _frontend_login_redirect(settings, error="true")

    try:
        profile = await google.fetch_profile(code)
    except OAuthProviderError as e:
        logger.warning("Google sign-in failed: %s", e)
        return _frontend_login_redirect(settings, error="true")

    match await lifecycle.oauth_upsert(profile):
        case Success(value=auth_session):
            await session.commit()
            return _frontend_login_redirect(settings, token=auth_session.access_token)
        case Failure(error=failure):
            await session.rollback()
            logger.warning("Google sign-in refused: %s", failure.kind.value)
            reason = "no-user" if failure.kind is ErrorKind.MISSING_EMAIL else "true"
            return _frontend_login_redirect(settings, error=reason)
