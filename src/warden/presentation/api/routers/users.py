"""Current-user profile endpoints."""

import logging

from fastapi import APIRouter

from warden.presentation.api.dependencies import (
    CurrentUser,
    DBSession,
    LifecycleService,
    settle,
)
from warden.presentation.api.schemas import (
    Envelope,
    ErrorEnvelope,
    UpdateProfileRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "Current user data"},
        401: {"description": "Not authenticated"},
        404: {"model": ErrorEnvelope},
    },
)
async def get_me(
    user: CurrentUser,
    lifecycle: LifecycleService,
    session: DBSession,
) -> Envelope[UserResponse]:
    """
    Get the current authenticated user's profile.

    Requires a valid session token in the Authorization header.
    """
    profile = await settle(await lifecycle.get_profile(user.id), session)
    return Envelope[UserResponse](value=UserResponse.from_user(profile))


@router.patch(
    "/me",
    summary="Update current user",
    responses={
        200: {"description": "Profile updated"},
        400: {"model": ErrorEnvelope, "description": "New password too weak"},
        401: {"model": ErrorEnvelope, "description": "Current password incorrect"},
        404: {"model": ErrorEnvelope},
        409: {"model": ErrorEnvelope, "description": "Concurrent modification"},
    },
)
async def update_me(
    request: UpdateProfileRequest,
    user: CurrentUser,
    lifecycle: LifecycleService,
    session: DBSession,
) -> Envelope[UserResponse]:
    """
    Update first and last name, and optionally the password.

    Changing the password requires both the current and the new password.
    """
    result = await lifecycle.update_profile(
        user_id=user.id,
        first_name=request.first_name,
        last_name=request.last_name,
        current_password=request.current_password or None,
        new_password=request.new_password or None,
    )
    updated = await settle(result, session)
    logger.info("Profile updated for user: %s", updated.id)
    return Envelope[UserResponse](value=UserResponse.from_user(updated))
