"""
TrailMix Backend: User Route Handlers
=======================================

What:  /api/users: register, login, profile read/update, profile image.
How:   Extracts JSON or multipart input, delegates to UserService.
Who:   Called by the mobile app's auth and profile screens.

Request Flow (PUT /api/users/profile):
    1. require_user verifies the bearer token
    2. FastAPI parses the multipart form (name, bio, profile_image)
    3. UserService stores the image (if any) and updates supplied columns
    4. The re-read profile is returned in the success envelope
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from trailmix.database import get_db_session
from trailmix.middleware.auth import require_user
from trailmix.schemas.common import ErrorResponse, MessageResponse, SuccessResponse
from trailmix.schemas.user import (
    AuthenticatedUser,
    LoginRequest,
    LoginResponse,
    ProfileImageData,
    ProfileUpdate,
    RegisterRequest,
    UserProfile,
    UserProfileWithTrails,
)
from trailmix.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

_AUTH_ERRORS = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}


@router.post(
    "/register",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Username or email already exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Create an account. No token is issued; the client logs in separately."""
    await user_service.register(db, payload)
    return MessageResponse(message="User registered successfully")


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await user_service.login(db, payload)


@router.get(
    "/profile",
    response_model=SuccessResponse[UserProfileWithTrails],
    responses={
        **_AUTH_ERRORS,
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Current user's profile and trails",
)
async def get_profile(
    current_user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse[UserProfileWithTrails]:
    profile = await user_service.get_profile(db, current_user.id)
    return SuccessResponse[UserProfileWithTrails](data=profile)


@router.put(
    "/profile",
    response_model=SuccessResponse[UserProfile],
    responses={
        **_AUTH_ERRORS,
        400: {"description": "No fields to update, bad image, or name taken", "model": ErrorResponse},
    },
    summary="Update name, bio and/or profile image",
)
async def update_profile(
    name: str | None = Form(default=None, description="New username"),
    bio: str | None = Form(default=None),
    profile_image: UploadFile | None = File(
        default=None,
        description="JPEG or PNG, max 5MB",
    ),
    current_user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse[UserProfile]:
    """
    Update only the supplied fields.

    Blank values count as not supplied. At least one of name, bio or
    profile_image is required.
    """
    try:
        profile = await user_service.update_profile(
            db,
            current_user.id,
            ProfileUpdate(name=name, bio=bio),
            profile_image=profile_image,
        )
    finally:
        if profile_image is not None:
            await profile_image.close()
    return SuccessResponse[UserProfile](data=profile)


@router.post(
    "/profile/image",
    response_model=SuccessResponse[ProfileImageData],
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Missing or invalid image", "model": ErrorResponse},
    },
    summary="Replace the profile image",
)
async def update_profile_image(
    profile_image: UploadFile | None = File(default=None, description="JPEG or PNG, max 5MB"),
    current_user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse[ProfileImageData]:
    try:
        url = await user_service.update_profile_image(db, current_user.id, profile_image)
    finally:
        if profile_image is not None:
            await profile_image.close()
    return SuccessResponse[ProfileImageData](data=ProfileImageData(profile_image_url=url))
