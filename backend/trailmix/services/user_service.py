"""
TrailMix Backend: User Service
================================

What:  Registration, login, and profile reads/updates.
How:   One or two statements per operation through the request's
       AsyncSession; SQLAlchemy failures are translated to DatabaseError,
       unique-key violations to ConflictError.
Who:   Called by the /api/users route handlers.

Orchestration (PUT /api/users/profile with an image):
    validate + store image → UPDATE users SET <supplied columns> → re-read
    On a failed UPDATE the stored image is removed again.
"""

import logging
from typing import Optional

from fastapi import UploadFile
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trailmix.database import translate_db_errors
from trailmix.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from trailmix.models.trail import Trail
from trailmix.models.user import User
from trailmix.schemas.trail import TrailResponse
from trailmix.schemas.user import (
    LoginRequest,
    LoginResponse,
    ProfileUpdate,
    PublicUser,
    RegisterRequest,
    UserProfile,
    UserProfileWithTrails,
)
from trailmix.services.auth_service import auth_service
from trailmix.services.file_service import StoredFile, file_service, is_present

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for user accounts.

    Responsibilities:
        - register(): hash password and insert, mapping duplicates to 400
        - login(): verify credentials and issue a bearer token
        - get_profile(): public projection plus the user's trails
        - update_profile(): optional-field update, then re-read
        - update_profile_image(): store image and point profile_image_url at it
    """

    async def register(self, db: AsyncSession, data: RegisterRequest) -> None:
        hashed = await auth_service.hash_password(data.password)
        user = User(username=data.username, email=data.email, password=hashed)

        with translate_db_errors("registering user"):
            try:
                db.add(user)
                await db.flush()
            except IntegrityError as e:
                logger.info("Registration rejected, duplicate username/email: %s", data.username)
                raise ConflictError() from e

        logger.info("User registered: %s (id=%s)", user.username, user.user_id)

    async def login(self, db: AsyncSession, data: LoginRequest) -> LoginResponse:
        with translate_db_errors("logging in"):
            result = await db.execute(select(User).where(User.email == data.email))
            user = result.scalar_one_or_none()

        if user is None or not await auth_service.verify_password(data.password, user.password):
            raise InvalidCredentialsError()

        token = auth_service.create_access_token(user.user_id, user.role)
        return LoginResponse(
            token=token,
            user=PublicUser(
                id=user.user_id,
                username=user.username,
                email=user.email,
                role=user.role,
            ),
        )

    async def _load_profile(self, db: AsyncSession, user_id: int) -> UserProfile:
        result = await db.execute(select(User).where(User.user_id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return UserProfile.model_validate(user)

    async def get_profile(self, db: AsyncSession, user_id: int) -> UserProfileWithTrails:
        """Public profile plus the caller's trails (second, dependent query)."""
        with translate_db_errors("fetching profile", user_id=user_id):
            profile = await self._load_profile(db, user_id)
            result = await db.execute(
                select(Trail)
                .where(Trail.user_id == user_id)
                .order_by(Trail.created_at.desc(), Trail.trail_id.desc())
            )
            trails = [TrailResponse.model_validate(t) for t in result.scalars().all()]

        return UserProfileWithTrails(**profile.model_dump(), trails=trails)

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: int,
        changes: ProfileUpdate,
        profile_image: Optional[UploadFile] = None,
    ) -> UserProfile:
        """
        Write only the supplied fields, then return the re-read profile.

        Raises:
            ValidationError: nothing supplied, or a rejected image
            ConflictError: new username already taken
            NotFoundError: user row no longer exists
        """
        if not changes.column_values() and not is_present(profile_image):
            raise ValidationError(message="No fields to update")

        stored: Optional[StoredFile] = None
        if is_present(profile_image):
            stored = await file_service.store("profile_image", profile_image)
            changes = changes.model_copy(update={"profile_image_url": stored.url})

        try:
            with translate_db_errors("updating profile", user_id=user_id):
                try:
                    result = await db.execute(
                        update(User)
                        .where(User.user_id == user_id)
                        .values(**changes.column_values())
                    )
                except IntegrityError as e:
                    raise ConflictError() from e
                if result.rowcount == 0:
                    raise NotFoundError(resource="user", resource_id=user_id)
                return await self._load_profile(db, user_id)
        except Exception:
            await file_service.cleanup_files([stored])
            raise

    async def update_profile_image(
        self,
        db: AsyncSession,
        user_id: int,
        profile_image: Optional[UploadFile],
    ) -> str:
        """Store a new profile image and return its public URL."""
        if not is_present(profile_image):
            raise ValidationError(message="No image file provided", field="profile_image")

        stored = await file_service.store("profile_image", profile_image)
        try:
            with translate_db_errors("updating profile image", user_id=user_id):
                result = await db.execute(
                    update(User)
                    .where(User.user_id == user_id)
                    .values(profile_image_url=stored.url)
                )
                if result.rowcount == 0:
                    raise NotFoundError(resource="user", resource_id=user_id)
        except Exception:
            await file_service.cleanup_files([stored])
            raise

        logger.info("Profile image updated for user %s: %s", user_id, stored.url)
        return stored.url


user_service = UserService()
