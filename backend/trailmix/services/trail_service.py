"""
TrailMix Backend: Trail Service
=================================

What:  Trail listing, lookup, creation (with media and special points),
       full-row update, and deletion.
How:   Single statements through the request's AsyncSession. Creation
       composes FileService (photo/video) with two inserts.
Who:   Called by the /api/trails route handlers.

Creation Flow (POST /api/trails):
    ┌───────────────┐   ┌──────────────┐   ┌──────────────┐   ┌───────────────────┐
    │ parse special │──▶│ validate and │──▶│ INSERT trail │──▶│ INSERT points     │
    │ points JSON   │   │ store media  │   │ (owner=token)│   │ (savepoint)       │
    └───────────────┘   └──────────────┘   └──────────────┘   └───────────────────┘

    - Malformed special_points or rejected media → 400, nothing written
    - Trail insert fails → stored media removed, 500
    - Points insert fails → savepoint rolled back, logged, trail kept,
      response still echoes the client's points

Ownership:
    The owner of a new trail is always the authenticated user. Update and
    delete do not compare the caller with the owner.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trailmix.database import translate_db_errors
from trailmix.exceptions import NotFoundError, ValidationError
from trailmix.models.special_point import SpecialPoint
from trailmix.models.trail import Trail
from trailmix.models.user import User
from trailmix.schemas.trail import (
    TrailCreate,
    TrailCreated,
    TrailListItem,
    TrailResponse,
    TrailUpdate,
)
from trailmix.services.file_service import StoredFile, file_service, is_present

logger = logging.getLogger(__name__)

_special_points_adapter = TypeAdapter(List[Dict[str, Any]])


def parse_special_points(raw: Optional[str]) -> List[Dict[str, Any]]:
    """
    Decode the `special_points` form field: a JSON array of objects.

    Empty or missing input means no points. Entries are not checked beyond
    being objects; bad coordinates surface in the (fail-open) insert.
    """
    if raw is None or not raw.strip():
        return []
    try:
        return _special_points_adapter.validate_json(raw)
    except PydanticValidationError as e:
        raise ValidationError(
            message="special_points must be a JSON array of objects",
            field="special_points",
        ) from e


class TrailService:
    """Business logic for trails."""

    async def list_trails(self, db: AsyncSession) -> List[TrailListItem]:
        """Every trail with its creator's username, newest first."""
        with translate_db_errors("listing trails"):
            result = await db.execute(
                select(Trail, User.username.label("creator_name"))
                .join(User, Trail.user_id == User.user_id)
                .order_by(Trail.created_at.desc(), Trail.trail_id.desc())
            )
            rows = result.all()

        return [
            TrailListItem(
                **TrailResponse.model_validate(trail).model_dump(),
                creator_name=creator_name,
            )
            for trail, creator_name in rows
        ]

    async def list_user_trails(self, db: AsyncSession, user_id: int) -> List[TrailResponse]:
        with translate_db_errors("listing user trails", user_id=user_id):
            result = await db.execute(
                select(Trail)
                .where(Trail.user_id == user_id)
                .order_by(Trail.created_at.desc(), Trail.trail_id.desc())
            )
            return [TrailResponse.model_validate(t) for t in result.scalars().all()]

    async def get_trail(self, db: AsyncSession, trail_id: int) -> TrailResponse:
        with translate_db_errors("fetching trail", trail_id=trail_id):
            result = await db.execute(select(Trail).where(Trail.trail_id == trail_id))
            trail = result.scalar_one_or_none()

        if trail is None:
            raise NotFoundError(resource="trail", resource_id=trail_id)
        return TrailResponse.model_validate(trail)

    async def create_trail(
        self,
        db: AsyncSession,
        owner_id: int,
        data: TrailCreate,
        photo: Optional[UploadFile] = None,
        video: Optional[UploadFile] = None,
        special_points: Optional[str] = None,
    ) -> TrailCreated:
        """
        Persist a trail owned by `owner_id`, its media, and its special points.

        Args:
            owner_id: id from the verified token, never from the request body
            special_points: raw JSON string from the multipart form

        Raises:
            ValidationError: malformed special_points or rejected media
            DatabaseError: the trail insert failed
        """
        points = parse_special_points(special_points)

        # Both files are checked before either is written
        uploads = {"photo": photo, "video": video}
        for field_name, upload in uploads.items():
            if is_present(upload):
                file_service.validate(field_name, upload)

        stored: Dict[str, Optional[StoredFile]] = {"photo": None, "video": None}
        try:
            for field_name, upload in uploads.items():
                if is_present(upload):
                    stored[field_name] = await file_service.store(field_name, upload)

            trail = Trail(
                user_id=owner_id,
                name=data.name,
                category=data.category,
                short_description=data.description,
                start_lat=data.start_lat,
                start_lng=data.start_lng,
                end_lat=data.end_lat,
                end_lng=data.end_lng,
                photo_url=stored["photo"].url if stored["photo"] else None,
                video_url=stored["video"].url if stored["video"] else None,
                trail_date=data.trail_date,
                trail_time=data.trail_time,
            )
            with translate_db_errors("creating trail", user_id=owner_id):
                db.add(trail)
                await db.flush()
        except Exception:
            await file_service.cleanup_files(stored.values())
            raise

        logger.info("Trail created: %s (id=%s, owner=%s)", trail.name, trail.trail_id, owner_id)

        # Snapshot before the savepoint; a rolled-back savepoint may expire ORM state
        created = TrailCreated(
            id=trail.trail_id,
            name=trail.name,
            category=trail.category,
            description=trail.short_description,
            start_lat=trail.start_lat,
            start_lng=trail.start_lng,
            end_lat=trail.end_lat,
            end_lng=trail.end_lng,
            video_url=trail.video_url,
            photo_url=trail.photo_url,
            trail_date=trail.trail_date,
            trail_time=trail.trail_time,
            special_points=points,
        )

        if points:
            await self._insert_special_points(db, created.id, points)

        return created

    async def _insert_special_points(
        self, db: AsyncSession, trail_id: int, points: List[Dict[str, Any]]
    ) -> None:
        """
        Bulk-insert points for a new trail inside a savepoint.

        Fails open: an error is logged and the trail insert stands.
        """
        rows = [
            SpecialPoint(
                trail_id=trail_id,
                name=point.get("name"),
                lat=point.get("lat"),
                lng=point.get("lng"),
            )
            for point in points
        ]
        try:
            async with db.begin_nested():
                db.add_all(rows)
        except SQLAlchemyError as e:
            logger.warning(
                "Special points for trail %s were not saved (%d supplied): %s",
                trail_id,
                len(rows),
                str(e),
            )
            return

        logger.info("Saved %d special points for trail %s", len(rows), trail_id)

    async def update_trail(self, db: AsyncSession, trail_id: int, data: TrailUpdate) -> None:
        """Overwrite every mutable column of the trail."""
        with translate_db_errors("updating trail", trail_id=trail_id):
            result = await db.execute(
                update(Trail)
                .where(Trail.trail_id == trail_id)
                .values(**data.model_dump())
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="trail", resource_id=trail_id)

    async def delete_trail(self, db: AsyncSession, trail_id: int) -> None:
        """Hard delete; dependent special points go by the FK's ON DELETE CASCADE."""
        with translate_db_errors("deleting trail", trail_id=trail_id):
            result = await db.execute(delete(Trail).where(Trail.trail_id == trail_id))

        if result.rowcount == 0:
            raise NotFoundError(resource="trail", resource_id=trail_id)
        logger.info("Trail deleted: %s", trail_id)


trail_service = TrailService()
