"""
TrailMix Backend: Special Point Service
=========================================

What:  Plain CRUD over `special_points`, by id and by parent trail.
Who:   Called by the /api/special-points route handlers (no authentication).
"""

import logging
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from trailmix.database import translate_db_errors
from trailmix.exceptions import NotFoundError
from trailmix.models.special_point import SpecialPoint
from trailmix.schemas.special_point import (
    SpecialPointCreate,
    SpecialPointResponse,
    SpecialPointUpdate,
)

logger = logging.getLogger(__name__)


class SpecialPointService:
    """Business logic for special points; no ownership checks."""

    async def list_points(self, db: AsyncSession) -> List[SpecialPointResponse]:
        """Every point, in insertion order."""
        with translate_db_errors("listing special points"):
            result = await db.execute(select(SpecialPoint).order_by(SpecialPoint.point_id))
            return [SpecialPointResponse.model_validate(p) for p in result.scalars().all()]

    async def list_points_for_trail(self, db: AsyncSession, trail_id: int) -> List[SpecialPointResponse]:
        """Points of one trail; an unknown trail yields an empty list."""
        with translate_db_errors("listing special points", trail_id=trail_id):
            result = await db.execute(
                select(SpecialPoint)
                .where(SpecialPoint.trail_id == trail_id)
                .order_by(SpecialPoint.point_id)
            )
            return [SpecialPointResponse.model_validate(p) for p in result.scalars().all()]

    async def get_point(self, db: AsyncSession, point_id: int) -> SpecialPointResponse:
        """Single point by id, or NotFoundError."""
        with translate_db_errors("fetching special point", point_id=point_id):
            result = await db.execute(select(SpecialPoint).where(SpecialPoint.point_id == point_id))
            point = result.scalar_one_or_none()

        if point is None:
            raise NotFoundError(resource="special point", resource_id=point_id)
        return SpecialPointResponse.model_validate(point)

    async def create_point(self, db: AsyncSession, data: SpecialPointCreate) -> int:
        """Insert one point and return its generated id."""
        point = SpecialPoint(trail_id=data.trail_id, name=data.name, lat=data.lat, lng=data.lng)
        with translate_db_errors("creating special point", trail_id=data.trail_id):
            db.add(point)
            await db.flush()

        logger.info("Special point created: %s (trail=%s)", point.point_id, point.trail_id)
        return point.point_id

    async def update_point(self, db: AsyncSession, point_id: int, data: SpecialPointUpdate) -> None:
        """Overwrite name and coordinates; NotFoundError if no row matched."""
        with translate_db_errors("updating special point", point_id=point_id):
            result = await db.execute(
                update(SpecialPoint)
                .where(SpecialPoint.point_id == point_id)
                .values(name=data.name, lat=data.lat, lng=data.lng)
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="special point", resource_id=point_id)

    async def delete_point(self, db: AsyncSession, point_id: int) -> None:
        """Hard delete; NotFoundError if no row matched."""
        with translate_db_errors("deleting special point", point_id=point_id):
            result = await db.execute(delete(SpecialPoint).where(SpecialPoint.point_id == point_id))

        if result.rowcount == 0:
            raise NotFoundError(resource="special point", resource_id=point_id)


special_point_service = SpecialPointService()
