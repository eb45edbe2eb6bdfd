"""
TrailMix Backend: Special Point Route Handlers
================================================

What:  /api/special-points CRUD, plus lookup by parent trail.
Who:   Called by the trail detail screen. These routes are unauthenticated.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from trailmix.database import get_db_session
from trailmix.schemas.common import ErrorResponse, MessageResponse
from trailmix.schemas.special_point import (
    SpecialPointCreate,
    SpecialPointCreated,
    SpecialPointResponse,
    SpecialPointUpdate,
)
from trailmix.services.special_point_service import special_point_service

router = APIRouter(prefix="/api/special-points", tags=["Special Points"])

_NOT_FOUND = {404: {"description": "Special point not found", "model": ErrorResponse}}


@router.get("", response_model=List[SpecialPointResponse], summary="List every special point")
async def list_points(
    db: AsyncSession = Depends(get_db_session),
) -> List[SpecialPointResponse]:
    return await special_point_service.list_points(db)


@router.get(
    "/trail/{trail_id}",
    response_model=List[SpecialPointResponse],
    summary="Special points of one trail",
)
async def list_points_for_trail(
    trail_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[SpecialPointResponse]:
    return await special_point_service.list_points_for_trail(db, trail_id)


@router.get(
    "/{point_id}",
    response_model=SpecialPointResponse,
    responses=_NOT_FOUND,
    summary="Get a single special point by ID",
)
async def get_point(
    point_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> SpecialPointResponse:
    return await special_point_service.get_point(db, point_id)


@router.post(
    "",
    status_code=201,
    response_model=SpecialPointCreated,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Create a special point",
)
async def create_point(
    payload: SpecialPointCreate,
    db: AsyncSession = Depends(get_db_session),
) -> SpecialPointCreated:
    point_id = await special_point_service.create_point(db, payload)
    return SpecialPointCreated(point_id=point_id)


@router.put(
    "/{point_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Update a special point",
)
async def update_point(
    point_id: int,
    payload: SpecialPointUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await special_point_service.update_point(db, point_id, payload)
    return MessageResponse(message="Special point updated successfully")


@router.delete(
    "/{point_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a special point",
)
async def delete_point(
    point_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await special_point_service.delete_point(db, point_id)
    return MessageResponse(message="Special point deleted successfully")
