"""
TrailMix Backend: Trail Route Handlers
========================================

What:  /api/trails: list, "my trails", detail, multipart create, update, delete.
How:   Thin handlers; TrailService owns persistence and media handling.
Who:   Called by the mobile app's map, trail detail and recording screens.

Route Order:
    GET /api/trails/user is registered before GET /api/trails/{trail_id}
    so the literal path is never parsed as an id.
"""

import logging
from datetime import date, time
from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from trailmix.database import get_db_session
from trailmix.middleware.auth import require_user
from trailmix.schemas.common import ErrorResponse, MessageResponse, SuccessResponse
from trailmix.schemas.trail import (
    TrailCreate,
    TrailCreated,
    TrailListItem,
    TrailResponse,
    TrailUpdate,
)
from trailmix.schemas.user import AuthenticatedUser
from trailmix.services.trail_service import trail_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trails", tags=["Trails"])


@router.get(
    "",
    response_model=List[TrailListItem],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List every trail with its creator",
)
async def list_trails(
    db: AsyncSession = Depends(get_db_session),
) -> List[TrailListItem]:
    return await trail_service.list_trails(db)


@router.get(
    "/user",
    response_model=List[TrailResponse],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Trails created by the authenticated user",
)
async def list_my_trails(
    current_user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[TrailResponse]:
    return await trail_service.list_user_trails(db, current_user.id)


@router.get(
    "/{trail_id}",
    response_model=TrailResponse,
    responses={404: {"description": "Trail not found", "model": ErrorResponse}},
    summary="Get a single trail by ID",
)
async def get_trail(
    trail_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> TrailResponse:
    return await trail_service.get_trail(db, trail_id)


@router.post(
    "",
    status_code=201,
    response_model=SuccessResponse[TrailCreated],
    responses={
        400: {"description": "Invalid media or special points", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a trail with optional photo, video and special points",
)
async def create_trail(
    name: str = Form(...),
    category: str | None = Form(default=None),
    description: str | None = Form(default=None),
    start_lat: float | None = Form(default=None),
    start_lng: float | None = Form(default=None),
    end_lat: float | None = Form(default=None),
    end_lng: float | None = Form(default=None),
    trail_date: date | None = Form(default=None),
    trail_time: time | None = Form(default=None),
    special_points: str | None = Form(
        default=None,
        description='JSON array, e.g. [{"name": "Lookout", "lat": 1.0, "lng": 2.0}]',
    ),
    photo: UploadFile | None = File(default=None, description="Any image/* file, max 100MB"),
    video: UploadFile | None = File(default=None, description="Any video/* file, max 100MB"),
    current_user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse[TrailCreated]:
    """
    Create a trail owned by the caller.

    Any owner field in the form is ignored; the owner comes from the token.
    """
    data = TrailCreate(
        name=name,
        category=category,
        description=description,
        start_lat=start_lat,
        start_lng=start_lng,
        end_lat=end_lat,
        end_lng=end_lng,
        trail_date=trail_date,
        trail_time=trail_time,
    )
    try:
        created = await trail_service.create_trail(
            db,
            owner_id=current_user.id,
            data=data,
            photo=photo,
            video=video,
            special_points=special_points,
        )
    finally:
        for upload in (photo, video):
            if upload is not None:
                await upload.close()

    return SuccessResponse[TrailCreated](data=created)


@router.put(
    "/{trail_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Trail not found", "model": ErrorResponse}},
    summary="Overwrite every field of a trail",
)
async def update_trail(
    trail_id: int,
    payload: TrailUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await trail_service.update_trail(db, trail_id, payload)
    return MessageResponse(message="Trail updated successfully")


@router.delete(
    "/{trail_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Trail not found", "model": ErrorResponse}},
    summary="Delete a trail and its special points",
)
async def delete_trail(
    trail_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await trail_service.delete_trail(db, trail_id)
    return MessageResponse(message="Trail deleted successfully")
