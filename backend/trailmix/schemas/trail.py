"""
TrailMix Backend: Trail Schemas
=================================

What:  Request and response models for /api/trails.

Field naming follows the table columns, except for the creation endpoint
which accepts and echoes `description` (stored as `short_description`).
"""

from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TrailResponse(BaseModel):
    """Full trail row."""
    trail_id: int
    user_id: int
    name: str
    category: Optional[str] = None
    short_description: Optional[str] = None
    start_lat: Optional[float] = None
    start_lng: Optional[float] = None
    end_lat: Optional[float] = None
    end_lng: Optional[float] = None
    photo_url: Optional[str] = None
    video_url: Optional[str] = None
    trail_date: Optional[date] = None
    trail_time: Optional[time] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TrailListItem(TrailResponse):
    """Trail row joined with the creator's username."""
    creator_name: str


class TrailCreate(BaseModel):
    """Trail fields taken from the multipart form of POST /api/trails."""
    name: str = Field(min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    start_lat: Optional[float] = None
    start_lng: Optional[float] = None
    end_lat: Optional[float] = None
    end_lng: Optional[float] = None
    trail_date: Optional[date] = None
    trail_time: Optional[time] = None


class TrailCreated(BaseModel):
    """
    Response body of trail creation.

    `special_points` echoes what the client sent, whether or not the
    secondary insert persisted them.
    """
    id: int
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    start_lat: Optional[float] = None
    start_lng: Optional[float] = None
    end_lat: Optional[float] = None
    end_lng: Optional[float] = None
    video_url: Optional[str] = None
    photo_url: Optional[str] = None
    trail_date: Optional[date] = None
    trail_time: Optional[time] = None
    special_points: List[Dict[str, Any]] = Field(default_factory=list)


class TrailUpdate(BaseModel):
    """
    Full field set for PUT /api/trails/{id}.

    Every mutable column is overwritten; omitted optional fields become null.
    """
    name: str = Field(min_length=1)
    category: Optional[str] = None
    short_description: Optional[str] = None
    start_lat: Optional[float] = None
    start_lng: Optional[float] = None
    end_lat: Optional[float] = None
    end_lng: Optional[float] = None
    video_url: Optional[str] = None
    photo_url: Optional[str] = None
    trail_date: Optional[date] = None
    trail_time: Optional[time] = None
