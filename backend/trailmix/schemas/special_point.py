"""
TrailMix Backend: Special Point Schemas
=========================================
"""

from pydantic import BaseModel, ConfigDict, Field


class SpecialPointCreate(BaseModel):
    trail_id: int
    name: str = Field(min_length=1)
    lat: float
    lng: float


class SpecialPointUpdate(BaseModel):
    name: str = Field(min_length=1)
    lat: float
    lng: float


class SpecialPointResponse(BaseModel):
    point_id: int
    trail_id: int
    name: str
    lat: float
    lng: float

    model_config = ConfigDict(from_attributes=True)


class SpecialPointCreated(BaseModel):
    """Serialized as `{"message": ..., "pointId": ...}`."""
    message: str = "Special point created successfully"
    point_id: int = Field(alias="pointId")

    model_config = ConfigDict(populate_by_name=True)
