"""
TrailMix Backend: User Schemas
================================

What:  Request and response models for /api/users.

Projections:
    PublicUser   → returned by login (id, username, email, role)
    UserProfile  → returned by profile reads/updates (no password, no role)
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trailmix.schemas.trail import TrailResponse


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileUpdate(BaseModel):
    """
    Optional-field profile update.

    A field is "supplied" when it is not None after validation; blank
    strings are normalised to None. Only supplied fields are written,
    `name` landing in the `username` column.
    """
    name: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None

    @field_validator("name", "bio", "profile_image_url")
    @classmethod
    def blank_is_absent(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v

    def column_values(self) -> dict:
        """Column → value mapping for the supplied fields only."""
        values = {}
        if self.name is not None:
            values["username"] = self.name
        if self.bio is not None:
            values["bio"] = self.bio
        if self.profile_image_url is not None:
            values["profile_image_url"] = self.profile_image_url
        return values


# ══════════════════════════════════════════════════════════════════════════
# Identity & Response Models
# ══════════════════════════════════════════════════════════════════════════


class AuthenticatedUser(BaseModel):
    """Claims decoded from a verified bearer token."""
    id: int
    role: str = "user"


class PublicUser(BaseModel):
    id: int
    username: str
    email: str
    role: str


class LoginResponse(BaseModel):
    token: str
    user: PublicUser


class UserProfile(BaseModel):
    user_id: int
    username: str
    email: str
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserProfileWithTrails(UserProfile):
    trails: List[TrailResponse] = Field(default_factory=list)


class ProfileImageData(BaseModel):
    profile_image_url: str
