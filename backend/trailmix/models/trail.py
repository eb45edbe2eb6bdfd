"""
TrailMix Backend: Trail SQLAlchemy Model
==========================================

What:  ORM model for the `trails` table.
Who:   Used by TrailService and by UserService (profile trail list).

Table Design:
    - user_id references users with ON DELETE CASCADE
    - start/end coordinates stored as separate latitude/longitude floats
    - photo_url / video_url hold public `/uploads/...` paths, never file bytes
    - created_at DESC index serves the "newest first" listings
"""

from datetime import date, datetime, time, timezone
from typing import List, Optional

from sqlalchemy import (
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trailmix.database import Base


class Trail(Base):
    """
    A trail recorded by one user.

    Query Patterns:
        - All trails with creator name, newest first (JOIN users)
        - Trails of one user, newest first
        - Single trail by primary key
    """

    __tablename__ = "trails"

    trail_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    start_lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    start_lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    end_lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    end_lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    photo_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    trail_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    trail_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    owner: Mapped["User"] = relationship(back_populates="trails")  # noqa: F821
    special_points: Mapped[List["SpecialPoint"]] = relationship(  # noqa: F821
        back_populates="trail",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_trails_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Trail(trail_id={self.trail_id}, name='{self.name}', user_id={self.user_id})>"
