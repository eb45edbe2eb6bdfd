"""
TrailMix Backend: SpecialPoint SQLAlchemy Model
=================================================

What:  ORM model for the `special_points` table (named waypoints).
Who:   Used by SpecialPointService and by TrailService's bulk insert.
"""

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trailmix.database import Base


class SpecialPoint(Base):
    """A named waypoint belonging to exactly one trail."""

    __tablename__ = "special_points"

    point_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    trail_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("trails.trail_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)

    trail: Mapped["Trail"] = relationship(back_populates="special_points")  # noqa: F821

    def __repr__(self) -> str:
        return f"<SpecialPoint(point_id={self.point_id}, trail_id={self.trail_id}, name='{self.name}')>"
