"""
TrailMix Backend: User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table.
Who:   Used by UserService for registration, login and profile updates.

Lifecycle:
    Created at registration; mutated by profile and profile-image updates;
    never deleted by any exposed endpoint.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trailmix.database import Base


class User(Base):
    """
    A registered account.

    `password` holds a bcrypt hash, never plaintext. The public projection
    (see schemas.user) leaves it out.
    """

    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    profile_image_url: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, default=None
    )

    # Role tag embedded in issued tokens
    role: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="user",
        server_default=text("'user'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    trails: Mapped[List["Trail"]] = relationship(  # noqa: F821
        back_populates="owner",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, username='{self.username}')>"
