"""Create users, trails and special_points tables

Revision ID: 001
Revises: None
Create Date: 2024-03-02 00:00:00.000000+00:00

What:  Creates the initial schema: accounts, trails owned by accounts, and
       named special points along each trail.
How:   Integer identity keys; trails and special points cascade on delete
       of their parent row.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False, comment="bcrypt hash"),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_image_url", sa.String(255), nullable=True),
        sa.Column("role", sa.String(50), nullable=False, server_default=sa.text("'user'")),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "trails",
        sa.Column("trail_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("short_description", sa.Text(), nullable=True),
        sa.Column("start_lat", sa.Float(), nullable=True),
        sa.Column("start_lng", sa.Float(), nullable=True),
        sa.Column("end_lat", sa.Float(), nullable=True),
        sa.Column("end_lng", sa.Float(), nullable=True),
        sa.Column("photo_url", sa.String(255), nullable=True, comment="Public /uploads/... path"),
        sa.Column("video_url", sa.String(255), nullable=True, comment="Public /uploads/... path"),
        sa.Column("trail_date", sa.Date(), nullable=True),
        sa.Column("trail_time", sa.Time(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("trail_id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
    )
    op.create_index("ix_trails_user_id", "trails", ["user_id"])
    # Listings are always newest first
    op.create_index("idx_trails_created_at", "trails", [sa.text("created_at DESC")])

    op.create_table(
        "special_points",
        sa.Column("point_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("trail_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("point_id"),
        sa.ForeignKeyConstraint(["trail_id"], ["trails.trail_id"], ondelete="CASCADE"),
    )
    op.create_index("ix_special_points_trail_id", "special_points", ["trail_id"])


def downgrade() -> None:
    op.drop_index("ix_special_points_trail_id", table_name="special_points")
    op.drop_table("special_points")
    op.drop_index("idx_trails_created_at", table_name="trails")
    op.drop_index("ix_trails_user_id", table_name="trails")
    op.drop_table("trails")
    op.drop_table("users")
