"""Initial schema - users, posts and the three analytics tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column("id", UUID(as_uuid=True), primary_key=True)


def _owner_column() -> sa.Column:
    return sa.Column(
        "user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # --- 1. users ---
    op.create_table(
        "users",
        _id_column(),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamp_columns(),
    )

    # --- 2. posts ---
    op.create_table(
        "posts",
        _id_column(),
        _owner_column(),
        sa.Column("external_urn", sa.String(255), nullable=True),
        sa.Column("content", sa.Text, nullable=True),
        sa.Column("media_type", sa.String(50), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamp_columns(),
    )

    # --- 3. post_analytics_daily ---
    op.create_table(
        "post_analytics_daily",
        _id_column(),
        _owner_column(),
        sa.Column(
            "post_id", UUID(as_uuid=True), sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("analysis_date", sa.Date, nullable=False),
        sa.Column("impressions_gained", sa.Integer, nullable=True),
        sa.Column("unique_reach_gained", sa.Integer, nullable=True),
        sa.Column("reactions_gained", sa.Integer, nullable=True),
        sa.Column("comments_gained", sa.Integer, nullable=True),
        sa.Column("reposts_gained", sa.Integer, nullable=True),
        sa.Column("saves_gained", sa.Integer, nullable=True),
        sa.Column("sends_gained", sa.Integer, nullable=True),
        sa.Column("engagements_gained", sa.Integer, nullable=True),
        sa.Column("engagements_rate", sa.Float, nullable=True),
        *_timestamp_columns(),
        sa.UniqueConstraint("post_id", "analysis_date", name="uq_post_analytics_daily"),
    )

    # --- 4. profile_analytics_daily ---
    op.create_table(
        "profile_analytics_daily",
        _id_column(),
        _owner_column(),
        sa.Column("analysis_date", sa.Date, nullable=False),
        sa.Column("followers_gained", sa.Integer, nullable=True),
        sa.Column("profile_views_gained", sa.Integer, nullable=True),
        sa.Column("search_appearances_gained", sa.Integer, nullable=True),
        sa.Column("connections_gained", sa.Integer, nullable=True),
        *_timestamp_columns(),
        sa.UniqueConstraint("user_id", "analysis_date", name="uq_profile_analytics_daily"),
    )

    # --- 5. profile_analytics_accumulative ---
    op.create_table(
        "profile_analytics_accumulative",
        _id_column(),
        _owner_column(),
        sa.Column("analysis_date", sa.Date, nullable=False),
        sa.Column("followers_total", sa.Integer, nullable=True),
        sa.Column("profile_views_total", sa.Integer, nullable=True),
        sa.Column("search_appearances_total", sa.Integer, nullable=True),
        sa.Column("connections_total", sa.Integer, nullable=True),
        *_timestamp_columns(),
        sa.UniqueConstraint("user_id", "analysis_date", name="uq_profile_analytics_accumulative"),
    )

    # --- Indexes ---
    op.create_index("ix_posts_user_id", "posts", ["user_id"])
    op.create_index("ix_posts_user_media_type", "posts", ["user_id", "media_type"])
    op.create_index("ix_post_analytics_daily_user_id", "post_analytics_daily", ["user_id"])
    op.create_index("ix_post_analytics_daily_user_date", "post_analytics_daily", ["user_id", "analysis_date"])
    op.create_index("ix_profile_analytics_daily_user_id", "profile_analytics_daily", ["user_id"])
    op.create_index(
        "ix_profile_analytics_accumulative_user_id", "profile_analytics_accumulative", ["user_id"]
    )


def downgrade() -> None:
    op.drop_table("profile_analytics_accumulative")
    op.drop_table("profile_analytics_daily")
    op.drop_table("post_analytics_daily")
    op.drop_table("posts")
    op.drop_table("users")
