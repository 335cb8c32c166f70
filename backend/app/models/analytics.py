"""Daily analytics ORM models.

Rows are written by the ingestion pipeline and only read here. Each
``*_gained`` column holds the delta observed on ``analysis_date``.
"""
import uuid
from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, OwnedMixin, TimestampMixin, UUIDMixin


class PostAnalyticsDaily(Base, UUIDMixin, OwnedMixin, TimestampMixin):
    __tablename__ = "post_analytics_daily"
    __table_args__ = (
        UniqueConstraint("post_id", "analysis_date", name="uq_post_analytics_daily"),
        Index("ix_post_analytics_daily_user_date", "user_id", "analysis_date"),
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    analysis_date: Mapped[date] = mapped_column(Date, nullable=False)

    impressions_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    unique_reach_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reactions_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comments_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reposts_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    saves_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sends_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    engagements_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    engagements_rate: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Relationships
    post = relationship("Post", back_populates="daily_analytics")


class ProfileAnalyticsDaily(Base, UUIDMixin, OwnedMixin, TimestampMixin):
    __tablename__ = "profile_analytics_daily"
    __table_args__ = (
        UniqueConstraint("user_id", "analysis_date", name="uq_profile_analytics_daily"),
    )

    analysis_date: Mapped[date] = mapped_column(Date, nullable=False)

    followers_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    profile_views_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    search_appearances_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)
    connections_gained: Mapped[int | None] = mapped_column(Integer, nullable=True)


class ProfileAnalyticsAccumulative(Base, UUIDMixin, OwnedMixin, TimestampMixin):
    __tablename__ = "profile_analytics_accumulative"
    __table_args__ = (
        UniqueConstraint("user_id", "analysis_date", name="uq_profile_analytics_accumulative"),
    )

    analysis_date: Mapped[date] = mapped_column(Date, nullable=False)

    followers_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
    profile_views_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
    search_appearances_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
    connections_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
