"""Published post ORM model."""
import enum
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, OwnedMixin, TimestampMixin, UUIDMixin


class MediaType(str, enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    CAROUSEL = "carousel"
    DOCUMENT = "document"
    ARTICLE = "article"
    POLL = "poll"


class Post(Base, UUIDMixin, OwnedMixin, TimestampMixin):
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_user_media_type", "user_id", "media_type"),
    )

    external_urn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Stored as free text: ingestion may deliver tags outside MediaType.
    media_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    owner = relationship("User", back_populates="posts")
    daily_analytics = relationship("PostAnalyticsDaily", back_populates="post", lazy="noload")
