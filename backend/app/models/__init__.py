"""SQLAlchemy ORM models."""
from app.models.base import Base, OwnedMixin, TimestampMixin, UUIDMixin
from app.models.user import User
from app.models.post import MediaType, Post
from app.models.analytics import (
    PostAnalyticsDaily,
    ProfileAnalyticsAccumulative,
    ProfileAnalyticsDaily,
)

__all__ = [
    "Base",
    "OwnedMixin",
    "TimestampMixin",
    "UUIDMixin",
    "User",
    "MediaType",
    "Post",
    "PostAnalyticsDaily",
    "ProfileAnalyticsDaily",
    "ProfileAnalyticsAccumulative",
]
