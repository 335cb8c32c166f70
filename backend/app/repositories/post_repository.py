"""Post data access layer."""
import uuid as _uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.post import Post


async def list_ids_by_media_type(
    db: AsyncSession,
    *,
    user_id: _uuid.UUID,
    media_type: str,
) -> list[_uuid.UUID]:
    rows = (
        await db.execute(
            select(Post.id).where(Post.user_id == user_id, Post.media_type == media_type)
        )
    ).scalars().all()
    return list(rows)


async def create(db: AsyncSession, post: Post) -> Post:
    db.add(post)
    await db.flush()
    return post
