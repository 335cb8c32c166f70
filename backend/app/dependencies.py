"""FastAPI dependency injection utilities."""
import uuid as _uuid
from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.database import async_session_factory
from app.models.user import User
from app.services.analytics_service import MetricQueryEngine
from app.services.auth_service import decode_access_token
from app.services.metric_registry import parse_metric_set

security = HTTPBearer()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@lru_cache
def _all_mode_metrics():
    return parse_metric_set(settings.ANALYTICS_ALL_MODE_METRICS)


def get_query_engine(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> MetricQueryEngine:
    return MetricQueryEngine(
        session_factory,
        all_mode_metrics=_all_mode_metrics(),
        fetch_timeout=settings.ANALYTICS_FETCH_TIMEOUT_SECONDS,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract current user from JWT access token."""
    try:
        payload = decode_access_token(credentials.credentials)
        user_id = payload.get("sub")
        if user_id is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        user = await db.get(User, _uuid.UUID(user_id))
        if not user or not user.is_active:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or inactive user")
        return user
    except (JWTError, ValueError) as e:
        detail = "Token expired" if "expired" in str(e).lower() else "Invalid token"
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
