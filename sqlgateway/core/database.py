from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from sqlgateway.core.config import settings


def build_engine(url: Optional[str] = None) -> AsyncEngine:
    """Create the pooled engine shared by every request of the process."""
    return create_async_engine(
        url or settings.database_url,
        echo=settings.SQL_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


# Hands each request the pooled engine kept on app.state by the lifespan
async def get_engine(request: Request) -> AsyncEngine:
    return request.app.state.engine
