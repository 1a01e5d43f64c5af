"""API dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.auth import get_auth_user
from skillpath.core.database import get_session
from skillpath.generation import RoadmapGenerator


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


def get_generator() -> RoadmapGenerator:
    """Roadmap generator backed by the configured chat model."""
    return RoadmapGenerator()


DBSession = Annotated[AsyncSession, Depends(get_db)]

# Auth user dependency - returns user_id (default: 1 when no header is sent)
CurrentUser = Annotated[int, Depends(get_auth_user)]

Generator = Annotated[RoadmapGenerator, Depends(get_generator)]
