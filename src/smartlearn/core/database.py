"""
Database Configuration

Async SQLAlchemy engine, session factory and declarative base.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from smartlearn.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields a database session per request.

    The session is rolled back if the request handler raises.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Initialize the database connection.

    In development the schema is created from the ORM metadata so the API
    can run against an empty database.
    """
    # Import models so they register on Base.metadata
    from smartlearn.modules.courses import models as _courses  # noqa: F401
    from smartlearn.modules.submissions import models as _submissions  # noqa: F401
    from smartlearn.modules.tasks import models as _tasks  # noqa: F401
    from smartlearn.modules.users import models as _users  # noqa: F401

    async with engine.begin() as conn:
        if settings.is_development:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database schema ensured from ORM metadata")


async def close_db() -> None:
    """Dispose of the engine connection pool."""
    await engine.dispose()
