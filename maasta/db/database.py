"""
Database configuration with async support
"""

import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel
from typing import AsyncGenerator

from maasta.core.config import settings

# Configure logging based on environment
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

logger.info(f"Environment: {getattr(settings, 'ENVIRONMENT', 'Unknown')}")
logger.info(f"Database URL configured: {bool(settings.DATABASE_URL)}")

async_engine = create_async_engine(
    settings.ASYNC_DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    future=True,
    pool_size=20,
    max_overflow=30,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args={
        "server_settings": {
            "application_name": "maasta_backend",
        }
    }
)

# Async session factory. The swipe flow and background tasks open their own
# sessions from it so a timed-out step never shares a session with the next one.
AsyncSessionLocal = sessionmaker(
    bind=async_engine,
    class_=AsyncSessionSQLModel,
    expire_on_commit=False,
    autoflush=False
)


async def init_db():
    """Initialize database tables"""
    import maasta.models  # noqa: F401  registers every table on the metadata

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async database session dependency
    Usage:
    async def some_endpoint(db: AsyncSession = Depends(get_db)):
        ...
    """
    try:
        async with AsyncSessionLocal() as session:
            yield session
    except Exception as e:
        logger.error(f"Database session failed: {str(e)}", exc_info=True)
        raise


def get_session_factory():
    """Dependency returning the factory used for independently time-boxed steps."""
    return AsyncSessionLocal
