from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ppdiff.core.config import settings


class Database:
    """Read-only access to the score database."""

    def __init__(self, url: str | None = None, echo: bool = settings.DATABASE_ECHO):
        self.url = url or settings.DATABASE_URL
        if not self.url:
            raise ValueError("DATABASE_URL is not configured")

        # Convert sqlite URL to async if needed
        if self.url.startswith("sqlite:///"):
            self.url = self.url.replace("sqlite:///", "sqlite+aiosqlite:///")

        self.engine: AsyncEngine = create_async_engine(self.url, echo=echo)
        self.async_session = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def get_session(self):
        """Get a database session"""
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self):
        """Close the database connection"""
        await self.engine.dispose()
        logger.info("Database engine disposed")
