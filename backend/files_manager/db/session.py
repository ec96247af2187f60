"""SQLite engine and sessions for the metadata store."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from files_manager.config import Settings

Base = declarative_base()
log = logging.getLogger(__name__)


class Database:
    """Engine plus session factory. Built once at startup and disposed at shutdown."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.engine = create_async_engine(url, echo=False)
        self._async_session = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(settings.database_url)

    async def init(self) -> None:
        """Create tables if they do not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield an async session (context manager)."""
        async with self._async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def is_alive(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            log.warning("Database ping failed: %s", e)
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async session from the app's database."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
