# This project was developed with assistance from AI tools.
"""
Async engine, session factory and FastAPI session dependency.

The engine is created at import time from ``DATABASE_URL``. Tests swap
``engine`` / ``SessionLocal`` or override ``get_db`` on the app.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .config import db_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


engine = create_async_engine(
    db_settings.DATABASE_URL,
    echo=db_settings.SQL_ECHO,
    pool_pre_ping=True,
)

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session; rolls back on error, always closes."""
    async with SessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


_DIALECT_NAMES = {
    "postgresql": "PostgreSQL",
    "sqlite": "SQLite",
}


class DatabaseService:
    """Connection-level helpers used by the health endpoint."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    @property
    def dialect_label(self) -> str:
        name = self.engine.dialect.name
        return _DIALECT_NAMES.get(name, name)

    async def health_check(self) -> tuple[bool, str]:
        """Run ``SELECT 1``. Returns (healthy, message)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning("Database health check failed: %s", exc)
            return False, f"{self.dialect_label} connection failed"
        return True, f"{self.dialect_label} connection OK"

    async def create_all(self) -> None:
        """Create all tables. Production deployments use Alembic instead."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


db_service = DatabaseService(engine=engine)


async def get_db_service() -> DatabaseService:
    """FastAPI dependency returning the module-level DatabaseService."""
    return db_service


async def init_db() -> None:
    """Create tables on the default engine (tests and local dev)."""
    logger.info("Initializing database tables")
    await db_service.create_all()
