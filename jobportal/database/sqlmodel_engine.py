"""
Async engine and session lifecycle for the PostgreSQL document store.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from jobportal.core.config import Settings, get_settings
from jobportal.database.error_handling import StoreUnavailableError

logger = structlog.get_logger(__name__)


def _redact(url: str) -> str:
    """Drop credentials before a URL reaches the logs."""
    return url.rsplit("@", 1)[-1]


class SQLModelDatabaseManager:
    """Owns the async engine; sessions commit on success and roll back on error."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self._sessions: Optional[async_sessionmaker] = None

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    async def initialize(self) -> None:
        """
        Create the engine and the ``documents`` table with its indexes.

        Raises:
            StoreUnavailableError: If the database cannot be reached
        """
        if self.is_initialized:
            return

        url = self.settings.get_postgres_url()
        engine = create_async_engine(
            url,
            pool_size=self.settings.DB_POOL_SIZE,
            max_overflow=self.settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
            echo=self.settings.DB_ECHO,
            connect_args={"server_settings": {"application_name": self.settings.APP_NAME}},
        )

        # Registers DocumentTable and its partial unique indexes on the metadata
        from jobportal.models.document import DocumentTable  # noqa: F401

        try:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise StoreUnavailableError(
                f"Could not prepare document table at {_redact(url)}",
                original_error=e,
            )

        self.engine = engine
        self._sessions = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
        logger.info("Document table ready", database=_redact(url))

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        if self._sessions is None:
            raise RuntimeError("Database manager not initialized")

        async with self._sessions() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> Dict[str, Any]:
        if self.engine is None:
            return {"status": "unhealthy", "error": "not initialized"}

        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database health check failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

        return {
            "status": "healthy",
            "pool_size": self.engine.pool.size(),
            "checked_out": self.engine.pool.checkedout(),
        }

    async def shutdown(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self._sessions = None
        logger.info("Database connections closed")


_db_manager: Optional[SQLModelDatabaseManager] = None


def get_sqlmodel_db_manager(settings: Optional[Settings] = None) -> SQLModelDatabaseManager:
    """Process-wide database manager, created on first use."""
    global _db_manager
    if _db_manager is None:
        _db_manager = SQLModelDatabaseManager(settings or get_settings())
    return _db_manager


async def shutdown_sqlmodel_database() -> None:
    global _db_manager
    if _db_manager is not None:
        await _db_manager.shutdown()
        _db_manager = None
