"""Ledger Database: async engine, sessions with rollback, schema bootstrap and health checks.

Invariants:
    - Every session rolls back on exception; nothing half-written is committed
    - SQLAlchemy failures surface as DatabaseError naming the store operation
    - SQLite URLs get no pool sizing (aiosqlite rejects those arguments)

Design Decisions:
    - Module-level db_manager set by init_db on startup; health checks read it
    - expire_on_commit=False: snapshot rows are read after the session closes
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from eastereggs.core.errors import DatabaseError, ErrorContext
from eastereggs.db.base import Base
import eastereggs.models  # noqa: F401

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_FAILURE_MESSAGES: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "integrity constraint violated"),
    (OperationalError, "connection or operational error"),
    (DBAPIError, "database driver error"),
    (SQLAlchemyError, "database operation failed"),
)


def _describe(error: SQLAlchemyError) -> str:
    return next(
        message for kind, message in _FAILURE_MESSAGES
        if isinstance(error, kind)
    )


class DatabaseSessionManager:
    """Owns the engine that backs ledger snapshots and the event log."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(
        self, operation: str = "query",
    ) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message = _describe(e)
            logger.error(
                f"Ledger store {operation} failed: {e}",
                extra={"operation": operation},
            )
            raise DatabaseError(
                message, operation, ErrorContext(operation=operation),
            ) from e
        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Create missing tables. Used when migrations are not run (SQLite, tests)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        try:
            async with self.session("health_check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Ledger store health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager
