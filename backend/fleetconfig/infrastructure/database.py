"""Database Session Manager — one async engine per process, one session per request.

Invariants:
    - A session whose request raises is rolled back before it is closed
    - SQLAlchemy errors that escape the stores are still mapped to DatabaseError
      (core/errors.py), tagged with the failing phase
    - FleetConfigError raised inside a session passes through unchanged
    - dispose() releases pooled connections on shutdown

Design Decisions:
    - Module-level db_manager set by init_db() from the lifespan; tests swap it out
    - expire_on_commit=False: stores return domain objects built after commit
    - SQLite URLs skip pool sizing (aiosqlite uses a static/null pool)
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

from fleetconfig.core.errors import DatabaseError, ErrorContext, FleetConfigError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError/OperationalError are DBAPIError subclasses.
_ERROR_PHASES: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "commit"),
    (OperationalError, "connection"),
    (DBAPIError, "query"),
    (SQLAlchemyError, "session"),
)


def _phase_of(error: SQLAlchemyError) -> str:
    for error_type, phase in _ERROR_PHASES:
        if isinstance(error, error_type):
            return phase
    return "session"


class DatabaseSessionManager:
    """Owns the engine and hands out request-scoped sessions."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=pool_recycle,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except FleetConfigError:
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            phase = _phase_of(e)
            logger.error(
                f"Unhandled database error during {phase}: {e}",
                extra={"operation": phase},
            )
            raise DatabaseError(phase, ErrorContext(operation=phase)) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True if a trivial query round-trips."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized; call init_db() first")
    async with db_manager.session() as session:
        yield session
