"""Database Session Manager — one async engine per process, one session per request.

Invariants:
    - A session that sees any exception is rolled back before the exception
      leaves session(); CancelledError from a request deadline included
    - SQLAlchemy failures that escape a repository leave as StorageError
      carrying the failing phase (commit / execute / query / unknown)
    - Sessions are always closed, returning the connection to the pool

Design Decisions:
    - No module-level singleton: the manager is built in the FastAPI lifespan,
      kept on app.state and reached through the request (get_db)
    - expire_on_commit=False: returned rows stay readable after commit in async code
    - insert_ignoring_conflicts picks the dialect insert at call time, so the
      same repositories run on PostgreSQL and on the SQLite test database
"""

import logging
import ssl
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import Request
from sqlalchemy import func, select, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from ledger.core.errors import StorageError
from ledger.models.operation_type import OperationType

logger = logging.getLogger(__name__)


def _failed_phase(exc: SQLAlchemyError) -> str:
    # Order matters: IntegrityError and OperationalError are DBAPIErrors
    if isinstance(exc, IntegrityError):
        return "commit"
    if isinstance(exc, OperationalError):
        return "execute"
    if isinstance(exc, DBAPIError):
        return "query"
    return "unknown"


def asyncpg_connect_args(
    database_url: str,
    application_name: str | None = None,
    ssl_root_cert: str | None = None,
) -> dict[str, Any]:
    """Driver keywords for asyncpg URLs; empty for every other driver."""
    if not database_url.startswith("postgresql+asyncpg"):
        return {}
    connect_args: dict[str, Any] = {}
    if application_name:
        connect_args["server_settings"] = {"application_name": application_name}
    if ssl_root_cert:
        connect_args["ssl"] = ssl.create_default_context(cafile=ssl_root_cert)
    return connect_args


class DatabaseSessionManager:
    """Owns the async engine and hands out request-scoped sessions."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        application_name: str | None = None,
        ssl_root_cert: str | None = None,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
            connect_args=asyncpg_connect_args(
                database_url, application_name, ssl_root_cert,
            ),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Request-scoped session; rolls back on any exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            phase = _failed_phase(e)
            logger.error(
                f"Database failure during {phase}: {e}",
                extra={"operation": phase},
            )
            raise StorageError(phase) from e
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when a round trip to the database succeeds."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
        return True

    async def count_operation_types(self) -> int | None:
        """Seeded operation types, or None when the table is missing or unreachable."""
        try:
            async with self.session() as db:
                return await db.scalar(
                    select(func.count()).select_from(OperationType),
                )
        except Exception as e:
            logger.error(f"Operation type check failed: {e}")
            return None

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request from app.state.db_manager."""
    db_manager: DatabaseSessionManager | None = getattr(
        request.app.state, "db_manager", None,
    )
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session


def insert_ignoring_conflicts(
    db: AsyncSession, model: type, values: dict[str, Any],
):
    """INSERT ... ON CONFLICT (id) DO NOTHING for the session's dialect."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model)
    else:
        raise NotImplementedError(f"conflict-ignore insert unsupported for {dialect}")
    return stmt.values(**values).on_conflict_do_nothing(index_elements=["id"])
