"""Database Session Manager — async engine, per-request sessions, and transaction scopes.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - transaction() commits exactly once on success, rolls back on any exception
    - All SQLAlchemy exceptions escaping a session/transaction are mapped to DatabaseError
    - HouseHubError raised inside a transaction propagates unchanged after rollback
    - SQLite connections enforce foreign keys and let SQLAlchemy emit BEGIN itself,
      so ON DELETE CASCADE and SAVEPOINT behave as on PostgreSQL

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: returned entities stay readable after commit in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)

from househub.core.errors import DatabaseError, HouseHubError

logger = logging.getLogger(__name__)


def configure_sqlite(engine: AsyncEngine) -> None:
    """Install connection hooks for SQLite (foreign keys + explicit BEGIN)."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # driver-level autocommit; SQLAlchemy emits BEGIN in _on_begin
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_engine_for(
    database_url: str, pool_size: int = 20, max_overflow: int = 10, echo: bool = False,
) -> AsyncEngine:
    """Create the async engine, with pooling for servers and hooks for SQLite."""
    if database_url.startswith("sqlite"):
        engine = create_async_engine(database_url, echo=echo)
        configure_sqlite(engine)
        return engine
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
        echo: bool = False,
    ):
        self.engine = create_engine_for(
            database_url, pool_size=pool_size, max_overflow=max_overflow, echo=echo,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


@asynccontextmanager
async def transaction(
    db: AsyncSession, operation: str = "transaction",
) -> AsyncGenerator[AsyncSession, None]:
    """Unit of work: commit on success, roll back everything on failure.

    Domain errors are re-raised as-is; storage errors become DatabaseError so
    callers only ever see the HouseHubError hierarchy.
    """
    try:
        yield db
        await db.commit()
    except HouseHubError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"DB error during {operation}: {e}")
        raise DatabaseError("Database operation failed", operation) from e
    except BaseException:
        await db.rollback()
        raise


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
