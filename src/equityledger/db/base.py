"""Database connection and session management."""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from equityledger.config import settings
from equityledger.observability.metrics import metrics


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def engine_options(database_url: str) -> dict[str, Any]:
    """Pool and driver options bounding every store call by the configured timeout."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"timeout": settings.store_timeout_seconds}}
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.store_timeout_seconds,
    }
    if database_url.startswith("postgresql+asyncpg"):
        options["connect_args"] = {
            "timeout": settings.store_timeout_seconds,
            "command_timeout": settings.store_timeout_seconds,
        }
    return options


def configure_sqlite(target_engine: AsyncEngine) -> None:
    """Let SQLAlchemy own BEGIN so SAVEPOINT-based units of work roll back correctly."""
    sync_engine = target_engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def attach_query_metrics(target_engine: AsyncEngine) -> None:
    """Attach SQLAlchemy event listeners for query metrics."""
    sync_engine = target_engine.sync_engine
    if getattr(sync_engine, "_equityledger_metrics_attached", False):
        return

    @event.listens_for(sync_engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info["query_start_time"] = time.perf_counter()

    @event.listens_for(sync_engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        start_time = conn.info.pop("query_start_time", None)
        if start_time is None:
            return
        metrics.inc_counter("db.query.count")
        metrics.observe("db.query.duration_ms", (time.perf_counter() - start_time) * 1000.0)

    sync_engine._equityledger_metrics_attached = True


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine wired with timeouts, metrics and dialect fixes."""
    new_engine = create_async_engine(database_url, echo=echo, **engine_options(database_url))
    if database_url.startswith("sqlite"):
        configure_sqlite(new_engine)
    attach_query_metrics(new_engine)
    return new_engine


# Create async engine
engine = build_engine(settings.database_url, echo=settings.debug)

# Create async session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session committed on success, rolled back on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
