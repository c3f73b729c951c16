"""
Todo API — Database Engine & Session Management
================================================

What:  Async SQLAlchemy engine construction, session factory, schema bootstrap
       and engine disposal.
Why:   Centralizes connection logic. The engine (and its pool) is built from the
       settings object passed in, so there is no import-time connection state.
How:   `create_engine(settings.database)` returns an AsyncEngine; the repository
       receives `create_session_factory(engine)` and opens one short transaction
       per statement.
Who:   Used by `create_app()` in main.py and by Alembic.

Connection Pooling Strategy (PostgreSQL):
    pool_size:      Persistent connections for normal load
    max_overflow:   Temporary connections for traffic spikes
    pool_pre_ping:  Validates connections before use (catches stale connections)
    pool_recycle:   Recycles connections every hour

    Pool arguments are only applied to PostgreSQL. SQLite (used in tests)
    picks its own pool class, which does not accept them.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from todo_api.config import DatabaseSettings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object between the models, the startup schema
    bootstrap and Alembic's --autogenerate.
    """
    pass


def create_engine(db_settings: DatabaseSettings, echo: bool = False) -> AsyncEngine:
    """
    Build the async engine for the configured store.

    Args:
        db_settings: Database section of the application settings.
        echo:        Log every SQL statement (enabled when log level is DEBUG).

    Returns:
        AsyncEngine. No connection is opened until first use.
    """
    url = db_settings.sqlalchemy_url
    kwargs = {"echo": echo}

    if db_settings.is_postgres:
        kwargs.update(
            pool_size=db_settings.pool_size,
            max_overflow=db_settings.max_overflow,
            pool_pre_ping=db_settings.pool_pre_ping,
            pool_recycle=3600,
            # asyncpg understands libpq sslmode names directly
            connect_args={"ssl": db_settings.sslmode},
        )

    logger.debug("Creating database engine for %s", url.render_as_string(hide_password=True))
    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps loaded attributes readable after the
    transaction closes, so repositories can hand detached Todo instances
    back to the service layer.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def check_connection(engine: AsyncEngine) -> None:
    """Round-trip a `SELECT 1`. Raises the driver error if the store is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def init_schema(engine: AsyncEngine) -> None:
    """
    Create the tables registered on `Base.metadata` if they do not exist.

    Idempotent: existing tables are left untouched. Production deployments
    can disable this (`APP_DATABASE__CREATE_SCHEMA=false`) and run
    `alembic upgrade head` instead.
    """
    # Models must be imported so their tables are registered on the metadata
    from todo_api.models import todo  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
