"""
Database engine, session management, and base model class.

This module sets up SQLAlchemy 2.0 with async support. Key components:

  - create_engine(): Builds the async engine (the bounded connection pool)
  - Base: Declarative base class that all ORM models inherit from
  - get_db(): FastAPI dependency that provides a session per request
  - check_connection(): Startup probe that logs the database server time

Pool lifecycle:
  The engine is not a module global. main.py creates it inside the lifespan
  manager, stores it (and its session factory) on app.state, and disposes of
  it on shutdown. Handlers only ever see a session injected by get_db().

Session lifecycle:
  Each request gets its own session via get_db(). The session is used as an
  async context manager, so its connection goes back to the pool on every
  exit path: success, validation failure, or exception.
"""

import logging
import ssl

from fastapi import Request
from sqlalchemy import make_url, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool

from auth_lookup.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def _insecure_ssl_context() -> ssl.SSLContext:
    """TLS context that encrypts traffic but skips certificate verification."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def create_engine(config: Settings = default_settings) -> AsyncEngine:
    """
    Create the async engine for ``config.DATABASE_URL``.

    Every database except in-memory SQLite gets a bounded queue pool of
    DB_POOL_SIZE + DB_MAX_OVERFLOW connections. In-memory SQLite keeps its
    single shared connection, since each new connection would be a new,
    empty database.
    """
    url = make_url(config.DATABASE_URL)
    kwargs: dict = {"echo": config.DEBUG}

    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return create_async_engine(url, **kwargs)
        kwargs["poolclass"] = AsyncAdaptedQueuePool
    else:
        kwargs["pool_pre_ping"] = True
        if config.DATABASE_SSL:
            kwargs["connect_args"] = {"ssl": _insecure_ssl_context()}

    kwargs["pool_size"] = config.DB_POOL_SIZE
    kwargs["max_overflow"] = config.DB_MAX_OVERFLOW

    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps attributes readable after commit without
    # a lazy reload, which would fail in async context.
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def check_connection(engine: AsyncEngine) -> bool:
    """
    Run a trivial query to confirm the database is reachable.

    Failure is logged with its stack trace but not raised: the service still
    starts, and requests fail individually with 500 until the database is back.
    """
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT CURRENT_TIMESTAMP"))
            logger.info("Connected to database, server time: %s", result.scalar_one())
        return True
    except (SQLAlchemyError, OSError):
        logger.exception("Database connectivity check failed")
        return False


async def get_db(request: Request):
    """
    FastAPI dependency that provides a database session.

    Usage in a route:
        @router.get("/items")
        async def list_items(db: AsyncSession = Depends(get_db)):
            ...

    The session is committed on success and rolled back on any exception,
    then closed (returning its connection to the pool).
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
