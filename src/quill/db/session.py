"""Database session management.

Provides engine and session factories keyed by database URL, plus
pool warm-up for server start.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from quill.config import get_settings
from quill.db.schema import Base

logger = logging.getLogger(__name__)

# Module-level engine cache for connection pooling
_engine_cache: dict[str, Engine] = {}

# Module-level session factory cache
_session_factory_cache: dict[str, sessionmaker] = {}


def _resolve_url(database_url: str | None) -> str:
    if database_url is None:
        database_url = get_settings().database_url
    return database_url


def get_engine(database_url: str | None = None, pool_max_size: int | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by URL so every caller shares one connection pool.

    SQLite gets check_same_thread=False for FastAPI's threadpool; in-memory
    SQLite also uses StaticPool so all sessions see the same database.
    File SQLite and other backends get a QueuePool of pool_max_size
    connections. The size only applies when the engine is first created.

    Args:
        database_url: SQLAlchemy URL. Defaults to ``Settings.database_url``.
        pool_max_size: Pool size. Defaults to ``Settings.pool_max_size``.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    database_url = _resolve_url(database_url)

    if database_url in _engine_cache:
        return _engine_cache[database_url]

    if pool_max_size is None:
        pool_max_size = get_settings().pool_max_size

    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        database = url.database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                pool_size=pool_max_size,
                max_overflow=0,
            )
        else:
            engine = create_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
    else:
        engine = create_engine(
            database_url,
            echo=False,
            pool_size=pool_max_size,
            max_overflow=0,
            pool_pre_ping=True,
        )

    _engine_cache[database_url] = engine
    logger.debug("Created engine for %s", url.render_as_string(hide_password=True))

    return engine


def _get_session_factory(
    database_url: str | None = None, pool_max_size: int | None = None
) -> sessionmaker:
    """Get cached session factory for the database."""
    database_url = _resolve_url(database_url)

    if database_url in _session_factory_cache:
        return _session_factory_cache[database_url]

    factory = sessionmaker(bind=get_engine(database_url, pool_max_size=pool_max_size))
    _session_factory_cache[database_url] = factory

    return factory


def get_session(database_url: str | None = None, pool_max_size: int | None = None) -> Session:
    """Get a database session.

    Note: Caller is responsible for closing the session. For automatic
    resource management, use get_db_session() context manager instead.
    """
    factory = _get_session_factory(database_url, pool_max_size=pool_max_size)
    return factory()


@contextmanager
def get_db_session(database_url: str | None = None) -> Generator[Session, None, None]:
    """Context manager for read sessions with automatic cleanup.

    Rolls back on exception and always closes the session. Quill only
    reads, so nothing is committed.

    Example:
        with get_db_session() as session:
            page = repo.list_posts(session, request)
    """
    session = get_session(database_url)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(database_url: str | None = None) -> None:
    """Create all tables. Intended for local development and tests."""
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)


def warm_pool(engine: Engine, count: int) -> int:
    """Open up to ``count`` pooled connections ahead of the first request.

    Each connection runs ``SELECT 1``. Failures are logged and counted,
    never raised.

    Args:
        engine: Engine whose pool should be warmed.
        count: Requested number of connections; capped at the pool size.

    Returns:
        Number of connections that answered.
    """
    pool_size = getattr(engine.pool, "size", None)
    warm_count = min(count, pool_size()) if callable(pool_size) else min(count, 1)
    logger.info("Warming up pool with %d connections...", warm_count)

    connections = []
    ready = 0
    try:
        for _ in range(warm_count):
            try:
                conn = engine.connect()
            except SQLAlchemyError as e:
                logger.warning("Failed to warm connection: %s", e)
                continue
            connections.append(conn)
            try:
                conn.execute(text("SELECT 1"))
                ready += 1
            except SQLAlchemyError as e:
                logger.warning("Failed to warm connection: %s", e)
    finally:
        for conn in connections:
            conn.close()

    logger.info("Pool warmed: %d/%d connections ready", ready, warm_count)
    return ready
