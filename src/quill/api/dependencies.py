"""FastAPI dependencies shared by route modules."""

from __future__ import annotations

from typing import Generator

from fastapi import Request

from quill.db.repo import DbSession
from quill.db.session import get_session


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    The engine is sized from the Settings the app was created with.

    Yields:
        Database session that is automatically closed after request.
    """
    settings = request.app.state.settings
    session = get_session(settings.database_url, pool_max_size=settings.pool_max_size)
    try:
        yield session
    finally:
        session.close()
