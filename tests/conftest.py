"""Shared pytest fixtures for quill tests."""

from contextlib import contextmanager
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from quill.config import Settings
from quill.db.schema import Base, Post, PostTag, Tag, User

LONG_BODY = "x" * 250


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


def seed_blog(engine) -> None:
    """Seed two authors, three tags and five posts.

    Visible: post-1 (alice; python, web), post-2 (alice; rust; 250-char body),
    post-3 (bob; no tags). Hidden: post-4 unpublished, post-5 soft-deleted.
    """
    with Session(engine) as db_session:
        db_session.add_all(
            [
                User(id="u-alice", username="alice"),
                User(id="u-bob", username="bob"),
                Tag(id="t-python", name="python", created_at=datetime(2024, 1, 1)),
                Tag(id="t-rust", name="rust", created_at=datetime(2024, 1, 1)),
                Tag(id="t-web", name="web", created_at=datetime(2024, 1, 1)),
                Post(
                    id="post-1",
                    title="Hello World",
                    body="First post about Python",
                    created_by="u-alice",
                    slug="hello-world",
                    published=True,
                    created_at=datetime(2024, 1, 1),
                    updated_at=datetime(2024, 1, 5),
                    view_count=10,
                    like_count=1,
                ),
                Post(
                    id="post-2",
                    title="Rust Tips",
                    body=LONG_BODY,
                    created_by="u-alice",
                    slug="rust-tips",
                    published=True,
                    created_at=datetime(2024, 1, 2),
                    updated_at=datetime(2024, 1, 2),
                    view_count=5,
                    like_count=7,
                ),
                Post(
                    id="post-3",
                    title="Cooking",
                    body="Nothing technical here",
                    created_by="u-bob",
                    slug="cooking",
                    published=True,
                    created_at=datetime(2024, 1, 3),
                    updated_at=datetime(2024, 1, 3),
                    view_count=20,
                    like_count=3,
                ),
                Post(
                    id="post-4",
                    title="Draft Python",
                    body="Not ready",
                    created_by="u-bob",
                    slug="draft",
                    published=False,
                    created_at=datetime(2024, 1, 4),
                    updated_at=datetime(2024, 1, 4),
                ),
                Post(
                    id="post-5",
                    title="Removed Python",
                    body="Gone",
                    created_by="u-bob",
                    slug="removed",
                    published=True,
                    created_at=datetime(2024, 1, 5),
                    updated_at=datetime(2024, 1, 5),
                    deleted_at=datetime(2024, 1, 6),
                ),
            ]
        )
        db_session.flush()
        db_session.add_all(
            [
                PostTag(post_id="post-1", tag_id="t-web"),
                PostTag(post_id="post-1", tag_id="t-python"),
                PostTag(post_id="post-2", tag_id="t-rust"),
                PostTag(post_id="post-4", tag_id="t-python"),
                PostTag(post_id="post-5", tag_id="t-python"),
            ]
        )
        db_session.commit()


@pytest.fixture
def blog(engine):
    """Engine seeded with the standard blog fixture."""
    seed_blog(engine)
    return engine


@pytest.fixture
def client(blog):
    """TestClient bound to the seeded in-memory database."""
    from quill.api.app import create_app, get_db_session

    app = create_app(Settings(database_url="sqlite:///:memory:", pool_min_connections=0))

    def override_get_db():
        with Session(blog) as db_session:
            yield db_session

    app.dependency_overrides[get_db_session] = override_get_db
    return TestClient(app)


@contextmanager
def recorded_statements(engine):
    """Collect every SQL statement sent to the engine inside the block."""
    statements: list[str] = []

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", before_cursor_execute)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", before_cursor_execute)


@pytest.fixture
def record_statements():
    """Expose recorded_statements to tests as a fixture."""
    return recorded_statements
