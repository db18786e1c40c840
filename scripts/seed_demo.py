#!/usr/bin/env python3
"""Seed a demo database with authors, tags and posts.

Usage:
    python scripts/seed_demo.py

This script:
1. Initializes the demo database schema
2. Seeds two authors and a handful of tags
3. Seeds published, draft and soft-deleted posts with tag associations

Re-running drops and recreates all tables.
"""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from quill.db.schema import Base, Post, PostTag, Tag, User  # noqa: E402
from quill.db.session import get_db_session, get_engine  # noqa: E402

# Constants
DEMO_DB_URL = f"sqlite:///{PROJECT_ROOT / 'demo.db'}"

DEMO_USERS = ["ada", "grace"]
DEMO_TAGS = ["databases", "python", "rust", "web"]

# (author, slug, title, tags, published, deleted)
DEMO_POSTS = [
    ("ada", "hello-quill", "Hello Quill", ["web"], True, False),
    ("ada", "sqlalchemy-core", "Composing Queries with SQLAlchemy Core", ["databases", "python"], True, False),
    ("ada", "n-plus-one", "Avoiding N+1 Tag Lookups", ["databases"], True, False),
    ("grace", "ownership", "Ownership for Pythonistas", ["python", "rust"], True, False),
    ("grace", "draft-notes", "Draft Notes", ["python"], False, False),
    ("grace", "old-post", "An Old Post", ["web"], True, True),
]

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. "
)


def reset_schema() -> None:
    """Drop and recreate all tables in the demo database."""
    engine = get_engine(DEMO_DB_URL)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    print(f"Initialized schema: {DEMO_DB_URL}")


def seed() -> None:
    """Insert demo users, tags, posts and associations."""
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    with get_db_session(DEMO_DB_URL) as session:
        users = {name: User(username=name) for name in DEMO_USERS}
        tags = {name: Tag(name=name, created_at=base_time) for name in DEMO_TAGS}
        session.add_all([*users.values(), *tags.values()])
        session.flush()

        for index, (author, slug, title, tag_names, published, deleted) in enumerate(DEMO_POSTS):
            created = base_time + timedelta(days=index)
            post = Post(
                title=title,
                body=LOREM * (index + 1),
                created_by=users[author].id,
                slug=slug,
                published=published,
                created_at=created,
                updated_at=created,
                deleted_at=created + timedelta(days=30) if deleted else None,
                view_count=(index + 1) * 17,
                like_count=(index * 5) % 11,
            )
            session.add(post)
            session.flush()
            session.add_all(PostTag(post_id=post.id, tag_id=tags[name].id) for name in tag_names)
            print(f"  Seeded post: {author}/{slug}")

        session.commit()


def main() -> int:
    """Seed the demo database."""
    print("=" * 60)
    print("Seeding Quill demo database")
    print("=" * 60)

    reset_schema()
    seed()

    print("\nDone. Start the API with:")
    print(f"  QUILL_DATABASE_URL={DEMO_DB_URL} uvicorn quill.api.app:app")
    return 0


if __name__ == "__main__":
    sys.exit(main())
