"""Repository for read operations.

Executes composed statements against an injected Session and maps rows
into domain entities (never SQLAlchemy objects). Store failures surface
as StoreUnavailableError; a missing single post is None.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any, Sequence

from sqlalchemy import Executable, Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quill.errors import InvalidPageRequestError, StoreUnavailableError
from quill.models.domain import (
    MAX_RANDOM_LIMIT,
    PageRequest,
    PageResult,
    PostEntity,
    TagEntity,
    UserEntity,
)
from quill.query.composer import (
    ComposedQuery,
    compose_post_list,
    compose_post_lookup,
    compose_random_posts,
    compose_tag_list,
    compose_tags_for_post,
    compose_tags_for_posts,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200
PREVIEW_ELLIPSIS = "..."


# ============================================================================
# Execution
# ============================================================================


def _execute(session: DbSession, statement: Executable) -> Result[Any]:
    """Execute a statement, converting driver failures to StoreUnavailableError."""
    try:
        return session.execute(statement)
    except SQLAlchemyError as e:
        logger.warning("Query failed: %s", e)
        raise StoreUnavailableError("backend unavailable") from e


def _count(session: DbSession, composed: ComposedQuery) -> int:
    return int(_execute(session, composed.count).scalar_one())


# ============================================================================
# Converters: rows -> Domain
# ============================================================================


def _row_to_post(row: Any) -> PostEntity:
    """Convert a POST_COLUMNS row to a PostEntity (tags left empty)."""
    return PostEntity(
        id=row.id,
        title=row.title,
        body=row.body,
        created_by=row.created_by,
        slug=row.slug,
        photo_url=row.photo_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
        published=row.published,
        view_count=row.view_count,
        like_count=row.like_count,
        user=UserEntity(id=row.user_id, username=row.username),
    )


def _row_to_tag(row: Any) -> TagEntity:
    """Convert a TAG_COLUMNS row to a TagEntity."""
    return TagEntity(id=row.id, name=row.name, created_at=row.created_at)


def truncate_preview(body: str, length: int = PREVIEW_LENGTH) -> str:
    """Cut body to length characters plus an ellipsis; shorter bodies are unchanged."""
    if len(body) <= length:
        return body
    return body[:length] + PREVIEW_ELLIPSIS


def _as_previews(posts: list[PostEntity]) -> list[PostEntity]:
    for post in posts:
        post.body = truncate_preview(post.body)
    return posts


# ============================================================================
# Tag fan-out
# ============================================================================


def group_tags_by_post(rows: Sequence[Any]) -> dict[str, list[TagEntity]]:
    """Group (tag columns, post_id) rows by post id, keeping row order.

    A tag repeated for the same post (duplicate association rows) is kept once.
    """
    grouped: dict[str, list[TagEntity]] = defaultdict(list)
    seen: set[tuple[str, str]] = set()
    for row in rows:
        key = (row.post_id, row.id)
        if key in seen:
            continue
        seen.add(key)
        grouped[row.post_id].append(_row_to_tag(row))
    return grouped


def attach_tags(session: DbSession, posts: list[PostEntity]) -> list[PostEntity]:
    """Resolve tags for every post with one query for the whole list.

    Posts without association rows get an empty tag list.
    """
    if not posts:
        return posts
    rows = _execute(session, compose_tags_for_posts([p.id for p in posts])).all()
    tags_by_post = group_tags_by_post(rows)
    for post in posts:
        post.tags = tags_by_post.get(post.id, [])
    return posts


# ============================================================================
# Post Repository
# ============================================================================


def _list_posts(
    session: DbSession, request: PageRequest, tag_name: str | None
) -> PageResult[PostEntity]:
    composed = compose_post_list(request, tag_name=tag_name)
    total = _count(session, composed)
    logger.debug(
        "Post listing tag=%r sort=%s total=%d offset=%d limit=%d",
        tag_name,
        composed.sort,
        total,
        request.offset,
        request.limit,
    )

    if request.offset >= total:
        posts: list[PostEntity] = []
    else:
        posts = [_row_to_post(r) for r in _execute(session, composed.fetch).all()]
        attach_tags(session, posts)

    return PageResult(
        items=_as_previews(posts),
        total=total,
        limit=request.limit,
        offset=request.offset,
    )


def list_posts(session: DbSession, request: PageRequest) -> PageResult[PostEntity]:
    """Get one page of visible posts with tags and preview bodies."""
    return _list_posts(session, request, tag_name=None)


def list_posts_by_tag(
    session: DbSession, tag_name: str, request: PageRequest
) -> PageResult[PostEntity]:
    """Get one page of visible posts carrying the exact tag name."""
    return _list_posts(session, request, tag_name=tag_name)


def get_random_posts(session: DbSession, limit: int) -> list[PostEntity]:
    """Get up to limit visible posts in random order, with tags and previews."""
    if not 1 <= limit <= MAX_RANDOM_LIMIT:
        raise InvalidPageRequestError(f"limit must be between 1 and {MAX_RANDOM_LIMIT}")
    posts = [_row_to_post(r) for r in _execute(session, compose_random_posts(limit)).all()]
    attach_tags(session, posts)
    return _as_previews(posts)


def get_post_by_username_and_slug(
    session: DbSession, username: str, slug: str
) -> PostEntity | None:
    """Get a visible post by author username and slug, with its full body and tags."""
    row = _execute(session, compose_post_lookup(username, slug)).first()
    if row is None:
        return None

    post = _row_to_post(row)
    tag_rows = _execute(session, compose_tags_for_post(post.id)).all()
    seen: set[str] = set()
    for tag_row in tag_rows:
        if tag_row.id in seen:
            continue
        seen.add(tag_row.id)
        post.tags.append(_row_to_tag(tag_row))
    return post


# ============================================================================
# Tag Repository
# ============================================================================


def list_tags(session: DbSession, request: PageRequest) -> PageResult[TagEntity]:
    """Get one page of tags ordered by name. Search and sort fields are ignored."""
    composed = compose_tag_list(request.offset, request.limit)
    total = _count(session, composed)
    tags = [_row_to_tag(r) for r in _execute(session, composed.fetch).all()]
    return PageResult(items=tags, total=total, limit=request.limit, offset=request.offset)
