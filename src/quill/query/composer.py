"""Statement composition for post and tag reads.

Every list operation produces a ComposedQuery: a count statement and a
page-fetch statement built from the same FROM clause and the same
criteria list, so bound parameters appear in the same order in both and
the fetch only adds LIMIT/OFFSET. Values are always bound; the only
identifiers taken from the client go through the sort allow-list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import ColumnElement, FromClause, Select, distinct, func, select

from quill.db.schema import Post, PostTag, Tag, User
from quill.models.domain import PageRequest
from quill.query.search import search_predicate
from quill.query.sorting import SortSpec, order_clauses, resolve_sort

POST_COLUMNS = (
    Post.id,
    Post.title,
    Post.body,
    Post.created_by,
    Post.slug,
    Post.photo_url,
    Post.created_at,
    Post.updated_at,
    Post.deleted_at,
    Post.published,
    Post.view_count,
    Post.like_count,
    User.id.label("user_id"),
    User.username,
)

TAG_COLUMNS = (Tag.id, Tag.name, Tag.created_at)


@dataclass(frozen=True)
class ComposedQuery:
    """Count and fetch statements for one paginated list request."""

    count: Select
    fetch: Select
    sort: SortSpec | None = None


# ============================================================================
# Shared building blocks
# ============================================================================


def visible_criteria() -> list[ColumnElement[bool]]:
    """Published and not soft-deleted."""
    return [Post.published.is_(True), Post.deleted_at.is_(None)]


def _post_source(tag_name: str | None = None) -> FromClause:
    """posts JOIN users, plus the tag association when filtering by tag."""
    source = Post.__table__.join(User.__table__, Post.created_by == User.id)
    if tag_name is not None:
        source = source.join(PostTag.__table__, PostTag.post_id == Post.id).join(
            Tag.__table__, PostTag.tag_id == Tag.id
        )
    return source


def _post_criteria(tag_name: str | None, search: str | None) -> list[ColumnElement[bool]]:
    """Filter predicates in bind order: tag name, visibility, search."""
    criteria: list[ColumnElement[bool]] = []
    if tag_name is not None:
        criteria.append(Tag.name == tag_name)
    criteria.extend(visible_criteria())
    predicate = search_predicate(search)
    if predicate is not None:
        criteria.append(predicate)
    return criteria


# ============================================================================
# Post statements
# ============================================================================


def compose_post_list(request: PageRequest, tag_name: str | None = None) -> ComposedQuery:
    """Compose count and page statements for a post listing.

    Args:
        request: Validated paging/search/sort parameters.
        tag_name: Exact tag name to filter by, or None for all posts.

    Returns:
        ComposedQuery whose count is COUNT(DISTINCT posts.id) and whose
        fetch is DISTINCT when a tag join could repeat rows.
    """
    sort = resolve_sort(request.order_by, request.order_direction)
    source = _post_source(tag_name)
    criteria = _post_criteria(tag_name, request.search)

    count = select(func.count(distinct(Post.id))).select_from(source).where(*criteria)

    fetch = select(*POST_COLUMNS).select_from(source).where(*criteria)
    if tag_name is not None:
        fetch = fetch.distinct()
    fetch = fetch.order_by(*order_clauses(sort)).limit(request.limit).offset(request.offset)

    return ComposedQuery(count=count, fetch=fetch, sort=sort)


def compose_post_lookup(username: str, slug: str) -> Select:
    """Select one visible post by author username and slug."""
    return (
        select(*POST_COLUMNS)
        .select_from(_post_source())
        .where(User.username == username, Post.slug == slug, *visible_criteria())
        .limit(1)
    )


def compose_random_posts(limit: int) -> Select:
    """Select an unordered random sample of visible posts."""
    return (
        select(*POST_COLUMNS)
        .select_from(_post_source())
        .where(*visible_criteria())
        .order_by(func.random())
        .limit(limit)
    )


# ============================================================================
# Tag statements
# ============================================================================


def compose_tags_for_post(post_id: str) -> Select:
    """Select one post's tags ordered by name."""
    return (
        select(*TAG_COLUMNS)
        .join_from(Tag, PostTag, PostTag.tag_id == Tag.id)
        .where(PostTag.post_id == post_id)
        .order_by(Tag.name)
    )


def compose_tags_for_posts(post_ids: Sequence[str]) -> Select:
    """Select (tag, post_id) pairs for a whole page of posts in one statement.

    The id list is bound as a single expanding IN parameter.
    """
    return (
        select(*TAG_COLUMNS, PostTag.post_id)
        .join_from(Tag, PostTag, PostTag.tag_id == Tag.id)
        .where(PostTag.post_id.in_(list(post_ids)))
        .order_by(Tag.name)
    )


def compose_tag_list(offset: int, limit: int) -> ComposedQuery:
    """Compose count and page statements for the tag listing (by name)."""
    count = select(func.count()).select_from(Tag)
    fetch = select(*TAG_COLUMNS).order_by(Tag.name).limit(limit).offset(offset)
    return ComposedQuery(count=count, fetch=fetch)
