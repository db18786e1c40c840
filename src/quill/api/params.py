"""Query-parameter dependencies.

Out-of-range values are rejected by FastAPI with a 422 before any query
is composed; nothing is clamped here.
"""

from __future__ import annotations

from fastapi import Query

from quill.models.domain import (
    MAX_LIMIT,
    MAX_OFFSET,
    MAX_ORDER_BY_LENGTH,
    MAX_SEARCH_LENGTH,
    PageRequest,
)

DEFAULT_POST_LIMIT = 10
DEFAULT_TAG_LIMIT = 50
DEFAULT_RANDOM_LIMIT = 6


def post_page_request(
    offset: int = Query(default=0, ge=0, le=MAX_OFFSET, description="Items to skip"),
    limit: int = Query(
        default=DEFAULT_POST_LIMIT, ge=1, le=MAX_LIMIT, description="Items per page"
    ),
    search: str | None = Query(
        default=None,
        max_length=MAX_SEARCH_LENGTH,
        description="Case-insensitive match on title, body and author username",
    ),
    order_by: str | None = Query(
        default=None,
        alias="orderBy",
        max_length=MAX_ORDER_BY_LENGTH,
        description="id, title, created_at, updated_at, view_count or like_count",
    ),
    order_direction: str | None = Query(
        default=None, alias="orderDirection", description="asc or desc"
    ),
) -> PageRequest:
    """FastAPI dependency for `?offset=0&limit=10&search=..&orderBy=..&orderDirection=..`."""
    return PageRequest(
        offset=offset,
        limit=limit,
        search=search,
        order_by=order_by,
        order_direction=order_direction,
    )


def tag_page_request(
    offset: int = Query(default=0, ge=0, le=MAX_OFFSET),
    limit: int = Query(default=DEFAULT_TAG_LIMIT, ge=1, le=MAX_LIMIT),
) -> PageRequest:
    """FastAPI dependency for `?offset=0&limit=50` on the tag listing."""
    return PageRequest(offset=offset, limit=limit)
