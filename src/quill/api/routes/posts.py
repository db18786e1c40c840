"""Posts API endpoints.

GET /v1/posts - Paginated, searchable, sortable post list
GET /v1/posts/random - Random sample of posts
GET /v1/posts/u/{username}/{slug} - Single post by author and slug
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from quill.api.dependencies import get_db_session
from quill.api.converters import post_to_detail
from quill.api.envelope import success, with_meta
from quill.api.params import DEFAULT_RANDOM_LIMIT, post_page_request
from quill.db import repo
from quill.db.repo import DbSession
from quill.models.domain import MAX_RANDOM_LIMIT, PageRequest
from quill.models.types import ApiResponse, PostDetail

router = APIRouter(prefix="/v1")


@router.get("/posts", response_model=ApiResponse[list[PostDetail]])
def get_posts(
    page: PageRequest = Depends(post_page_request),
    session: DbSession = Depends(get_db_session),
) -> ApiResponse[list[PostDetail]]:
    """List visible posts.

    Args:
        page: Validated paging, search and sort parameters.
        session: Database session (injected).

    Returns:
        Envelope with post previews and pagination metadata.
    """
    result = repo.list_posts(session, page)
    return with_meta(
        [post_to_detail(p) for p in result.items], result.total, result.limit, result.offset
    )


@router.get("/posts/random", response_model=ApiResponse[list[PostDetail]])
def get_random_posts(
    limit: int = Query(default=DEFAULT_RANDOM_LIMIT, ge=1, le=MAX_RANDOM_LIMIT),
    session: DbSession = Depends(get_db_session),
) -> ApiResponse[list[PostDetail]]:
    """Return a random sample of visible posts.

    total_items is the sample size; offset is always 0.
    """
    posts = repo.get_random_posts(session, limit)
    return with_meta([post_to_detail(p) for p in posts], len(posts), limit, 0)


@router.get("/posts/u/{username}/{slug}", response_model=ApiResponse[PostDetail])
def get_post_by_username_and_slug(
    username: str,
    slug: str,
    session: DbSession = Depends(get_db_session),
) -> ApiResponse[PostDetail]:
    """Get a single post with its full body and tags.

    Raises:
        HTTPException: 404 if no visible post matches.
    """
    post = repo.get_post_by_username_and_slug(session, username, slug)

    if post is None:
        raise HTTPException(status_code=404, detail=f"Post not found: {slug} by {username}")

    return success(post_to_detail(post))
