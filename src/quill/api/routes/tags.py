"""Tags API endpoints.

GET /v1/tags - Paginated tag list
GET /v1/tags/{tag}/posts - Paginated posts carrying a tag
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from quill.api.dependencies import get_db_session
from quill.api.converters import post_to_detail, tag_to_detail
from quill.api.envelope import with_meta
from quill.api.params import post_page_request, tag_page_request
from quill.db import repo
from quill.db.repo import DbSession
from quill.models.domain import PageRequest
from quill.models.types import ApiResponse, PostDetail, TagDetail

router = APIRouter(prefix="/v1")


@router.get("/tags", response_model=ApiResponse[list[TagDetail]])
def get_tags(
    page: PageRequest = Depends(tag_page_request),
    session: DbSession = Depends(get_db_session),
) -> ApiResponse[list[TagDetail]]:
    """List tags ordered by name."""
    result = repo.list_tags(session, page)
    tags = [tag_to_detail(t) for t in result.items]
    return with_meta(tags, result.total, result.limit, result.offset)


@router.get("/tags/{tag}/posts", response_model=ApiResponse[list[PostDetail]])
def get_posts_by_tag(
    tag: str,
    page: PageRequest = Depends(post_page_request),
    session: DbSession = Depends(get_db_session),
) -> ApiResponse[list[PostDetail]]:
    """List visible posts with the exact tag name.

    An unknown tag is an empty page, not a 404.
    """
    result = repo.list_posts_by_tag(session, tag, page)
    return with_meta(
        [post_to_detail(p) for p in result.items], result.total, result.limit, result.offset
    )
