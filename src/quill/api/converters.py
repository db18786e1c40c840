"""Domain entity -> API response model converters."""

from __future__ import annotations

from quill.models.domain import PostEntity, TagEntity
from quill.models.types import PostDetail, TagDetail, UserSummary


def tag_to_detail(tag: TagEntity) -> TagDetail:
    """Convert TagEntity to TagDetail."""
    return TagDetail(id=tag.id, name=tag.name, created_at=tag.created_at)


def post_to_detail(post: PostEntity) -> PostDetail:
    """Convert PostEntity to PostDetail."""
    return PostDetail(
        id=post.id,
        title=post.title,
        body=post.body,
        created_by=post.created_by,
        slug=post.slug,
        photo_url=post.photo_url,
        created_at=post.created_at,
        updated_at=post.updated_at,
        deleted_at=post.deleted_at,
        published=post.published,
        view_count=post.view_count,
        like_count=post.like_count,
        user=UserSummary(id=post.user.id, username=post.user.username),
        tags=[tag_to_detail(t) for t in post.tags],
    )
