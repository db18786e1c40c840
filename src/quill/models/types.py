"""Pydantic models for the Quill API.

Every endpoint answers with ApiResponse; the envelope shape is the same
for lists, single resources and errors.
"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class UserSummary(BaseModel):
    """Author summary nested in a post."""

    id: str
    username: str


class TagDetail(BaseModel):
    """Tag details for API response."""

    id: str
    name: str
    created_at: datetime


class PostDetail(BaseModel):
    """Post details for API response."""

    id: str
    title: str
    body: str
    created_by: str
    slug: str
    photo_url: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None
    published: bool
    view_count: int
    like_count: int
    user: UserSummary
    tags: list[TagDetail]


class Meta(BaseModel):
    """Pagination metadata.

    Defaults are used for single-resource and error responses.
    """

    total_items: int = 0
    offset: int = 0
    limit: int = 10
    total_pages: int = 0


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope."""

    success: bool
    data: T | None = None
    meta: Meta = Field(default_factory=Meta)
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check payload."""

    success: bool
    message: str
