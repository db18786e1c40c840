"""Domain models for Quill.

Pure Python dataclasses representing request-scoped read-models.
These are independent of SQLAlchemy; the repository maps rows into
them and the route layer converts them into response models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Literal, TypeVar

from quill.errors import InvalidPageRequestError

T = TypeVar("T")


# ============================================================================
# User / Tag Domain
# ============================================================================


@dataclass
class UserEntity:
    """Author summary embedded in post read-models."""

    id: str
    username: str


@dataclass
class TagEntity:
    """Domain model for a tag."""

    id: str
    name: str
    created_at: datetime


# ============================================================================
# Post Domain
# ============================================================================


@dataclass
class PostEntity:
    """Domain model for a post, joined with its author and tags."""

    id: str
    title: str
    body: str
    created_by: str
    slug: str
    published: bool
    created_at: datetime
    updated_at: datetime
    user: UserEntity
    photo_url: str | None = None
    deleted_at: datetime | None = None
    view_count: int = 0
    like_count: int = 0
    tags: list[TagEntity] = field(default_factory=list)


# ============================================================================
# Paging Domain
# ============================================================================

SortDirection = Literal["asc", "desc"]

MAX_LIMIT = 100
MAX_OFFSET = 10_000
MAX_SEARCH_LENGTH = 200
MAX_ORDER_BY_LENGTH = 64
MAX_RANDOM_LIMIT = 50


@dataclass(frozen=True)
class PageRequest:
    """Validated paging, search and sort parameters for a list query.

    Bounds are checked on construction. order_by and order_direction are
    kept as the client sent them; the sort resolver maps them onto the
    allow-list.
    """

    offset: int = 0
    limit: int = 10
    search: str | None = None
    order_by: str | None = None
    order_direction: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.offset <= MAX_OFFSET:
            raise InvalidPageRequestError(f"offset must be between 0 and {MAX_OFFSET}")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise InvalidPageRequestError(f"limit must be between 1 and {MAX_LIMIT}")
        if self.search is not None and len(self.search) > MAX_SEARCH_LENGTH:
            raise InvalidPageRequestError(
                f"search must be at most {MAX_SEARCH_LENGTH} characters"
            )
        if self.order_by is not None and len(self.order_by) > MAX_ORDER_BY_LENGTH:
            raise InvalidPageRequestError(
                f"orderBy must be at most {MAX_ORDER_BY_LENGTH} characters"
            )


@dataclass
class PageResult(Generic[T]):
    """One page of entities plus the total count across all pages."""

    items: list[T]
    total: int
    limit: int
    offset: int
