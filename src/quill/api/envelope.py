"""Response envelope construction and page math."""

from __future__ import annotations

from typing import TypeVar

from quill.models.types import ApiResponse, Meta

T = TypeVar("T")


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit), or 0 when limit is not positive."""
    if limit <= 0:
        return 0
    return -(-total // limit)


def with_meta(data: T, total: int, limit: int, offset: int) -> ApiResponse[T]:
    """Successful envelope carrying pagination metadata."""
    return ApiResponse(
        success=True,
        data=data,
        meta=Meta(
            total_items=total,
            offset=offset,
            limit=limit,
            total_pages=total_pages(total, limit),
        ),
    )


def success(data: T) -> ApiResponse[T]:
    """Successful single-resource envelope with default metadata."""
    return ApiResponse(success=True, data=data, meta=Meta())


def failure(message: str) -> ApiResponse[None]:
    """Error envelope; data is always null."""
    return ApiResponse(success=False, data=None, meta=Meta(), error=message)
