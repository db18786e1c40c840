"""Tests for domain and response models.

Tests validate:
1. PageRequest bounds are enforced, never clamped
2. Response models reject invalid data
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from quill.errors import InvalidPageRequestError
from quill.models.domain import PageRequest
from quill.models.types import PostDetail, TagDetail, UserSummary


class TestPageRequest:
    """PageRequest validation."""

    def test_defaults(self):
        request = PageRequest()
        assert (request.offset, request.limit) == (0, 10)
        assert request.search is None

    def test_bounds_inclusive(self):
        PageRequest(offset=10_000, limit=100, search="s" * 200)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"offset": -1},
            {"offset": 10_001},
            {"limit": 0},
            {"limit": 101},
            {"search": "s" * 201},
            {"order_by": "f" * 65},
        ],
    )
    def test_out_of_bounds_rejected(self, kwargs):
        with pytest.raises(InvalidPageRequestError):
            PageRequest(**kwargs)

    def test_hostile_order_by_is_accepted_for_resolution(self):
        assert PageRequest(order_by="id; DROP TABLE posts").order_by == "id; DROP TABLE posts"


class TestPostDetail:
    """PostDetail model."""

    def _payload(self, **overrides):
        payload = {
            "id": "post-1",
            "title": "Hello",
            "body": "Body",
            "created_by": "u-1",
            "slug": "hello",
            "photo_url": None,
            "created_at": datetime(2024, 1, 1),
            "updated_at": datetime(2024, 1, 1),
            "deleted_at": None,
            "published": True,
            "view_count": 0,
            "like_count": 0,
            "user": UserSummary(id="u-1", username="alice"),
            "tags": [TagDetail(id="t-1", name="python", created_at=datetime(2024, 1, 1))],
        }
        payload.update(overrides)
        return payload

    def test_valid_post(self):
        post = PostDetail(**self._payload())
        assert post.user.username == "alice"
        assert post.tags[0].name == "python"

    def test_missing_user_rejected(self):
        payload = self._payload()
        del payload["user"]
        with pytest.raises(ValidationError):
            PostDetail(**payload)

    def test_non_numeric_counter_rejected(self):
        with pytest.raises(ValidationError):
            PostDetail(**self._payload(view_count="many"))
