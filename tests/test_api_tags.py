"""Tests for tags API endpoints."""


class TestGetTags:
    """GET /v1/tags"""

    def test_lists_tags_by_name(self, client):
        response = client.get("/v1/tags")

        assert response.status_code == 200
        data = response.json()
        assert [t["name"] for t in data["data"]] == ["python", "rust", "web"]
        assert data["meta"] == {"total_items": 3, "offset": 0, "limit": 50, "total_pages": 1}

    def test_pagination(self, client):
        data = client.get("/v1/tags", params={"offset": 1, "limit": 1}).json()
        assert [t["name"] for t in data["data"]] == ["rust"]
        assert data["meta"]["total_pages"] == 3

    def test_limit_bounds(self, client):
        assert client.get("/v1/tags", params={"limit": 0}).status_code == 422
        assert client.get("/v1/tags", params={"limit": 101}).status_code == 422


class TestGetPostsByTag:
    """GET /v1/tags/{tag}/posts"""

    def test_filters_by_tag(self, client):
        data = client.get("/v1/tags/rust/posts").json()

        assert data["success"] is True
        assert [p["id"] for p in data["data"]] == ["post-2"]
        assert data["data"][0]["body"] == "x" * 200 + "..."
        assert data["meta"]["total_items"] == 1

    def test_hidden_posts_excluded(self, client):
        data = client.get("/v1/tags/python/posts").json()
        assert [p["id"] for p in data["data"]] == ["post-1"]

    def test_unknown_tag_is_empty_success(self, client):
        response = client.get("/v1/tags/cobol/posts")

        assert response.status_code == 200
        data = response.json()
        assert data["data"] == []
        assert data["meta"] == {"total_items": 0, "offset": 0, "limit": 10, "total_pages": 0}

    def test_search_and_sort_within_tag(self, client):
        data = client.get(
            "/v1/tags/python/posts", params={"search": "hello", "orderBy": "title"}
        ).json()
        assert [p["id"] for p in data["data"]] == ["post-1"]
