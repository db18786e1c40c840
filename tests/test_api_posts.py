"""Tests for posts API endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from quill.api.app import create_app, get_db_session
from quill.config import Settings


class TestGetPosts:
    """GET /v1/posts"""

    def test_returns_envelope(self, client):
        response = client.get("/v1/posts")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["error"] is None
        assert [p["id"] for p in data["data"]] == ["post-1", "post-2", "post-3"]
        assert data["meta"] == {"total_items": 3, "offset": 0, "limit": 10, "total_pages": 1}

    def test_post_shape(self, client):
        post = client.get("/v1/posts", params={"limit": 1}).json()["data"][0]

        assert post["user"] == {"id": "u-alice", "username": "alice"}
        assert [t["name"] for t in post["tags"]] == ["python", "web"]
        assert post["slug"] == "hello-world"
        assert post["published"] is True
        assert post["deleted_at"] is None

    def test_pagination_meta(self, client):
        data = client.get("/v1/posts", params={"limit": 2, "offset": 2}).json()

        assert [p["id"] for p in data["data"]] == ["post-3"]
        assert data["meta"] == {"total_items": 3, "offset": 2, "limit": 2, "total_pages": 2}

    def test_offset_beyond_total_is_empty_success(self, client):
        response = client.get("/v1/posts", params={"offset": 500})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"] == []
        assert data["meta"]["total_items"] == 3

    def test_sort_params_camel_case(self, client):
        data = client.get(
            "/v1/posts", params={"orderBy": "like_count", "orderDirection": "desc"}
        ).json()
        assert [p["id"] for p in data["data"]] == ["post-2", "post-3", "post-1"]

    def test_hostile_order_by_resolves_to_id(self, client):
        response = client.get(
            "/v1/posts", params={"orderBy": "id; DROP TABLE posts", "orderDirection": "sideways"}
        )

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["data"]] == ["post-1", "post-2", "post-3"]

    def test_long_unrecognized_direction_is_ascending(self, client):
        response = client.get("/v1/posts", params={"orderDirection": "x" * 40})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["data"]] == ["post-1", "post-2", "post-3"]

    def test_search(self, client):
        data = client.get("/v1/posts", params={"search": "BOB"}).json()
        assert [p["id"] for p in data["data"]] == ["post-3"]
        assert data["meta"]["total_items"] == 1

    def test_list_bodies_are_previews(self, client):
        posts = {p["id"]: p for p in client.get("/v1/posts").json()["data"]}
        assert posts["post-2"]["body"] == "x" * 200 + "..."

    def test_limit_out_of_range_rejected(self, client):
        for limit in (0, 101):
            response = client.get("/v1/posts", params={"limit": limit})
            assert response.status_code == 422
            data = response.json()
            assert data["success"] is False
            assert "limit" in data["error"]

    def test_offset_out_of_range_rejected(self, client):
        assert client.get("/v1/posts", params={"offset": -1}).status_code == 422
        assert client.get("/v1/posts", params={"offset": 10_001}).status_code == 422

    def test_search_too_long_rejected(self, client):
        response = client.get("/v1/posts", params={"search": "a" * 201})
        assert response.status_code == 422
        assert "search" in response.json()["error"]


class TestGetRandomPosts:
    """GET /v1/posts/random"""

    def test_default_sample(self, client):
        data = client.get("/v1/posts/random").json()

        assert data["success"] is True
        assert sorted(p["id"] for p in data["data"]) == ["post-1", "post-2", "post-3"]
        assert data["meta"] == {"total_items": 3, "offset": 0, "limit": 6, "total_pages": 1}

    def test_limit(self, client):
        data = client.get("/v1/posts/random", params={"limit": 1}).json()
        assert len(data["data"]) == 1
        assert data["meta"]["total_items"] == 1

    def test_limit_bounds(self, client):
        assert client.get("/v1/posts/random", params={"limit": 0}).status_code == 422
        assert client.get("/v1/posts/random", params={"limit": 51}).status_code == 422


class TestGetPostByUsernameAndSlug:
    """GET /v1/posts/u/{username}/{slug}"""

    def test_found(self, client):
        response = client.get("/v1/posts/u/alice/rust-tips")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["body"] == "x" * 250
        assert [t["name"] for t in data["data"]["tags"]] == ["rust"]
        assert data["meta"] == {"total_items": 0, "offset": 0, "limit": 10, "total_pages": 0}

    def test_not_found(self, client):
        response = client.get("/v1/posts/u/ghost/nope")

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["data"] is None
        assert "nope" in data["error"]

    def test_unpublished_not_found(self, client):
        assert client.get("/v1/posts/u/bob/draft").status_code == 404


class _FailingSession:
    def execute(self, statement):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestStoreFailure:
    """Store failures surface as 503, never as empty results."""

    def _client(self):
        app = create_app(Settings(database_url="sqlite:///:memory:", pool_min_connections=0))

        def override_get_db():
            yield _FailingSession()

        app.dependency_overrides[get_db_session] = override_get_db
        return TestClient(app)

    def test_list_returns_503(self):
        response = self._client().get("/v1/posts")

        assert response.status_code == 503
        data = response.json()
        assert data["success"] is False
        assert data["data"] is None
        assert data["error"] == "Backend unavailable"

    def test_lookup_returns_503(self):
        assert self._client().get("/v1/posts/u/alice/hello-world").status_code == 503


class TestHealth:
    """Health endpoints."""

    def test_health(self, client):
        for path in ("/", "/v1/health"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json() == {"success": True, "message": "ok"}


class TestRouteModuleImports:
    """Route modules import on their own, before the app module."""

    def test_route_modules_import_first(self):
        import os
        import subprocess
        import sys

        env = {**os.environ, "PYTHONPATH": os.pathsep.join(p for p in sys.path if p)}
        for module in ("quill.api.routes.posts", "quill.api.routes.tags"):
            result = subprocess.run(
                [sys.executable, "-c", f"import {module}"],
                capture_output=True,
                text=True,
                timeout=60,
                env=env,
            )
            assert result.returncode == 0, result.stderr
