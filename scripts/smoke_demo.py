#!/usr/bin/env python3
"""Smoke test for the demo database.

Runs the API in-process against demo.db and checks the read endpoints.

Usage:
    python scripts/seed_demo.py
    python scripts/smoke_demo.py

Exit codes:
    0: All checks passed
    1: Some checks failed
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from fastapi.testclient import TestClient  # noqa: E402

from quill.api.app import create_app  # noqa: E402
from quill.config import Settings  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"
DEMO_DB_URL = f"sqlite:///{DEMO_DB_PATH}"


def check_database_exists() -> bool:
    """Check that demo database exists."""
    if not DEMO_DB_PATH.exists():
        print(f"FAIL: Demo database not found: {DEMO_DB_PATH}")
        return False
    print(f"OK: Database exists: {DEMO_DB_PATH}")
    return True


def check_post_list(client: TestClient) -> bool:
    """Visible posts only, with consistent meta."""
    data = client.get("/v1/posts", params={"limit": 2}).json()
    meta = data["meta"]

    if not data["success"] or meta["total_items"] != 4:
        print(f"FAIL: Expected 4 visible posts, got {meta['total_items']}")
        return False
    if meta["total_pages"] != 2 or len(data["data"]) != 2:
        print(f"FAIL: Unexpected page shape: {meta}")
        return False

    print(f"OK: Post list meta: {meta}")
    return True


def check_search_and_sort(client: TestClient) -> bool:
    """Search by username, sort by view count descending."""
    data = client.get(
        "/v1/posts", params={"search": "GRACE", "orderBy": "view_count", "orderDirection": "desc"}
    ).json()
    slugs = [p["slug"] for p in data["data"]]

    if slugs != ["ownership"]:
        print(f"FAIL: Unexpected search result: {slugs}")
        return False

    print(f"OK: Search result: {slugs}")
    return True


def check_tag_listing(client: TestClient) -> bool:
    """Tag-filtered listing carries batched tags."""
    data = client.get("/v1/tags/databases/posts").json()
    tags = {p["slug"]: [t["name"] for t in p["tags"]] for p in data["data"]}

    if tags != {"sqlalchemy-core": ["databases", "python"], "n-plus-one": ["databases"]}:
        print(f"FAIL: Unexpected tag listing: {tags}")
        return False

    print(f"OK: Tag listing: {tags}")
    return True


def check_lookup(client: TestClient) -> bool:
    """Single lookup returns full body; hidden posts are 404."""
    found = client.get("/v1/posts/u/ada/n-plus-one")
    draft = client.get("/v1/posts/u/grace/draft-notes")

    if found.status_code != 200 or found.json()["data"]["body"].endswith("..."):
        print(f"FAIL: Lookup returned {found.status_code}")
        return False
    if draft.status_code != 404:
        print(f"FAIL: Draft lookup returned {draft.status_code}")
        return False

    print("OK: Lookup and not-found behave")
    return True


def main() -> int:
    """Run all smoke checks."""
    print("=" * 60)
    print("Quill Demo Smoke Test")
    print("=" * 60)

    if not check_database_exists():
        print("Run 'python scripts/seed_demo.py' first!")
        return 1

    client = TestClient(create_app(Settings(database_url=DEMO_DB_URL, pool_min_connections=0)))

    checks = [check_post_list, check_search_and_sort, check_tag_listing, check_lookup]
    checks_passed = 0
    checks_failed = 0
    for index, check in enumerate(checks, start=1):
        print(f"\n[{index}/{len(checks)}] {check.__doc__}")
        if check(client):
            checks_passed += 1
        else:
            checks_failed += 1

    print("\n" + "=" * 60)
    if checks_failed == 0:
        print(f"RESULT: ALL PASSED ({checks_passed} checks)")
        print("=" * 60)
        return 0
    else:
        print(f"RESULT: {checks_passed} passed, {checks_failed} failed")
        print("=" * 60)
        return 1


if __name__ == "__main__":
    sys.exit(main())
