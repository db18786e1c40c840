"""Free-text search predicate.

A search term becomes one bound LIKE pattern matched case-insensitively
against post title, post body and author username.
"""

from __future__ import annotations

from sqlalchemy import ColumnElement, bindparam, or_

from quill.db.schema import Post, User

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def search_pattern(search: str | None) -> str | None:
    """Wrap a search term in wildcards, or None when there is nothing to match.

    Surrounding whitespace is stripped; an empty term means no predicate.
    """
    if search is None:
        return None
    term = search.strip()
    if not term:
        return None
    return f"%{escape_like(term)}%"


def search_predicate(search: str | None) -> ColumnElement[bool] | None:
    """Build the OR-ed ILIKE predicate for a search term.

    The three comparisons share a single bind parameter named "search".
    Requires the users table to be joined to posts.

    Returns:
        The predicate, or None when search is absent or blank.
    """
    pattern = search_pattern(search)
    if pattern is None:
        return None
    param = bindparam("search", value=pattern)
    return or_(
        Post.title.ilike(param, escape=LIKE_ESCAPE),
        Post.body.ilike(param, escape=LIKE_ESCAPE),
        User.username.ilike(param, escape=LIKE_ESCAPE),
    )
