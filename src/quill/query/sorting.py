"""Sort field and direction resolution.

ORDER BY identifiers cannot be bound as parameters, so client-supplied
sort fields are looked up in a closed allow-list and mapped onto schema
columns. Anything not on the list resolves to the default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import ColumnElement

from quill.db.schema import Post
from quill.models.domain import SortDirection

logger = logging.getLogger(__name__)

SORTABLE_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "created_at",
    "updated_at",
    "view_count",
    "like_count",
)
DEFAULT_SORT_FIELD = "id"
DEFAULT_SORT_DIRECTION: SortDirection = "asc"

_SORT_COLUMNS = {name: getattr(Post, name) for name in SORTABLE_FIELDS}


@dataclass(frozen=True)
class SortSpec:
    """A validated (field, direction) pair."""

    field: str = DEFAULT_SORT_FIELD
    direction: SortDirection = DEFAULT_SORT_DIRECTION


def resolve_sort_field(order_by: str | None) -> str:
    """Return order_by if it is sortable, else the default field."""
    if order_by in _SORT_COLUMNS:
        return order_by
    if order_by is not None:
        logger.debug("Unsortable field %r, falling back to %s", order_by, DEFAULT_SORT_FIELD)
    return DEFAULT_SORT_FIELD


def resolve_sort_direction(order_direction: str | None) -> SortDirection:
    """Return "desc" for a descending request, "asc" for anything else."""
    if order_direction is not None and order_direction.strip().lower() in ("desc", "descending"):
        return "desc"
    return DEFAULT_SORT_DIRECTION


def resolve_sort(order_by: str | None, order_direction: str | None) -> SortSpec:
    """Resolve raw client sort parameters to a SortSpec.

    Args:
        order_by: Requested field name, possibly absent or hostile.
        order_direction: Requested direction, possibly absent or unrecognized.

    Returns:
        SortSpec whose field is always in SORTABLE_FIELDS.
    """
    return SortSpec(
        field=resolve_sort_field(order_by),
        direction=resolve_sort_direction(order_direction),
    )


def order_clauses(sort: SortSpec) -> list[ColumnElement]:
    """Build ORDER BY clauses for a resolved sort.

    Post id is appended as a tie-breaker so pages do not overlap when the
    sort column has duplicate values.
    """
    column = _SORT_COLUMNS[sort.field]
    primary = column.desc() if sort.direction == "desc" else column.asc()
    if sort.field == "id":
        return [primary]
    return [primary, Post.id.asc()]
