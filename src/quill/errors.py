"""Exception taxonomy for Quill.

Not-found single lookups are not errors: repository functions return None
and the route layer turns that into a 404.
"""

from __future__ import annotations


class QuillError(Exception):
    """Base class for all Quill errors."""


class InvalidPageRequestError(QuillError, ValueError):
    """Page request values are outside their allowed bounds."""


class StoreUnavailableError(QuillError):
    """The relational store could not execute a query.

    Always raised from the underlying driver/SQLAlchemy exception so the
    original cause is preserved on ``__cause__``.
    """
