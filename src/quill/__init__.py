"""Quill: read API for published posts and tags."""

__version__ = "0.1.0"
