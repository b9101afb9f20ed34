"""Identifier helpers for catalog and tracer rows."""

from uuid import uuid4


def new_id() -> str:
    """Return a new opaque string identifier."""
    return str(uuid4())
