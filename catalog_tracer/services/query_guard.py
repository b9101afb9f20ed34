"""Execution wrapper applying time budgets and error translation to reads."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_tracer.services.errors import QueryTimeoutError, StoreUnavailableError
from catalog_tracer.utils.time import Deadline

logger = logging.getLogger(__name__)

# SQLSTATE raised by PostgreSQL when statement_timeout cancels a query.
PG_QUERY_CANCELED: str = "57014"


def _is_timeout(exc: SQLAlchemyError) -> bool:
    if not isinstance(exc, OperationalError):
        return False
    return getattr(exc.orig, "pgcode", None) == PG_QUERY_CANCELED


def _apply_statement_timeout(db: Session, deadline: Deadline) -> None:
    remaining = deadline.remaining()
    if remaining is None or db.get_bind().dialect.name != "postgresql":
        return
    milliseconds = max(int(remaining * 1000), 1)
    db.execute(text(f"SET LOCAL statement_timeout = {milliseconds}"))


def run_query(db: Session, statement: Any, deadline: Deadline | None = None, *, scalars: bool = True) -> list[Any]:
    """Execute a select and return all rows (or scalars).

    Raises QueryTimeoutError when the budget is spent before or during the
    query and StoreUnavailableError for any other database failure.
    """
    if deadline is not None and deadline.expired():
        raise QueryTimeoutError("Query budget exhausted")
    try:
        if deadline is not None:
            _apply_statement_timeout(db, deadline)
        if scalars:
            return list(db.scalars(statement).all())
        return list(db.execute(statement).all())
    except SQLAlchemyError as exc:
        db.rollback()
        if _is_timeout(exc):
            raise QueryTimeoutError("Query cancelled by statement timeout") from exc
        logger.warning("[TRACER] Query failed: %s", exc)
        raise StoreUnavailableError("Change store unavailable") from exc
