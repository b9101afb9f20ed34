"""Append-only change record store and its indexed reads."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_tracer.models.change_record import ACTION_TYPES, HINT_COLUMNS, ChangeRecord
from catalog_tracer.services.errors import InvalidChangeError, StoreUnavailableError
from catalog_tracer.services.hierarchy import LEVELS
from catalog_tracer.services.query_guard import run_query
from catalog_tracer.utils.time import Deadline, as_utc, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableKeysClause:
    """Match records of one source table whose key is in ``keys``."""

    table: str
    keys: tuple[str, ...]


@dataclass(frozen=True)
class SourceTableClause:
    """Match every record of one source table."""

    table: str


@dataclass(frozen=True)
class HintClause:
    """Match records whose ancestor hint is in ``ids`` and whose entity row is gone.

    Live entities are placed by the hierarchy walk alone; the hint only keeps
    records of deleted entities reachable from their former ancestors.
    """

    column: str
    ids: tuple[str, ...]
    tables: tuple[str, ...] = ()


Clause = Union[TableKeysClause, SourceTableClause, HintClause]


@dataclass
class ChangeEvent:
    """Records of one entity that were written with the same timestamp."""

    changed_at: datetime
    action_type: str
    changed_by: str | None
    changes: list[ChangeRecord] = field(default_factory=list)


def _clause_expression(clause: Clause):
    if isinstance(clause, SourceTableClause):
        return ChangeRecord.source_table == clause.table
    if isinstance(clause, TableKeysClause):
        if len(clause.keys) == 1:
            key_match = ChangeRecord.source_key == clause.keys[0]
        else:
            key_match = ChangeRecord.source_key.in_(clause.keys)
        return and_(ChangeRecord.source_table == clause.table, key_match)

    if clause.column not in HINT_COLUMNS:
        raise ValueError(f"Unknown hint column: {clause.column}")
    hint_match = getattr(ChangeRecord, clause.column).in_(clause.ids)
    per_table = []
    for table in clause.tables or tuple(LEVELS):
        level = LEVELS.get(table)
        if level is None:
            per_table.append(and_(ChangeRecord.source_table == table, hint_match))
            continue
        entity_exists = select(level.id_column).where(level.id_column == ChangeRecord.source_key).exists()
        per_table.append(and_(ChangeRecord.source_table == table, hint_match, ~entity_exists))
    return or_(*per_table)


def _is_vacuous(clause: Clause) -> bool:
    if isinstance(clause, TableKeysClause):
        return not clause.keys
    if isinstance(clause, HintClause):
        return not clause.ids
    return False


def _require_text(name: str, value: str | None) -> str:
    if value is None or not str(value).strip():
        raise InvalidChangeError(f"{name} is required")
    return str(value)


class ChangeRecordStore:
    """Durable log of field-level mutations.

    One store wraps one request-scoped session. Reads share the optional
    ``deadline`` so a whole request stays inside its time budget.
    """

    def __init__(self, db: Session, deadline: Deadline | None = None) -> None:
        self.db = db
        self.deadline = deadline

    def append(
        self,
        *,
        source_table: str,
        source_key: str,
        field_name: str,
        old_value: str | None,
        new_value: str | None,
        action_type: str,
        changed_by: str | None = None,
        changed_at: datetime | None = None,
        hints: dict[str, str | None] | None = None,
    ) -> ChangeRecord:
        """Validate and insert a single change record; never merges."""
        table = _require_text("source_table", source_table)
        key = _require_text("source_key", source_key)
        field_label = _require_text("field_name", field_name)
        action = str(action_type or "").strip().upper()
        if action not in ACTION_TYPES:
            raise InvalidChangeError(f"Invalid action_type: {action_type!r}")

        hint_values: dict[str, str | None] = {}
        for column, value in (hints or {}).items():
            if column not in HINT_COLUMNS:
                raise InvalidChangeError(f"Unknown ancestor hint: {column}")
            hint_values[column] = value

        record = ChangeRecord(
            source_table=table,
            source_key=key,
            field_name=field_label,
            old_value=None if old_value is None else str(old_value),
            new_value=None if new_value is None else str(new_value),
            action_type=action,
            changed_at=changed_at or utc_now(),
            changed_by=changed_by,
            **hint_values,
        )
        try:
            self.db.add(record)
            self.db.flush()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("[TRACER] Failed to append change for %s:%s", table, key)
            raise StoreUnavailableError("Change store unavailable") from exc
        return record

    def query(
        self,
        clauses: list[Clause],
        *,
        limit: int,
        action_type: str | None = None,
        changed_by: str | None = None,
    ) -> list[ChangeRecord]:
        """Return records matching any clause, newest first.

        Ties on ``changed_at`` keep insertion order.
        """
        expressions = [_clause_expression(clause) for clause in clauses if not _is_vacuous(clause)]
        if not expressions:
            return []

        statement = select(ChangeRecord).where(or_(*expressions))
        if action_type:
            statement = statement.where(ChangeRecord.action_type == action_type.upper())
        if changed_by:
            statement = statement.where(ChangeRecord.changed_by == changed_by)
        statement = statement.order_by(ChangeRecord.changed_at.desc(), ChangeRecord.id.asc()).limit(limit)
        return run_query(self.db, statement, self.deadline)

    def by_table(self, source_table: str, limit: int = 100) -> list[ChangeRecord]:
        return self.query([SourceTableClause(source_table)], limit=limit)

    def by_record(self, source_table: str, source_key: str, limit: int = 100) -> list[ChangeRecord]:
        return self.query([TableKeysClause(source_table, (source_key,))], limit=limit)

    def by_actor(self, changed_by: str, limit: int = 100) -> list[ChangeRecord]:
        statement = (
            select(ChangeRecord)
            .where(ChangeRecord.changed_by == changed_by)
            .order_by(ChangeRecord.changed_at.desc(), ChangeRecord.id.asc())
            .limit(limit)
        )
        return run_query(self.db, statement, self.deadline)

    def by_action(self, action_type: str, limit: int = 100) -> list[ChangeRecord]:
        statement = (
            select(ChangeRecord)
            .where(ChangeRecord.action_type == action_type.upper())
            .order_by(ChangeRecord.changed_at.desc(), ChangeRecord.id.asc())
            .limit(limit)
        )
        return run_query(self.db, statement, self.deadline)

    def recent(self, limit: int = 50) -> list[ChangeRecord]:
        statement = select(ChangeRecord).order_by(ChangeRecord.changed_at.desc(), ChangeRecord.id.asc()).limit(limit)
        return run_query(self.db, statement, self.deadline)

    def history(self, source_table: str, source_key: str) -> list[ChangeEvent]:
        """Return the full history of one entity grouped into change events."""
        statement = (
            select(ChangeRecord)
            .where(ChangeRecord.source_table == source_table, ChangeRecord.source_key == source_key)
            .order_by(ChangeRecord.changed_at.asc(), ChangeRecord.id.asc())
        )
        records: list[ChangeRecord] = run_query(self.db, statement, self.deadline)

        events: list[ChangeEvent] = []
        current: ChangeEvent | None = None
        for record in records:
            changed_at = as_utc(record.changed_at)
            if current is None or current.changed_at != changed_at:
                current = ChangeEvent(
                    changed_at=changed_at,
                    action_type=record.action_type,
                    changed_by=record.changed_by,
                )
                events.append(current)
            current.changes.append(record)
        return events
