"""Read and write paths of the change tracker.

Reads resolve a scope, query the store, then enrich the page in batches:
ancestor chains, referenced names and actor names are each loaded with a
bounded number of queries no matter how many records the page holds.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_tracer.core.config import settings
from catalog_tracer.models.change_record import ACTION_TYPES, ChangeRecord
from catalog_tracer.schemas.change import (
    AncestorEntryResponse,
    ChangeEventResponse,
    ChangeRecordCreate,
    EnrichedChangeRecord,
    FieldChangeResponse,
)
from catalog_tracer.services.actor_resolver import ActorNameResolver, actor_label
from catalog_tracer.services.ancestor_resolver import EntityLoader, ancestor_hints, resolve_ancestors_many
from catalog_tracer.services.change_store import ChangeRecordStore, Clause, SourceTableClause, TableKeysClause
from catalog_tracer.services.display_translator import DisplayValues, collect_references, translate
from catalog_tracer.services.errors import InvalidChangeError, QueryTimeoutError, StoreUnavailableError
from catalog_tracer.services.hierarchy import get_level
from catalog_tracer.services.scope_resolver import ScopeAnchor, resolve_scope
from catalog_tracer.utils.time import Deadline, as_utc, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableScope:
    """Every record of one source table, or of one entity when ``key`` is set."""

    table: str
    key: str | None = None


ChangeScope = Union[ScopeAnchor, TableScope]


def clamp_limit(limit: int | None) -> int:
    if limit is None:
        return settings.tracer_default_limit
    return max(1, min(int(limit), settings.tracer_max_limit))


def stringify_value(value: Any) -> str | None:
    """Snapshot a column value as stored in the log."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _scope_clauses(db: Session, scope: ChangeScope, deadline: Deadline) -> list[Clause]:
    if isinstance(scope, TableScope):
        if scope.key:
            return [TableKeysClause(scope.table, (scope.key,))]
        return [SourceTableClause(scope.table)]
    return resolve_scope(db, scope, deadline).clauses


def _load_names(loader: EntityLoader, records: list[ChangeRecord]) -> dict[str, dict[str, str]]:
    return {table: loader.names(table, ids) for table, ids in collect_references(records).items()}


def enrich_records(db: Session, records: list[ChangeRecord], deadline: Deadline | None = None) -> list[EnrichedChangeRecord]:
    """Attach ancestor chains, display values and actor names to a page."""
    if not records:
        return []

    loader = EntityLoader(db, deadline)
    refs = list(dict.fromkeys((record.source_table, record.source_key) for record in records))
    chains = resolve_ancestors_many(db, refs, loader=loader, deadline=deadline)
    names = _load_names(loader, records)
    actors = ActorNameResolver(db, deadline).resolve_many(record.changed_by for record in records)

    enriched: list[EnrichedChangeRecord] = []
    for record in records:
        display = translate(DisplayValues.from_record(record), names)
        level = get_level(record.source_table)
        row = loader.get(record.source_table, record.source_key)
        update_notes = None
        if level is not None and row is not None and level.has_update_notes:
            update_notes = row.update_notes
        actor_name = actors.get(record.changed_by) if record.changed_by else None
        enriched.append(
            EnrichedChangeRecord(
                id=record.id,
                source_table=record.source_table,
                source_key=record.source_key,
                field_name=record.field_name,
                display_field_name=display.field_name,
                old_value_display=display.old_value,
                new_value_display=display.new_value,
                action_type=record.action_type,
                changed_at=as_utc(record.changed_at),
                changed_by=record.changed_by,
                changed_by_display_name=actor_label(actor_name),
                record_name=loader.display_name(record.source_table, record.source_key),
                update_notes=update_notes,
                ancestor_chain=[
                    AncestorEntryResponse(**asdict(entry))
                    for entry in chains[(record.source_table, record.source_key)]
                ],
            )
        )
    return enriched


def get_changes(
    db: Session,
    scope: ChangeScope,
    limit: int | None = None,
    action_type: str | None = None,
    changed_by: str | None = None,
    timeout_seconds: float | None = None,
) -> list[EnrichedChangeRecord]:
    """Return enriched changes in scope, newest first.

    A spent time budget anywhere in the request yields an empty list rather
    than a partial one. StoreUnavailableError propagates to the caller.
    """
    if timeout_seconds is None:
        timeout_seconds = settings.tracer_query_timeout_seconds
    deadline = Deadline(timeout_seconds)
    try:
        clauses = _scope_clauses(db, scope, deadline)
        store = ChangeRecordStore(db, deadline)
        records = store.query(
            clauses,
            limit=clamp_limit(limit),
            action_type=action_type,
            changed_by=changed_by,
        )
        return enrich_records(db, records, deadline)
    except QueryTimeoutError:
        logger.warning("[TRACER] Change query for %s timed out after %ss", scope, timeout_seconds)
        return []


def get_recent_changes(db: Session, limit: int = 50) -> list[EnrichedChangeRecord]:
    """Global newest-first feed across every table."""
    deadline = Deadline(settings.tracer_query_timeout_seconds)
    try:
        records = ChangeRecordStore(db, deadline).recent(limit=clamp_limit(limit))
        return enrich_records(db, records, deadline)
    except QueryTimeoutError:
        logger.warning("[TRACER] Recent changes query timed out")
        return []


def get_record_history(db: Session, source_table: str, source_key: str) -> list[ChangeEventResponse]:
    """Return one entity's history as change events, oldest first."""
    events = ChangeRecordStore(db).history(source_table, source_key)
    if not events:
        return []

    records = [record for event in events for record in event.changes]
    names = _load_names(EntityLoader(db), records)
    actors = ActorNameResolver(db).resolve_many(event.changed_by for event in events)

    responses: list[ChangeEventResponse] = []
    for event in events:
        changes: list[FieldChangeResponse] = []
        for record in event.changes:
            display = translate(DisplayValues.from_record(record), names)
            changes.append(
                FieldChangeResponse(
                    id=record.id,
                    field_name=record.field_name,
                    display_field_name=display.field_name,
                    old_value_display=display.old_value,
                    new_value_display=display.new_value,
                )
            )
        responses.append(
            ChangeEventResponse(
                source_table=source_table,
                source_key=source_key,
                action_type=event.action_type,
                changed_at=event.changed_at,
                changed_by=event.changed_by,
                changed_by_display_name=actor_label(actors.get(event.changed_by) if event.changed_by else None),
                changes=changes,
            )
        )
    return responses


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[TRACER] Failed to commit change records")
        raise StoreUnavailableError("Change store unavailable") from exc


def record_change(db: Session, payload: ChangeRecordCreate, changed_by: str | None) -> ChangeRecord:
    """Append one change record; hints are derived when the caller sends none."""
    hints = payload.hints.model_dump(exclude_none=True) if payload.hints is not None else {}
    if not hints and payload.source_table and payload.source_key:
        hints = ancestor_hints(db, payload.source_table, payload.source_key)

    record = ChangeRecordStore(db).append(
        source_table=payload.source_table,
        source_key=payload.source_key,
        field_name=payload.field_name,
        old_value=payload.old_value,
        new_value=payload.new_value,
        action_type=payload.action_type,
        changed_by=changed_by,
        hints=hints,
    )
    _commit(db)
    db.refresh(record)
    logger.info("[TRACER] Recorded %s %s:%s.%s", record.action_type, record.source_table, record.source_key, record.field_name)
    return record


def _changed_fields(action: str, before: dict[str, Any], after: dict[str, Any]) -> list[tuple[str, str | None, str | None]]:
    if action == "INSERT":
        return [(name, None, stringify_value(value)) for name, value in after.items() if value is not None]
    if action == "DELETE":
        return [(name, stringify_value(value), None) for name, value in before.items() if value is not None]

    fields: list[tuple[str, str | None, str | None]] = []
    for name in dict.fromkeys([*before, *after]):
        old_value = stringify_value(before.get(name))
        new_value = stringify_value(after.get(name))
        if old_value != new_value:
            fields.append((name, old_value, new_value))
    return fields


def record_entity_mutation(
    db: Session,
    source_table: str,
    source_key: str,
    action_type: str,
    before: dict[str, Any] | None,
    after: dict[str, Any] | None,
    changed_by: str | None,
    hints: dict[str, str | None] | None = None,
) -> list[ChangeRecord]:
    """Append one record per changed field of a single entity mutation.

    Every record shares one ``changed_at`` so history reads can group them
    back into a single event.
    """
    action = str(action_type or "").strip().upper()
    if action not in ACTION_TYPES:
        raise InvalidChangeError(f"Invalid action_type: {action_type!r}")

    fields = _changed_fields(action, before or {}, after or {})
    if not fields:
        return []

    if hints is None:
        hints = ancestor_hints(db, source_table, source_key, snapshot=before or after)

    store = ChangeRecordStore(db)
    changed_at = utc_now()
    records = [
        store.append(
            source_table=source_table,
            source_key=source_key,
            field_name=name,
            old_value=old_value,
            new_value=new_value,
            action_type=action,
            changed_by=changed_by,
            changed_at=changed_at,
            hints=hints,
        )
        for name, old_value, new_value in fields
    ]
    _commit(db)
    logger.info("[TRACER] Recorded %s of %s:%s (%d fields)", action, source_table, source_key, len(records))
    return records
