"""Backward (child to parent) walk recovering the ancestor chain of a record."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_tracer.services.hierarchy import EntityLevel, get_level
from catalog_tracer.services.query_guard import run_query
from catalog_tracer.utils.time import Deadline

EntityRef = tuple[str, str]


@dataclass(frozen=True)
class AncestorEntry:
    """One ancestor of a record, nearest first in a chain."""

    level_name: str
    table: str
    key: str
    display_field: str
    value: str | None


class EntityLoader:
    """Request-scoped cache of catalog rows keyed by table and id.

    Every ``load`` call issues at most one query per table and never asks for
    an id twice, whether it was found or not.
    """

    def __init__(self, db: Session, deadline: Deadline | None = None) -> None:
        self.db = db
        self.deadline = deadline
        self._rows: dict[str, dict[str, Any]] = defaultdict(dict)
        self._seen: dict[str, set[str]] = defaultdict(set)

    def load(self, table: str, ids: Iterable[str]) -> dict[str, Any]:
        level = get_level(table)
        wanted = {str(value) for value in ids if value}
        if level is None or not wanted:
            return {}

        missing = sorted(wanted - self._seen[table])
        if missing:
            statement = select(level.model).where(level.id_column.in_(missing))
            for row in run_query(self.db, statement, self.deadline):
                self._rows[table][str(row.id)] = row
            self._seen[table].update(missing)
        return {key: self._rows[table][key] for key in wanted if key in self._rows[table]}

    def load_many(self, refs: Iterable[EntityRef]) -> None:
        grouped: dict[str, set[str]] = defaultdict(set)
        for table, key in refs:
            grouped[table].add(key)
        for table, keys in grouped.items():
            self.load(table, keys)

    def get(self, table: str, key: str) -> Any | None:
        return self._rows.get(table, {}).get(str(key))

    def display_name(self, table: str, key: str) -> str | None:
        level = get_level(table)
        row = self.get(table, key)
        if level is None or row is None:
            return None
        value = getattr(row, level.display_attr)
        return None if value is None else str(value)

    def names(self, table: str, ids: Iterable[str]) -> dict[str, str]:
        """Return display names for ids of one table, loading what is missing."""
        keys = [str(value) for value in ids if value]
        self.load(table, keys)
        names: dict[str, str] = {}
        for key in keys:
            name = self.display_name(table, key)
            if name is not None:
                names[key] = name
        return names


def parent_reference(level: EntityLevel, row: Any) -> EntityRef | None:
    """Return the first populated parent link of ``row`` in precedence order."""
    for link in level.parent_links:
        value = getattr(row, link.attr)
        if value:
            return link.parent_table, str(value)
    return None


def _entry(level: EntityLevel, row: Any) -> AncestorEntry:
    value = getattr(row, level.display_attr)
    return AncestorEntry(
        level_name=level.level_name,
        table=level.table,
        key=str(row.id),
        display_field=level.display_attr,
        value=None if value is None else str(value),
    )


def resolve_ancestors_many(
    db: Session,
    refs: Iterable[EntityRef],
    *,
    loader: EntityLoader | None = None,
    deadline: Deadline | None = None,
) -> dict[EntityRef, list[AncestorEntry]]:
    """Resolve the ancestor chain of every ref, nearest ancestor first.

    All refs advance one hop at a time; each hop loads the pending rows of a
    table with a single query. A missing row ends that ref's chain and keeps
    what was found so far. Untracked tables get an empty chain.
    """
    loader = loader or EntityLoader(db, deadline)
    chains: dict[EntityRef, list[AncestorEntry]] = {}
    frontier: dict[EntityRef, EntityRef] = {}
    visited: dict[EntityRef, set[EntityRef]] = {}
    for table, key in refs:
        ref = (str(table), str(key))
        chains[ref] = []
        if get_level(ref[0]) is not None:
            frontier[ref] = ref
            visited[ref] = {ref}

    while frontier:
        loader.load_many(frontier.values())
        next_frontier: dict[EntityRef, EntityRef] = {}
        for ref, node in frontier.items():
            level = get_level(node[0])
            row = loader.get(*node)
            if level is None or row is None:
                continue
            if node != ref:
                chains[ref].append(_entry(level, row))
            parent = parent_reference(level, row)
            if parent is None or parent in visited[ref]:
                continue
            visited[ref].add(parent)
            next_frontier[ref] = parent
        frontier = next_frontier

    return chains


def resolve_ancestors(
    db: Session,
    source_table: str,
    source_key: str,
    *,
    loader: EntityLoader | None = None,
    deadline: Deadline | None = None,
) -> list[AncestorEntry]:
    """Resolve one record's ancestor chain, nearest ancestor first."""
    ref = (source_table, str(source_key))
    return resolve_ancestors_many(db, [ref], loader=loader, deadline=deadline)[ref]


def ancestor_hints(
    db: Session,
    source_table: str,
    source_key: str,
    *,
    snapshot: dict[str, Any] | None = None,
    loader: EntityLoader | None = None,
) -> dict[str, str]:
    """Derive denormalized hint ids for a record from the current hierarchy.

    When the entity row is already gone (a delete), ``snapshot`` supplies the
    parent columns it had.
    """
    loader = loader or EntityLoader(db)
    hints: dict[str, str] = {}
    level = get_level(source_table)
    if level is None:
        return hints
    if level.hint_column is not None:
        hints[level.hint_column] = str(source_key)

    chain = resolve_ancestors(db, source_table, source_key, loader=loader)
    if not chain and loader.get(source_table, source_key) is None and snapshot:
        columns = {link.attr: snapshot.get(link.attr) for link in level.parent_links}
        parent = parent_reference(level, SimpleNamespace(**columns))
        if parent is not None:
            parent_level = get_level(parent[0])
            loader.load(parent[0], [parent[1]])
            parent_row = loader.get(*parent)
            if parent_level is not None and parent_row is not None:
                chain = [_entry(parent_level, parent_row)]
                chain += resolve_ancestors(db, *parent, loader=loader)

    for entry in chain:
        ancestor_level = get_level(entry.table)
        if ancestor_level is not None and ancestor_level.hint_column is not None:
            hints.setdefault(ancestor_level.hint_column, entry.key)
    return hints

