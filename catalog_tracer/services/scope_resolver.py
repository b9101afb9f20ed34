"""Forward (parent to children) walk computing the tables and keys in scope."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from catalog_tracer.core.config import settings
from catalog_tracer.services.change_store import Clause, HintClause, TableKeysClause
from catalog_tracer.services.hierarchy import descendant_levels, get_level
from catalog_tracer.services.query_guard import run_query
from catalog_tracer.utils.time import Deadline

logger = logging.getLogger(__name__)

ANCHOR_KINDS: dict[str, str] = {
    "brand": "brands",
    "category": "kategori_produks",
    "subcategory": "subkategori_produks",
    "knowledge": "knowledges",
    "kategori_sop": "kategori_sops",
    "sop": "sops",
    "quality_training": "quality_trainings",
}


@dataclass(frozen=True)
class ScopeAnchor:
    """The entity a scope query starts from."""

    table: str
    key: str

    @classmethod
    def for_kind(cls, kind: str, key: str) -> "ScopeAnchor":
        table = ANCHOR_KINDS.get(kind)
        if table is None:
            raise ValueError(f"Unknown scope kind: {kind}")
        return cls(table=table, key=key)


@dataclass
class Scope:
    """Anchor plus every descendant key found, ready for the store's OR query."""

    anchor: ScopeAnchor
    keys_by_table: dict[str, tuple[str, ...]] = field(default_factory=dict)
    hint: HintClause | None = None

    @property
    def clauses(self) -> list[Clause]:
        clauses: list[Clause] = [TableKeysClause(table, keys) for table, keys in self.keys_by_table.items() if keys]
        if self.hint is not None:
            clauses.append(self.hint)
        return clauses

    def contains(self, table: str, key: str) -> bool:
        return key in self.keys_by_table.get(table, ())


def resolve_scope(
    db: Session,
    anchor: ScopeAnchor,
    deadline: Deadline | None = None,
    *,
    use_hints: bool | None = None,
) -> Scope:
    """Collect the anchor and all of its descendants, one query per level.

    Levels are walked top-down because each level filters on the ids collected
    above it. A level with several parent links (products) matches on any of
    them. Levels that yield nothing are left out of the scope.
    """
    scope = Scope(anchor=anchor, keys_by_table={anchor.table: (anchor.key,)})
    level = get_level(anchor.table)
    if level is None:
        logger.info("[TRACER] Scope anchor table %s is not tracked; matching anchor key only", anchor.table)
        return scope

    for child in descendant_levels(anchor.table):
        conditions = [
            child.parent_column(link).in_(scope.keys_by_table[link.parent_table])
            for link in child.parent_links
            if scope.keys_by_table.get(link.parent_table)
        ]
        if not conditions:
            continue
        statement = select(child.id_column).where(or_(*conditions)).order_by(child.id_column)
        ids = run_query(db, statement, deadline)
        if ids:
            scope.keys_by_table[child.table] = tuple(dict.fromkeys(str(value) for value in ids))

    if use_hints is None:
        use_hints = settings.use_ancestor_hints
    # The store only applies hints to records whose entity row is gone.
    if use_hints and level.hint_column is not None:
        tables = (anchor.table,) + tuple(child.table for child in descendant_levels(anchor.table))
        scope.hint = HintClause(column=level.hint_column, ids=(anchor.key,), tables=tables)
    return scope
