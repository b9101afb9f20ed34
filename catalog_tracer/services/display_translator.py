"""Turn raw change records into labels and values a person can read."""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from catalog_tracer.services.hierarchy import foreign_key_table, is_tracked

ID_FIELD_LABEL = "Name"

_ID_SUFFIX = re.compile(r"_?id$", re.IGNORECASE)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


@dataclass(frozen=True)
class DisplayValues:
    """Transient, presentation-only copy of one record's field and values."""

    source_table: str
    field_name: str
    old_value: str | None
    new_value: str | None

    @classmethod
    def from_record(cls, record: Any) -> "DisplayValues":
        return cls(
            source_table=record.source_table,
            field_name=record.field_name,
            old_value=record.old_value,
            new_value=record.new_value,
        )


def humanize_field(field_name: str) -> str:
    """``qualityTrainingId`` -> ``Quality Training``, ``kategori_sop_id`` -> ``Kategori Sop``."""
    stem = _ID_SUFFIX.sub("", field_name)
    stem = _CAMEL_BOUNDARY.sub(" ", stem).replace("_", " ")
    return " ".join(word[:1].upper() + word[1:] for word in stem.split())


def foreign_key_target(field_name: str, source_table: str) -> str | None:
    """Return the table whose ids ``field_name`` holds, or None for plain fields.

    A literal ``id`` field refers back to the record's own table, and only
    when that table is tracked.
    """
    if field_name == "id":
        return source_table if is_tracked(source_table) else None
    return foreign_key_table(field_name)


def display_field_name(field_name: str, source_table: str) -> str:
    if field_name == "id":
        return ID_FIELD_LABEL if is_tracked(source_table) else field_name
    if foreign_key_table(field_name) is not None:
        return humanize_field(field_name)
    return field_name


def translate(values: DisplayValues, names: Mapping[str, Mapping[str, str]]) -> DisplayValues:
    """Rename the field and swap referenced ids for display names.

    ``names`` maps table -> id -> display name. Ids with no loaded name keep
    their raw value. The input is never modified; a new copy is returned.
    """
    target = foreign_key_target(values.field_name, values.source_table)
    if target is None:
        return values

    table_names = names.get(target, {})

    def _value(raw: str | None) -> str | None:
        if raw is None:
            return None
        return table_names.get(raw, raw)

    return replace(
        values,
        field_name=display_field_name(values.field_name, values.source_table),
        old_value=_value(values.old_value),
        new_value=_value(values.new_value),
    )


def collect_references(records: Iterable[Any]) -> dict[str, set[str]]:
    """Gather every referenced id per table so names load one query per table."""
    references: dict[str, set[str]] = defaultdict(set)
    for record in records:
        target = foreign_key_target(record.field_name, record.source_table)
        if target is None:
            continue
        for value in (record.old_value, record.new_value):
            if value:
                references[target].add(value)
    return dict(references)
