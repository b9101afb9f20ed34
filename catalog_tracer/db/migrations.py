"""Lightweight schema migrations for SQLite databases."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from catalog_tracer.models.change_record import HINT_COLUMNS


def _sqlite_column_names(connection: Connection, table_name: str) -> set[str]:
    """Return column names for a SQLite table using PRAGMA table_info."""
    rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _sqlite_index_names(connection: Connection, table_name: str) -> set[str]:
    """Return index names for a SQLite table using PRAGMA index_list."""
    rows = connection.execute(text(f"PRAGMA index_list({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def ensure_sqlite_schema(engine: Engine) -> None:
    """Apply lightweight schema updates for legacy SQLite databases.

    Older change logs were created before ancestor hints existed; the hint
    columns and lookup indexes are added in place and left NULL.
    """
    if engine.dialect.name != "sqlite":
        return

    with engine.begin() as connection:
        table_rows = connection.execute(text("SELECT name FROM sqlite_master WHERE type='table';")).all()
        table_names: set[str] = {str(row[0]) for row in table_rows}

        if "tracer_updates" in table_names:
            tracer_columns = _sqlite_column_names(connection, "tracer_updates")
            for column in HINT_COLUMNS:
                if column not in tracer_columns:
                    connection.execute(text(f"ALTER TABLE tracer_updates ADD COLUMN {column} VARCHAR(36)"))

            tracer_indexes = _sqlite_index_names(connection, "tracer_updates")
            if "ix_tracer_updates_source" not in tracer_indexes:
                connection.execute(
                    text(
                        "CREATE INDEX IF NOT EXISTS ix_tracer_updates_source "
                        "ON tracer_updates (source_table, source_key)"
                    )
                )
            if "ix_tracer_updates_changed_at" not in tracer_indexes:
                connection.execute(
                    text("CREATE INDEX IF NOT EXISTS ix_tracer_updates_changed_at ON tracer_updates (changed_at)")
                )
            for column in HINT_COLUMNS:
                index_name = f"ix_tracer_updates_{column}"
                if index_name not in tracer_indexes:
                    connection.execute(
                        text(f"CREATE INDEX IF NOT EXISTS {index_name} ON tracer_updates ({column})")
                    )

        if "users" in table_names:
            connection.execute(
                text(
                    """
                    UPDATE users
                    SET role = UPPER(role)
                    WHERE role IN ('admin', 'super_admin', 'user')
                    """
                )
            )
