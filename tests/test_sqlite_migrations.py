"""Tests for lightweight SQLite schema migrations."""

from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from catalog_tracer.core.security import create_access_token
from catalog_tracer.db import session as db_session
from catalog_tracer.db.base import Base
from catalog_tracer.db.migrations import ensure_sqlite_schema
from catalog_tracer.main import app
from catalog_tracer.models import User
from catalog_tracer.models.change_record import HINT_COLUMNS


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _replace_tracer_updates_with_legacy_table(engine: Engine) -> None:
    with engine.begin() as connection:
        connection.execute(text("DROP TABLE tracer_updates"))
        connection.execute(
            text(
                """
                CREATE TABLE tracer_updates (
                    id INTEGER NOT NULL,
                    source_table VARCHAR(128) NOT NULL,
                    source_key VARCHAR(255) NOT NULL,
                    field_name VARCHAR(128) NOT NULL,
                    old_value TEXT,
                    new_value TEXT,
                    action_type VARCHAR(16) NOT NULL,
                    changed_at DATETIME NOT NULL,
                    changed_by VARCHAR(255),
                    PRIMARY KEY (id)
                )
                """
            )
        )
        connection.execute(
            text(
                """
                INSERT INTO tracer_updates (source_table, source_key, field_name, old_value, new_value, action_type, changed_at)
                VALUES ('brands', 'brand-legacy', 'name', NULL, 'Legacy', 'INSERT', '2025-01-01 00:00:00')
                """
            )
        )


def test_ensure_sqlite_schema_adds_hint_columns_and_indexes(tmp_path: Path) -> None:
    """Upgrade should add hint columns and indexes to a legacy log."""
    engine = _build_test_engine(tmp_path / "legacy_tracer.db")
    Base.metadata.create_all(bind=engine)
    _replace_tracer_updates_with_legacy_table(engine)

    ensure_sqlite_schema(engine)
    ensure_sqlite_schema(engine)

    with engine.begin() as connection:
        columns = {str(row[1]) for row in connection.execute(text("PRAGMA table_info(tracer_updates);"))}
        indexes = {str(row[1]) for row in connection.execute(text("PRAGMA index_list(tracer_updates);"))}
        legacy_rows = connection.execute(text("SELECT source_key, brand_id FROM tracer_updates")).all()

    assert set(HINT_COLUMNS) <= columns
    assert {"ix_tracer_updates_source", "ix_tracer_updates_changed_at", "ix_tracer_updates_brand_id"} <= indexes
    assert [(row[0], row[1]) for row in legacy_rows] == [("brand-legacy", None)]


def test_ensure_sqlite_schema_normalizes_legacy_lowercase_roles(tmp_path: Path) -> None:
    """Upgrade should upper-case legacy roles."""
    engine = _build_test_engine(tmp_path / "legacy_user_roles.db")
    Base.metadata.create_all(bind=engine)

    with engine.begin() as connection:
        connection.execute(
            text(
                """
                INSERT INTO users (id, name, email, role, is_active, created_at)
                VALUES
                    ('u-1', 'Legacy Admin', 'legacy-admin@example.com', 'admin', 1, CURRENT_TIMESTAMP),
                    ('u-2', 'Legacy Super', 'legacy-super@example.com', 'super_admin', 1, CURRENT_TIMESTAMP)
                """
            )
        )

    ensure_sqlite_schema(engine)

    with engine.begin() as connection:
        roles = {str(row[0]) for row in connection.execute(text("SELECT role FROM users"))}

    assert roles == {"ADMIN", "SUPER_ADMIN"}


def test_startup_migration_lets_legacy_log_be_queried(tmp_path: Path, monkeypatch) -> None:
    """Startup upgrade should make a legacy log queryable."""
    engine = _build_test_engine(tmp_path / "legacy_app.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    _replace_tracer_updates_with_legacy_table(engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with testing_session_local() as setup_session:
        setup_session.add(User(id="admin-1", name="Admin", email="admin@example.com", role="ADMIN"))
        setup_session.commit()

    headers = {"Authorization": f"Bearer {create_access_token(data={'sub': 'admin-1'})}"}
    with TestClient(app) as client:
        response = client.get("/api/v1/changes", params={"brand_id": "brand-legacy"}, headers=headers)

    assert response.status_code == 200
    assert [item["source_key"] for item in response.json()] == ["brand-legacy"]
