"""Shared fixtures: a throwaway SQLite database per test and a small catalog."""

from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from catalog_tracer.db import session as db_session
from catalog_tracer.db.base import Base
from catalog_tracer.models import (
    SOP,
    Agent,
    Brand,
    DetailKnowledge,
    DetailProduk,
    DetailQualityTraining,
    DetailSOP,
    JenisDetailKnowledge,
    JenisQualityTraining,
    JenisSOP,
    KategoriProduk,
    KategoriSOP,
    Knowledge,
    Produk,
    ProdukJenisDetailKnowledge,
    QualityTraining,
    SubdetailQualityTraining,
    SubkategoriProduk,
    User,
)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


class QueryCounter:
    """Counts SELECT statements sent through an engine."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def record(self, conn, cursor, statement, parameters, context, executemany) -> None:
        if statement.lstrip().upper().startswith("SELECT"):
            self.statements.append(statement)

    @property
    def count(self) -> int:
        return len(self.statements)

    def reset(self) -> None:
        self.statements.clear()


@pytest.fixture
def engine(tmp_path: Path, monkeypatch) -> Iterator[Engine]:
    test_engine = _build_test_engine(tmp_path / "tracer.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    monkeypatch.setattr(db_session, "engine", test_engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_local(engine: Engine) -> sessionmaker:
    return db_session.SessionLocal


@pytest.fixture
def db(session_local: sessionmaker) -> Iterator[Session]:
    with session_local() as session:
        yield session


@pytest.fixture
def query_counter(engine: Engine) -> Iterator[QueryCounter]:
    counter = QueryCounter()
    listener = counter.record
    event.listen(engine, "before_cursor_execute", listener)
    yield counter
    event.remove(engine, "before_cursor_execute", listener)


@pytest.fixture
def catalog(session_local: sessionmaker) -> SimpleNamespace:
    """Acme brand tree plus one small tree of every other kind."""
    with session_local() as session:
        session.add_all(
            [
                Brand(id="brand-acme", name="Acme", update_notes="Rebrand 2026"),
                Brand(id="brand-other", name="Other Co"),
                KategoriProduk(id="cat-skincare", name="Skincare", brand_id="brand-acme"),
                SubkategoriProduk(id="sub-serums", name="Serums", kategori_produk_id="cat-skincare"),
                SubkategoriProduk(id="sub-masks", name="Masks", kategori_produk_id="cat-skincare"),
                Produk(id="prod-hydra", name="Hydra Serum", subkategori_produk_id="sub-serums"),
                Produk(id="prod-direct-brand", name="Day Cream", brand_id="brand-acme"),
                Produk(id="prod-direct-cat", name="Body Lotion", category_id="cat-skincare"),
                Produk(id="prod-other", name="Other Soap", brand_id="brand-other"),
                DetailProduk(id="detail-hydra-size", name="Size", produk_id="prod-hydra"),
                Knowledge(id="kn-onboarding", title="Onboarding"),
                DetailKnowledge(id="dk-1", name="Product basics", knowledge_id="kn-onboarding"),
                JenisDetailKnowledge(id="jdk-1", name="Serum basics", detail_knowledge_id="dk-1"),
                ProdukJenisDetailKnowledge(id="pjdk-1", name="Hydra Serum facts", jenis_detail_knowledge_id="jdk-1"),
                KategoriSOP(id="ks-ops", name="Operations"),
                SOP(id="sop-refund", name="Refund", kategori_sop_id="ks-ops"),
                JenisSOP(id="jsop-1", name="Online refund", sop_id="sop-refund"),
                DetailSOP(id="dsop-1", name="Step 1", jenis_sop_id="jsop-1"),
                QualityTraining(id="qt-service", title="Service Excellence"),
                JenisQualityTraining(id="jqt-1", name="Greeting", quality_training_id="qt-service"),
                DetailQualityTraining(id="dqt-1", name="Phone greeting", jenis_quality_training_id="jqt-1"),
                SubdetailQualityTraining(id="sdqt-1", name="Opening line", detail_quality_training_id="dqt-1"),
                User(id="user-admin", name="Alice Admin", email="alice@example.com", role="ADMIN"),
                User(id="user-plain", name="Paul Plain", email="paul@example.com", role="USER"),
                Agent(id="agent-bob", name="Bob Agent", email="bob@example.com", category="CS"),
            ]
        )
        session.commit()

    return SimpleNamespace(
        brand_id="brand-acme",
        other_brand_id="brand-other",
        category_id="cat-skincare",
        serums_id="sub-serums",
        masks_id="sub-masks",
        hydra_id="prod-hydra",
        admin_id="user-admin",
        agent_id="agent-bob",
    )
