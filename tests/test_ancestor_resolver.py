"""Ancestor resolver tests: backward walk from a record to the root."""

import pytest
from sqlalchemy import text

from catalog_tracer.models import Produk
from catalog_tracer.services.ancestor_resolver import (
    EntityLoader,
    ancestor_hints,
    resolve_ancestors,
    resolve_ancestors_many,
)
from catalog_tracer.services.scope_resolver import ScopeAnchor, resolve_scope


def _levels(chain) -> list[tuple[str, str | None]]:
    return [(entry.level_name, entry.value) for entry in chain]


def test_product_chain_is_nearest_first(db, catalog) -> None:
    """Product chain should list ancestors nearest first."""
    chain = resolve_ancestors(db, "produks", catalog.hydra_id)

    assert _levels(chain) == [("Subcategory", "Serums"), ("Category", "Skincare"), ("Brand", "Acme")]
    assert [entry.key for entry in chain] == ["sub-serums", "cat-skincare", "brand-acme"]


def test_direct_category_product_skips_subcategory(db, catalog) -> None:
    """Product linked to a category should skip the subcategory level."""
    chain = resolve_ancestors(db, "produks", "prod-direct-cat")

    assert _levels(chain) == [("Category", "Skincare"), ("Brand", "Acme")]


def test_subcategory_link_wins_over_direct_brand_link(db, catalog) -> None:
    """Subcategory link should take precedence over a direct brand link."""
    db.add(Produk(id="prod-both", name="Clay Mask", subkategori_produk_id="sub-masks", brand_id="brand-other"))
    db.commit()

    chain = resolve_ancestors(db, "produks", "prod-both")

    assert _levels(chain) == [("Subcategory", "Masks"), ("Category", "Skincare"), ("Brand", "Acme")]


@pytest.mark.parametrize(
    ("table", "key", "expected"),
    [
        (
            "produk_jenis_detail_knowledges",
            "pjdk-1",
            [("Jenis Detail Knowledge", "Serum basics"), ("Detail Knowledge", "Product basics"), ("Knowledge", "Onboarding")],
        ),
        ("detail_sops", "dsop-1", [("Jenis SOP", "Online refund"), ("SOP", "Refund"), ("Kategori SOP", "Operations")]),
        (
            "subdetail_quality_trainings",
            "sdqt-1",
            [
                ("Detail Quality Training", "Phone greeting"),
                ("Jenis Quality Training", "Greeting"),
                ("Quality Training", "Service Excellence"),
            ],
        ),
    ],
)
def test_chains_for_other_trees(db, catalog, table, key, expected) -> None:
    """Knowledge, SOP and training trees should resolve their chains."""
    assert _levels(resolve_ancestors(db, table, key)) == expected


def test_title_levels_report_their_display_field(db, catalog) -> None:
    """Title-based levels should report title as display field."""
    chain = resolve_ancestors(db, "detail_knowledges", "dk-1")

    assert chain[0].display_field == "title"
    assert chain[0].table == "knowledges"


def test_deleted_ancestor_truncates_chain(db, catalog) -> None:
    """Missing parent should truncate the chain."""
    db.execute(text("DELETE FROM kategori_produks WHERE id = 'cat-skincare'"))
    db.commit()

    chain = resolve_ancestors(db, "produks", catalog.hydra_id)

    assert _levels(chain) == [("Subcategory", "Serums")]


def test_unknown_table_and_missing_entity_give_empty_chain(db, catalog) -> None:
    """Unknown tables and missing entities should give empty chains."""
    assert resolve_ancestors(db, "announcements", "a-1") == []
    assert resolve_ancestors(db, "produks", "prod-gone") == []
    assert resolve_ancestors(db, "brands", catalog.brand_id) == []


def test_batch_loads_each_hop_once_per_table(db, catalog, query_counter) -> None:
    """Batch walk should load each hop once per table."""
    refs = [("produks", "prod-hydra"), ("produks", "prod-direct-cat"), ("produks", "prod-direct-brand")]

    chains = resolve_ancestors_many(db, refs)

    # produks, then subkategori_produks + kategori_produks + brands; later hops hit the cache.
    assert query_counter.count == 4
    assert _levels(chains[("produks", "prod-direct-brand")]) == [("Brand", "Acme")]
    assert len(chains[("produks", "prod-hydra")]) == 3


def test_loader_keeps_source_rows_for_enrichment(db, catalog) -> None:
    """Loader should keep source rows for record names."""
    loader = EntityLoader(db)
    resolve_ancestors_many(db, [("brands", catalog.brand_id)], loader=loader)

    assert loader.get("brands", catalog.brand_id).update_notes == "Rebrand 2026"
    assert loader.display_name("brands", catalog.brand_id) == "Acme"
    assert loader.names("subkategori_produks", ["sub-serums", "sub-gone"]) == {"sub-serums": "Serums"}


@pytest.mark.parametrize(
    ("table", "key"),
    [
        ("detail_produks", "detail-hydra-size"),
        ("produks", "prod-direct-cat"),
        ("produk_jenis_detail_knowledges", "pjdk-1"),
        ("detail_sops", "dsop-1"),
        ("subdetail_quality_trainings", "sdqt-1"),
    ],
)
def test_scope_of_top_ancestor_contains_record(db, catalog, table, key) -> None:
    """Top ancestor scope should contain every record on the chain."""
    top = resolve_ancestors(db, table, key)[-1]

    scope = resolve_scope(db, ScopeAnchor(top.table, top.key), use_hints=False)

    assert scope.contains(table, key)


def test_ancestor_hints_include_own_and_ancestor_columns(db, catalog) -> None:
    """Hints should cover the entity and all of its ancestors."""
    assert ancestor_hints(db, "produks", catalog.hydra_id) == {
        "subcategory_id": "sub-serums",
        "category_id": "cat-skincare",
        "brand_id": "brand-acme",
    }
    assert ancestor_hints(db, "sops", "sop-refund") == {"sop_id": "sop-refund"}
    assert ancestor_hints(db, "detail_sops", "dsop-1") == {"sop_id": "sop-refund"}
    assert ancestor_hints(db, "announcements", "a-1") == {}


def test_ancestor_hints_use_snapshot_for_deleted_rows(db, catalog) -> None:
    """Hints for deleted rows should come from the snapshot parents."""
    db.execute(text("DELETE FROM produks WHERE id = 'prod-hydra'"))
    db.commit()

    hints = ancestor_hints(db, "produks", catalog.hydra_id, snapshot={"subkategori_produk_id": "sub-serums"})

    assert hints == {"subcategory_id": "sub-serums", "category_id": "cat-skincare", "brand_id": "brand-acme"}
