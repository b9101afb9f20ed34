"""Static description of the four catalog trees.

Every tracked table is declared once as an ``EntityLevel``. The scope and
ancestor resolvers, the display translator and the write path only read this
registry, so wiring in a new tree means adding levels here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from catalog_tracer.models import (
    SOP,
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
)


@dataclass(frozen=True)
class ParentLink:
    """A parent-reference column of a level and the table it points at."""

    attr: str
    parent_table: str


@dataclass(frozen=True)
class EntityLevel:
    """One tracked table and how to reach its parent."""

    table: str
    model: Any
    level_name: str
    display_attr: str = "name"
    parent_links: tuple[ParentLink, ...] = ()
    hint_column: str | None = None
    has_update_notes: bool = False

    @property
    def id_column(self) -> Any:
        return self.model.id

    @property
    def display_column(self) -> Any:
        return getattr(self.model, self.display_attr)

    def parent_column(self, link: ParentLink) -> Any:
        return getattr(self.model, link.attr)


PRODUCT_TREE: tuple[EntityLevel, ...] = (
    EntityLevel("brands", Brand, "Brand", hint_column="brand_id", has_update_notes=True),
    EntityLevel(
        "kategori_produks",
        KategoriProduk,
        "Category",
        parent_links=(ParentLink("brand_id", "brands"),),
        hint_column="category_id",
        has_update_notes=True,
    ),
    EntityLevel(
        "subkategori_produks",
        SubkategoriProduk,
        "Subcategory",
        parent_links=(ParentLink("kategori_produk_id", "kategori_produks"),),
        hint_column="subcategory_id",
        has_update_notes=True,
    ),
    EntityLevel(
        "produks",
        Produk,
        "Product",
        # Precedence order: the first populated link wins on the way up.
        parent_links=(
            ParentLink("subkategori_produk_id", "subkategori_produks"),
            ParentLink("category_id", "kategori_produks"),
            ParentLink("brand_id", "brands"),
        ),
        has_update_notes=True,
    ),
    EntityLevel(
        "detail_produks",
        DetailProduk,
        "Product Detail",
        parent_links=(ParentLink("produk_id", "produks"),),
    ),
)

KNOWLEDGE_TREE: tuple[EntityLevel, ...] = (
    EntityLevel("knowledges", Knowledge, "Knowledge", display_attr="title", hint_column="knowledge_id", has_update_notes=True),
    EntityLevel(
        "detail_knowledges",
        DetailKnowledge,
        "Detail Knowledge",
        parent_links=(ParentLink("knowledge_id", "knowledges"),),
    ),
    EntityLevel(
        "jenis_detail_knowledges",
        JenisDetailKnowledge,
        "Jenis Detail Knowledge",
        parent_links=(ParentLink("detail_knowledge_id", "detail_knowledges"),),
    ),
    EntityLevel(
        "produk_jenis_detail_knowledges",
        ProdukJenisDetailKnowledge,
        "Produk Jenis Detail Knowledge",
        parent_links=(ParentLink("jenis_detail_knowledge_id", "jenis_detail_knowledges"),),
    ),
)

SOP_TREE: tuple[EntityLevel, ...] = (
    EntityLevel("kategori_sops", KategoriSOP, "Kategori SOP"),
    EntityLevel(
        "sops",
        SOP,
        "SOP",
        parent_links=(ParentLink("kategori_sop_id", "kategori_sops"),),
        hint_column="sop_id",
    ),
    EntityLevel(
        "jenis_sops",
        JenisSOP,
        "Jenis SOP",
        parent_links=(ParentLink("sop_id", "sops"),),
        has_update_notes=True,
    ),
    EntityLevel(
        "detail_sops",
        DetailSOP,
        "Detail SOP",
        parent_links=(ParentLink("jenis_sop_id", "jenis_sops"),),
    ),
)

QUALITY_TRAINING_TREE: tuple[EntityLevel, ...] = (
    EntityLevel(
        "quality_trainings",
        QualityTraining,
        "Quality Training",
        display_attr="title",
        hint_column="quality_training_id",
        has_update_notes=True,
    ),
    EntityLevel(
        "jenis_quality_trainings",
        JenisQualityTraining,
        "Jenis Quality Training",
        parent_links=(ParentLink("quality_training_id", "quality_trainings"),),
        has_update_notes=True,
    ),
    EntityLevel(
        "detail_quality_trainings",
        DetailQualityTraining,
        "Detail Quality Training",
        parent_links=(ParentLink("jenis_quality_training_id", "jenis_quality_trainings"),),
        has_update_notes=True,
    ),
    EntityLevel(
        "subdetail_quality_trainings",
        SubdetailQualityTraining,
        "Subdetail Quality Training",
        parent_links=(ParentLink("detail_quality_training_id", "detail_quality_trainings"),),
        has_update_notes=True,
    ),
)

TREES: dict[str, tuple[EntityLevel, ...]] = {
    "product": PRODUCT_TREE,
    "knowledge": KNOWLEDGE_TREE,
    "sop": SOP_TREE,
    "quality_training": QUALITY_TRAINING_TREE,
}

LEVELS: dict[str, EntityLevel] = {level.table: level for tree in TREES.values() for level in tree}
TREE_BY_TABLE: dict[str, str] = {level.table: name for name, tree in TREES.items() for level in tree}

# Foreign-key field names as written by the catalog tables, lowercased with
# underscores removed, mapped to the table they reference.
FOREIGN_KEY_TABLES: dict[str, str] = {
    "brandid": "brands",
    "categoryid": "kategori_produks",
    "kategoriprodukid": "kategori_produks",
    "subcategoryid": "subkategori_produks",
    "subkategoriprodukid": "subkategori_produks",
    "productid": "produks",
    "produkid": "produks",
    "detailprodukid": "detail_produks",
    "knowledgeid": "knowledges",
    "detailknowledgeid": "detail_knowledges",
    "jenisdetailknowledgeid": "jenis_detail_knowledges",
    "produkjenisdetailknowledgeid": "produk_jenis_detail_knowledges",
    "kategorisopid": "kategori_sops",
    "sopid": "sops",
    "jenissopid": "jenis_sops",
    "jenisopid": "jenis_sops",
    "qualitytrainingid": "quality_trainings",
    "jenisqualitytrainingid": "jenis_quality_trainings",
    "detailqualitytrainingid": "detail_quality_trainings",
    "subdetailqualitytrainingid": "subdetail_quality_trainings",
}


def get_level(table: str) -> EntityLevel | None:
    """Return the registered level for a table, or None when not tracked."""
    return LEVELS.get(table)


def is_tracked(table: str) -> bool:
    return table in LEVELS


def tree_of(table: str) -> tuple[EntityLevel, ...]:
    """Return the levels of the tree containing ``table`` (top-down)."""
    name = TREE_BY_TABLE.get(table)
    if name is None:
        return ()
    return TREES[name]


def descendant_levels(table: str) -> tuple[EntityLevel, ...]:
    """Return the levels below ``table`` in its tree, top-down."""
    tree = tree_of(table)
    for index, level in enumerate(tree):
        if level.table == table:
            return tree[index + 1:]
    return ()


def foreign_key_table(field_name: str) -> str | None:
    """Map a foreign-key-shaped field name to the table it references."""
    normalized = field_name.replace("_", "").lower()
    return FOREIGN_KEY_TABLES.get(normalized)
