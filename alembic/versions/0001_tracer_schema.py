"""tracer schema

Revision ID: 0001_tracer_schema
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_tracer_schema"
down_revision = None
branch_labels = None
depends_on = None

HINT_COLUMNS = ("brand_id", "category_id", "subcategory_id", "knowledge_id", "sop_id", "quality_training_id")


def _id_column() -> sa.Column:
    return sa.Column("id", sa.String(length=36), primary_key=True)


def _parent_column(name: str, target: str) -> sa.Column:
    return sa.Column(name, sa.String(length=36), sa.ForeignKey(f"{target}.id", ondelete="SET NULL"), nullable=True)


def upgrade() -> None:
    op.create_table(
        "users",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column(
            "role",
            sa.Enum("SUPER_ADMIN", "ADMIN", "USER", name="user_role"),
            nullable=False,
            server_default="ADMIN",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_table(
        "agents",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
    )
    op.create_index("ix_agents_email", "agents", ["email"], unique=True)

    op.create_table(
        "brands",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("update_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "kategori_produks",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _parent_column("brand_id", "brands"),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )
    op.create_table(
        "subkategori_produks",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _parent_column("kategori_produk_id", "kategori_produks"),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )
    op.create_table(
        "produks",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("kapasitas", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="ACTIVE"),
        _parent_column("subkategori_produk_id", "subkategori_produks"),
        _parent_column("category_id", "kategori_produks"),
        _parent_column("brand_id", "brands"),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )
    op.create_table(
        "detail_produks",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("detail", sa.Text(), nullable=True),
        _parent_column("produk_id", "produks"),
    )

    op.create_table(
        "knowledges",
        _id_column(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )
    op.create_table(
        "detail_knowledges",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _parent_column("knowledge_id", "knowledges"),
    )
    op.create_table(
        "jenis_detail_knowledges",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _parent_column("detail_knowledge_id", "detail_knowledges"),
    )
    op.create_table(
        "produk_jenis_detail_knowledges",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _parent_column("jenis_detail_knowledge_id", "jenis_detail_knowledges"),
    )

    op.create_table(
        "kategori_sops",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
    )
    op.create_table(
        "sops",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _parent_column("kategori_sop_id", "kategori_sops"),
    )
    op.create_table(
        "jenis_sops",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        _parent_column("sop_id", "sops"),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )
    op.create_table(
        "detail_sops",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("value", sa.Text(), nullable=True),
        _parent_column("jenis_sop_id", "jenis_sops"),
    )

    op.create_table(
        "quality_trainings",
        _id_column(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )
    op.create_table(
        "jenis_quality_trainings",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _parent_column("quality_training_id", "quality_trainings"),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )
    op.create_table(
        "detail_quality_trainings",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("linkslide", sa.String(length=500), nullable=True),
        _parent_column("jenis_quality_training_id", "jenis_quality_trainings"),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )
    op.create_table(
        "subdetail_quality_trainings",
        _id_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _parent_column("detail_quality_training_id", "detail_quality_trainings"),
        sa.Column("update_notes", sa.Text(), nullable=True),
    )

    op.create_table(
        "tracer_updates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("source_table", sa.String(length=128), nullable=False),
        sa.Column("source_key", sa.String(length=255), nullable=False),
        sa.Column("field_name", sa.String(length=128), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("action_type", sa.String(length=16), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("changed_by", sa.String(length=255), nullable=True),
        *[sa.Column(column, sa.String(length=36), nullable=True) for column in HINT_COLUMNS],
    )
    op.create_index("ix_tracer_updates_source", "tracer_updates", ["source_table", "source_key"])
    op.create_index("ix_tracer_updates_changed_at", "tracer_updates", ["changed_at"])
    op.create_index("ix_tracer_updates_changed_by", "tracer_updates", ["changed_by"])
    for column in HINT_COLUMNS:
        op.create_index(f"ix_tracer_updates_{column}", "tracer_updates", [column])


def downgrade() -> None:
    for column in HINT_COLUMNS:
        op.drop_index(f"ix_tracer_updates_{column}", table_name="tracer_updates")
    op.drop_index("ix_tracer_updates_changed_by", table_name="tracer_updates")
    op.drop_index("ix_tracer_updates_changed_at", table_name="tracer_updates")
    op.drop_index("ix_tracer_updates_source", table_name="tracer_updates")
    op.drop_table("tracer_updates")
    for table in (
        "subdetail_quality_trainings",
        "detail_quality_trainings",
        "jenis_quality_trainings",
        "quality_trainings",
        "detail_sops",
        "jenis_sops",
        "sops",
        "kategori_sops",
        "produk_jenis_detail_knowledges",
        "jenis_detail_knowledges",
        "detail_knowledges",
        "knowledges",
        "detail_produks",
        "produks",
        "subkategori_produks",
        "kategori_produks",
        "brands",
    ):
        op.drop_table(table)
    op.drop_index("ix_agents_email", table_name="agents")
    op.drop_table("agents")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
