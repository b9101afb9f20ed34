"""Append-only field-level change log."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog_tracer.db.base import Base

ACTION_TYPES = ("INSERT", "UPDATE", "DELETE")


class ChangeRecord(Base):
    """Stores one changed field of one catalog entity.

    Rows are never updated or deleted. ``action_type`` describes what happened
    to the source entity, not to the log row. The ``*_id`` hint columns are
    ancestor ids captured at write time and may be missing or stale.
    """

    __tablename__ = "tracer_updates"
    __table_args__ = (
        Index("ix_tracer_updates_source", "source_table", "source_key"),
        Index("ix_tracer_updates_changed_at", "changed_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_table: Mapped[str] = mapped_column(String(128), nullable=False)
    source_key: Mapped[str] = mapped_column(String(255), nullable=False)
    field_name: Mapped[str] = mapped_column(String(128), nullable=False)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    action_type: Mapped[str] = mapped_column(String(16), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    changed_by: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    brand_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    category_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    subcategory_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    knowledge_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    sop_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    quality_training_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)


HINT_COLUMNS: tuple[str, ...] = (
    "brand_id",
    "category_id",
    "subcategory_id",
    "knowledge_id",
    "sop_id",
    "quality_training_id",
)
