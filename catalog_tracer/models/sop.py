"""SOP tree ORM models."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog_tracer.db.base import Base
from catalog_tracer.utils.ids import new_id


class KategoriSOP(Base):
    """Grouping of SOP documents."""

    __tablename__ = "kategori_sops"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class SOP(Base):
    __tablename__ = "sops"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    kategori_sop_id: Mapped[str | None] = mapped_column(
        ForeignKey("kategori_sops.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )


class JenisSOP(Base):
    __tablename__ = "jenis_sops"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    sop_id: Mapped[str | None] = mapped_column(ForeignKey("sops.id", ondelete="SET NULL"), nullable=True, index=True)
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class DetailSOP(Base):
    __tablename__ = "detail_sops"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    jenis_sop_id: Mapped[str | None] = mapped_column(
        ForeignKey("jenis_sops.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
