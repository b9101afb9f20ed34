"""Knowledge tree ORM models."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog_tracer.db.base import Base
from catalog_tracer.utils.ids import new_id


class Knowledge(Base):
    """Knowledge article, displayed by title."""

    __tablename__ = "knowledges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class DetailKnowledge(Base):
    __tablename__ = "detail_knowledges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    knowledge_id: Mapped[str | None] = mapped_column(
        ForeignKey("knowledges.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )


class JenisDetailKnowledge(Base):
    __tablename__ = "jenis_detail_knowledges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    detail_knowledge_id: Mapped[str | None] = mapped_column(
        ForeignKey("detail_knowledges.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )


class ProdukJenisDetailKnowledge(Base):
    __tablename__ = "produk_jenis_detail_knowledges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    jenis_detail_knowledge_id: Mapped[str | None] = mapped_column(
        ForeignKey("jenis_detail_knowledges.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
