"""Product tree ORM models: brand, category, subcategory, product, detail."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_tracer.db.base import Base
from catalog_tracer.utils.ids import new_id


class Brand(Base):
    """Top of the product tree."""

    __tablename__ = "brands"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    categories: Mapped[list["KategoriProduk"]] = relationship(back_populates="brand")


class KategoriProduk(Base):
    """Product category owned by a brand."""

    __tablename__ = "kategori_produks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    brand_id: Mapped[str | None] = mapped_column(ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True)
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    brand: Mapped[Brand | None] = relationship(back_populates="categories")
    subcategories: Mapped[list["SubkategoriProduk"]] = relationship(back_populates="kategori_produk")


class SubkategoriProduk(Base):
    """Product subcategory owned by a category."""

    __tablename__ = "subkategori_produks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    kategori_produk_id: Mapped[str | None] = mapped_column(
        ForeignKey("kategori_produks.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    kategori_produk: Mapped[KategoriProduk | None] = relationship(back_populates="subcategories")


class Produk(Base):
    """Product linked to a subcategory, a category or a brand directly.

    The three parent pointers are optional and may disagree; readers resolve
    them in the order subcategory, category, brand.
    """

    __tablename__ = "produks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    kapasitas: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="ACTIVE")
    subkategori_produk_id: Mapped[str | None] = mapped_column(
        ForeignKey("subkategori_produks.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    category_id: Mapped[str | None] = mapped_column(
        ForeignKey("kategori_produks.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    brand_id: Mapped[str | None] = mapped_column(ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True)
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    details: Mapped[list["DetailProduk"]] = relationship(back_populates="produk")


class DetailProduk(Base):
    """Named detail row of a product."""

    __tablename__ = "detail_produks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    produk_id: Mapped[str | None] = mapped_column(ForeignKey("produks.id", ondelete="SET NULL"), nullable=True, index=True)

    produk: Mapped[Produk | None] = relationship(back_populates="details")
