"""Quality training tree ORM models."""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog_tracer.db.base import Base
from catalog_tracer.utils.ids import new_id


class QualityTraining(Base):
    """Quality training programme, displayed by title."""

    __tablename__ = "quality_trainings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class JenisQualityTraining(Base):
    __tablename__ = "jenis_quality_trainings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    quality_training_id: Mapped[str | None] = mapped_column(
        ForeignKey("quality_trainings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class DetailQualityTraining(Base):
    __tablename__ = "detail_quality_trainings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    linkslide: Mapped[str | None] = mapped_column(String(500), nullable=True)
    jenis_quality_training_id: Mapped[str | None] = mapped_column(
        ForeignKey("jenis_quality_trainings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class SubdetailQualityTraining(Base):
    __tablename__ = "subdetail_quality_trainings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    detail_quality_training_id: Mapped[str | None] = mapped_column(
        ForeignKey("detail_quality_trainings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    update_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
