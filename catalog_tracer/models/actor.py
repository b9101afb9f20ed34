"""Actor directories: staff users and external agents."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from catalog_tracer.db.base import Base
from catalog_tracer.utils.ids import new_id

USER_ROLES = ("SUPER_ADMIN", "ADMIN", "USER")


def normalize_user_role(role: str | None) -> str:
    """Return canonical uppercase role value or raise ValueError."""
    canonical = str(role or "").strip().upper()
    if canonical not in USER_ROLES:
        raise ValueError(f"Invalid role: {role!r}")
    return canonical


class User(Base):
    """Staff account of the admin panel."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    role: Mapped[str] = mapped_column(Enum(*USER_ROLES, name="user_role"), nullable=False, default="ADMIN")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @validates("role")
    def _normalize_role(self, key: str, value: str) -> str:
        return normalize_user_role(value)


class Agent(Base):
    """External agent account; shares the id space of ``users``."""

    __tablename__ = "agents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
