"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from catalog_tracer.models import actor as _actor  # noqa: E402,F401
from catalog_tracer.models import change_record as _change_record  # noqa: E402,F401
from catalog_tracer.models import knowledge as _knowledge  # noqa: E402,F401
from catalog_tracer.models import product as _product  # noqa: E402,F401
from catalog_tracer.models import quality_training as _quality_training  # noqa: E402,F401
from catalog_tracer.models import sop as _sop  # noqa: E402,F401
