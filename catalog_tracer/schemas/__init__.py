"""Schema exports."""

from catalog_tracer.schemas.change import (
    AncestorEntryResponse,
    AncestorHints,
    ChangeEventResponse,
    ChangeRecordCreate,
    ChangeRecordRead,
    EnrichedChangeRecord,
    FieldChangeResponse,
)
from catalog_tracer.schemas.user import UserRead

__all__ = [
    "AncestorEntryResponse",
    "AncestorHints",
    "ChangeEventResponse",
    "ChangeRecordCreate",
    "ChangeRecordRead",
    "EnrichedChangeRecord",
    "FieldChangeResponse",
    "UserRead",
]
