"""Change tracking API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AncestorHints(BaseModel):
    """Optional ancestor ids captured when a change is written."""

    brand_id: str | None = None
    category_id: str | None = None
    subcategory_id: str | None = None
    knowledge_id: str | None = None
    sop_id: str | None = None
    quality_training_id: str | None = None


class ChangeRecordCreate(BaseModel):
    """Payload for appending one field-level change."""

    source_table: str = Field(min_length=1)
    source_key: str = Field(min_length=1)
    field_name: str = Field(min_length=1)
    old_value: str | None = None
    new_value: str | None = None
    action_type: str
    hints: AncestorHints | None = None


class ChangeRecordRead(BaseModel):
    """Raw stored change record."""

    id: int
    source_table: str
    source_key: str
    field_name: str
    old_value: str | None
    new_value: str | None
    action_type: str
    changed_at: datetime
    changed_by: str | None

    model_config = ConfigDict(from_attributes=True)


class AncestorEntryResponse(BaseModel):
    level_name: str
    table: str
    key: str
    display_field: str
    value: str | None


class EnrichedChangeRecord(BaseModel):
    """Change record prepared for display."""

    id: int
    source_table: str
    source_key: str
    field_name: str
    display_field_name: str
    old_value_display: str | None
    new_value_display: str | None
    action_type: str
    changed_at: datetime
    changed_by: str | None
    changed_by_display_name: str
    record_name: str | None = None
    update_notes: str | None = None
    ancestor_chain: list[AncestorEntryResponse] = Field(default_factory=list)


class FieldChangeResponse(BaseModel):
    id: int
    field_name: str
    display_field_name: str
    old_value_display: str | None
    new_value_display: str | None


class ChangeEventResponse(BaseModel):
    """All fields written by one mutation of one entity."""

    source_table: str
    source_key: str
    action_type: str
    changed_at: datetime
    changed_by: str | None
    changed_by_display_name: str
    changes: list[FieldChangeResponse]
