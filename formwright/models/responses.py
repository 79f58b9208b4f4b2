# formwright/models/responses.py
"""
Pydantic response models for tool outputs.

All tools return structured responses using these models for consistency.
"""

from typing import Any

from pydantic import BaseModel, Field


class SchemaSummary(BaseModel):
    """Summary information for a single schema (used in list_schemas)."""

    key: str = Field(description="Schema key")
    name: str = Field(description="Display name")
    entity_type: str = Field(description="Business entity the schema configures")
    field_count: int = Field(ge=0, description="Number of fields")
    cascading_fields: list[str] = Field(
        default_factory=list, description="Names of fields with dependsOn declarations"
    )


class ListSchemasResponse(BaseModel):
    """Response from list_schemas tool."""

    schemas: list[SchemaSummary] = Field(default_factory=list)
    total: int = Field(description="Total number of schemas")


class SchemaRecordResponse(BaseModel):
    """Response from get_schema / import_schema tools."""

    key: str = Field(description="Schema key")
    record: dict[str, Any] = Field(description="Persisted JSON record")
    from_default: bool = Field(
        default=False, description="True if the stored schema was missing and a default was used"
    )


class ValidationReport(BaseModel):
    """Response from validate_values tool."""

    key: str = Field(description="Schema key the values were validated against")
    valid: bool = Field(description="True if no field failed validation")
    errors: dict[str, str] = Field(default_factory=dict, description="Field name -> message")
    values: dict[str, Any] = Field(
        default_factory=dict, description="Emitted value map (empty when invalid)"
    )
    cleared: list[str] = Field(
        default_factory=list, description="Cascading fields whose values were invalidated"
    )
