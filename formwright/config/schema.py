# formwright/config/schema.py
"""
Pydantic configuration models for formwright.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StoreConfig(BaseModel):
    """Schema persistence configuration."""

    model_config = ConfigDict(extra="ignore")

    backend: Literal["memory", "sqlite"] = Field(
        default="sqlite", description="Schema store implementation"
    )
    db_path: str | None = Field(
        default=None,
        description="SQLite database path (None = schemas.db in the user config dir)",
    )


class LookupConfig(BaseModel):
    """Option lookup transport for cascading fields."""

    model_config = ConfigDict(extra="ignore")

    base_url: str | None = Field(
        default=None, description="Base URL of the options API (None disables HTTP lookups)"
    )
    endpoints: dict[str, str] = Field(
        default_factory=lambda: {
            "class_id": "/teachers/{teacher_id}/classes",
            "subject_id": "/teachers/{teacher_id}/classes/{class_id}/subjects",
        },
        description="Field name -> URL path template filled from upstream values",
    )
    timeout: float = Field(default=10.0, gt=0.0, description="Request timeout in seconds")
    max_attempts: int = Field(
        default=3, ge=1, le=10, description="Attempts per lookup on transient errors"
    )


class BuilderConfig(BaseModel):
    """Builder behaviour."""

    model_config = ConfigDict(extra="ignore")

    name_suffix_length: int = Field(
        default=5, ge=3, le=12, description="Random suffix length in generated field names"
    )
    locked_fields: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "student": [
                "student_id",
                "admission_date",
                "academic_year",
                "roll_number",
                "section",
                "blood_group",
                "transportation_mode",
                "is_hosteller",
            ],
        },
        description="Entity type -> base field names that cannot be removed",
    )


class OutputConfig(BaseModel):
    """Logging output configuration."""

    model_config = ConfigDict(extra="ignore")

    verbosity: Literal["quiet", "normal", "verbose"] = Field(
        default="normal", description="Logging verbosity level"
    )
    json_logs: bool = Field(default=False, description="Emit JSON log lines instead of plain text")


class FormwrightConfig(BaseModel):
    """Root configuration for formwright."""

    model_config = ConfigDict(extra="ignore")

    store: StoreConfig = Field(default_factory=StoreConfig)
    lookup: LookupConfig = Field(default_factory=LookupConfig)
    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
