# formwright/models/schema.py
"""
Pydantic models describing a form as data.

A FormSchema is an ordered list of FormField definitions plus display
metadata. Persisted records use camelCase keys (helpText, dependsOn,
entityType, ...); both camelCase and snake_case are accepted on input.
"""

import json
import logging
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    """Closed set of supported input kinds."""

    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    PHONE = "phone"
    URL = "url"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    DATE = "date"
    CHECKBOX = "checkbox"
    TOGGLE = "toggle"
    SELECT = "select"
    MULTI_SELECT = "multi-select"
    RADIO = "radio"
    FILE = "file"
    IMAGE = "image"
    DYNAMIC_CONFIG = "dynamic-config"


OPTION_KINDS = frozenset({FieldKind.SELECT, FieldKind.MULTI_SELECT, FieldKind.RADIO})


def generate_field_id() -> str:
    """
    Generate a unique field (or option) ID.

    Returns:
        12-character hex string (UUID4 truncated)
    """
    return uuid4().hex[:12]


class _RecordModel(BaseModel):
    """Base for models serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class FieldOption(_RecordModel):
    """One entry of a select/multi-select/radio option list."""

    id: str = Field(default_factory=generate_field_id)
    label: str = ""
    value: str
    order: int | None = None

    @field_validator("id", "value", mode="before")
    @classmethod
    def _coerce_scalar(cls, v: Any) -> Any:
        # Stored option ids are sometimes positional integers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ValidationRules(_RecordModel):
    """Optional per-field constraints. None means no constraint."""

    required: bool | None = None
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    min_value: float | None = None
    max_value: float | None = None
    pattern: str | None = None


class FormField(_RecordModel):
    """A single input definition within a schema."""

    id: str = Field(default_factory=generate_field_id)
    name: str = Field(min_length=1)
    label: str = ""
    placeholder: str | None = None
    help_text: str | None = None
    kind: FieldKind | str = Field(union_mode="left_to_right")
    required: bool = False
    is_filterable: bool = False
    is_visible_in_listing: bool = True
    options: list[FieldOption] | None = None
    validations: ValidationRules = Field(default_factory=ValidationRules)
    depends_on: list[str] = Field(default_factory=list)
    default_value: Any = None
    config: dict[str, Any] | None = None

    @field_validator("kind")
    @classmethod
    def _note_unknown_kind(cls, v: FieldKind | str) -> FieldKind | str:
        if not isinstance(v, FieldKind):
            logger.warning(f"Unsupported field kind '{v}' kept as-is; it will not be rendered")
        return v

    @model_validator(mode="after")
    def _check_options(self) -> "FormField":
        """Options belong to option kinds only; values must be unique."""
        if self.kind not in OPTION_KINDS:
            if self.options:
                logger.debug(f"Dropping options from non-option field '{self.name}'")
            self.options = None
            return self

        if self.options is None:
            self.options = []

        seen: set[str] = set()
        for option in self.options:
            if option.value in seen:
                raise ValueError(
                    f"Field '{self.name}' has duplicate option value '{option.value}'"
                )
            seen.add(option.value)
        return self

    @property
    def is_required(self) -> bool:
        """True if either the flag or the validation rule demands a value."""
        return self.required or bool(self.validations.required)

    @property
    def is_cascading(self) -> bool:
        return bool(self.depends_on)


class FormSchema(_RecordModel):
    """
    A complete form description.

    Field order is display and tab order. Field ids and names are unique
    within one schema.
    """

    key: str = ""
    name: str = "Untitled form"
    description: str = ""
    entity_type: str = ""
    fields: list[FormField] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_fields(self) -> "FormSchema":
        ids: set[str] = set()
        names: set[str] = set()
        for f in self.fields:
            if f.id in ids:
                raise ValueError(f"Duplicate field id '{f.id}'")
            if f.name in names:
                raise ValueError(f"Duplicate field name '{f.name}'")
            ids.add(f.id)
            names.add(f.name)
        return self

    def field_by_id(self, field_id: str) -> FormField | None:
        return next((f for f in self.fields if f.id == field_id), None)

    def field_by_name(self, name: str) -> FormField | None:
        return next((f for f in self.fields if f.name == name), None)

    def index_of(self, field_id: str) -> int | None:
        for i, f in enumerate(self.fields):
            if f.id == field_id:
                return i
        return None

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted JSON record (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "FormSchema":
        """Parse a persisted JSON record."""
        return cls.model_validate(record)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_record(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "FormSchema":
        return cls.from_record(json.loads(text))
