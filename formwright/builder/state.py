# formwright/builder/state.py
"""
Mutable builder state for one editing session.

BuilderState holds exactly one FormSchema plus a selected-field pointer and
exposes the structural mutations an operator can perform. Mutations never
raise on stale references: an unknown id is a no-op that logs a warning
and records a StructuralMutationError in ``warnings`` (the most recent
MAX_WARNINGS are kept until clear_warnings() hands them to the UI).
"""

import logging
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from formwright.models.errors import StructuralMutationError
from formwright.models.schema import (
    OPTION_KINDS,
    FieldKind,
    FieldOption,
    FormField,
    FormSchema,
    generate_field_id,
)

logger = logging.getLogger(__name__)

# Keys a patch may never change
_IMMUTABLE_KEYS = {"id"}

# Oldest warnings are dropped past this many
MAX_WARNINGS = 50


def _normalize_patch(patch: dict[str, Any]) -> dict[str, Any]:
    """Map camelCase record keys (helpText, dependsOn, ...) to attribute names."""
    aliases = {
        info.alias: name for name, info in FormField.model_fields.items() if info.alias
    }
    return {aliases.get(key, key): value for key, value in patch.items()}


class BuilderState:
    """
    Explicit per-session builder store.

    Invariants kept by every operation:
        - field ids are unique
        - field names are unique (duplicate names are rejected on update)
        - selected_field_id is None or references an existing field
    """

    def __init__(
        self,
        schema: FormSchema | None = None,
        locked_names: set[str] | frozenset[str] | None = None,
        name_suffix_length: int = 5,
    ) -> None:
        """
        Initialize builder state.

        Args:
            schema: Working schema (an empty schema if None); copied, not shared
            locked_names: Field names that may be edited but not removed
            name_suffix_length: Length of the random suffix in generated names
        """
        self._schema = schema.model_copy(deep=True) if schema else FormSchema()
        self._selected_field_id: str | None = None
        self._locked_names = frozenset(locked_names or ())
        self._suffix_length = name_suffix_length
        self.warnings: list[StructuralMutationError] = []

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def schema(self) -> FormSchema:
        return self._schema

    @property
    def fields(self) -> list[FormField]:
        return self._schema.fields

    @property
    def selected_field_id(self) -> str | None:
        return self._selected_field_id

    @property
    def selected_field(self) -> FormField | None:
        if self._selected_field_id is None:
            return None
        return self._schema.field_by_id(self._selected_field_id)

    @property
    def locked_names(self) -> frozenset[str]:
        return self._locked_names

    def _warn(self, message: str) -> None:
        self.warnings.append(StructuralMutationError(message))
        del self.warnings[:-MAX_WARNINGS]
        logger.warning(message)

    def clear_warnings(self) -> list[StructuralMutationError]:
        """Return the pending warnings and empty the list (call once shown)."""
        shown, self.warnings = self.warnings, []
        return shown

    def _unique_name(self, base: str, exclude_id: str | None = None) -> str:
        taken = {f.name for f in self._schema.fields if f.id != exclude_id}
        if base not in taken:
            return base
        n = 2
        while f"{base}_{n}" in taken:
            n += 1
        return f"{base}_{n}"

    def _generated_name(self, kind: FieldKind) -> str:
        taken = set(self._schema.field_names())
        prefix = kind.value.replace("-", "_")
        while True:
            candidate = f"{prefix}_{uuid4().hex[: self._suffix_length]}"
            if candidate not in taken:
                return candidate

    def _fresh_id(self) -> str:
        taken = {f.id for f in self._schema.fields}
        while True:
            candidate = generate_field_id()
            if candidate not in taken:
                return candidate

    # ------------------------------------------------------------------
    # Field mutations
    # ------------------------------------------------------------------
    def add_field(self, kind: FieldKind | str, index: int | None = None) -> FormField | None:
        """
        Insert a new field and select it.

        Args:
            kind: Field kind for the new field
            index: Insert position; None appends, out-of-range values clamp
                   into [0, len(fields)]

        Returns:
            The new field, or None if kind is not a supported FieldKind
        """
        try:
            kind = FieldKind(kind)
        except ValueError:
            self._warn(f"Cannot add field of unsupported kind '{kind}'")
            return None

        count = len(self._schema.fields)
        position = count if index is None else max(0, min(index, count))

        field = FormField(
            id=self._fresh_id(),
            name=self._generated_name(kind),
            label=f"Untitled {kind.value}",
            kind=kind,
            options=(
                [FieldOption(id=generate_field_id(), label="Option 1", value="option1")]
                if kind in OPTION_KINDS
                else None
            ),
        )
        self._schema.fields.insert(position, field)
        self._selected_field_id = field.id
        logger.info(f"Added {kind.value} field '{field.name}' at index {position}")
        return field

    def update_field(self, field_id: str, patch: dict[str, Any]) -> FormField | None:
        """
        Shallow-merge a patch into a field.

        The merged field is re-validated. Patches that change ``id``, that
        fail validation, or that would duplicate another field's name are
        rejected (the id key alone is dropped, the others reject the whole
        patch).

        Args:
            field_id: Id of the field to update
            patch: Attribute changes, snake_case or camelCase keys

        Returns:
            The updated field, or None if nothing was changed
        """
        index = self._schema.index_of(field_id)
        if index is None:
            self._warn(f"update_field: field '{field_id}' not found")
            return None

        patch = _normalize_patch(patch)
        for key in _IMMUTABLE_KEYS & patch.keys():
            if patch.pop(key) != field_id:
                self._warn(f"update_field: ignoring attempt to change '{key}' of field '{field_id}'")

        current = self._schema.fields[index]
        merged = current.model_dump()
        merged.update(patch)

        try:
            updated = FormField.model_validate(merged)
        except ValidationError as e:
            self._warn(f"update_field: rejected patch for '{current.name}': {e.errors()[0]['msg']}")
            return None

        if updated.name != current.name:
            clash = self._schema.field_by_name(updated.name)
            if clash is not None:
                self._warn(f"update_field: name '{updated.name}' is already used by field '{clash.id}'")
                return None
            logger.info(
                f"Renamed field '{current.name}' -> '{updated.name}'; "
                f"values stored under the old name are not migrated"
            )

        self._schema.fields[index] = updated
        return updated

    def remove_field(self, field_id: str) -> bool:
        """
        Delete a field, clearing the selection if it pointed at it.

        Fields that list the removed field in depends_on are left alone; the
        resolver treats them as disabled.

        Returns:
            True if a field was removed
        """
        index = self._schema.index_of(field_id)
        if index is None:
            self._warn(f"remove_field: field '{field_id}' not found")
            return False

        field = self._schema.fields[index]
        if field.name in self._locked_names:
            self._warn(f"remove_field: '{field.name}' is a base field and cannot be removed")
            return False

        del self._schema.fields[index]
        if self._selected_field_id == field_id:
            self._selected_field_id = None

        dependents = [f.name for f in self._schema.fields if field.name in f.depends_on]
        if dependents:
            logger.warning(
                f"Removed field '{field.name}' is still referenced by dependsOn of {dependents}"
            )
        logger.info(f"Removed field '{field.name}'")
        return True

    def move_field(self, from_index: int, to_index: int) -> bool:
        """
        Move a field to a new position (stable array move, not a swap).

        Returns:
            True if the move was applied; out-of-range indices are a no-op
        """
        count = len(self._schema.fields)
        if not (0 <= from_index < count and 0 <= to_index < count):
            self._warn(f"move_field: indices ({from_index}, {to_index}) out of range for {count} fields")
            return False
        if from_index == to_index:
            return True

        field = self._schema.fields.pop(from_index)
        self._schema.fields.insert(to_index, field)
        return True

    def duplicate_field(self, field_id: str) -> FormField | None:
        """
        Clone a field directly after the source and select the clone.

        The clone gets a fresh id and a unique "<name>_copy" style name; all
        other content (options included) is deep-copied.

        Returns:
            The clone, or None if field_id is unknown
        """
        index = self._schema.index_of(field_id)
        if index is None:
            self._warn(f"duplicate_field: field '{field_id}' not found")
            return None

        source = self._schema.fields[index]
        clone = source.model_copy(
            deep=True,
            update={
                "id": self._fresh_id(),
                "name": self._unique_name(f"{source.name}_copy"),
            },
        )
        self._schema.fields.insert(index + 1, clone)
        self._selected_field_id = clone.id
        logger.info(f"Duplicated field '{source.name}' as '{clone.name}'")
        return clone

    def select_field(self, field_id: str | None) -> bool:
        """Point the selection at a field (or clear it with None)."""
        if field_id is None:
            self._selected_field_id = None
            return True
        if self._schema.field_by_id(field_id) is None:
            self._warn(f"select_field: field '{field_id}' not found")
            return False
        self._selected_field_id = field_id
        return True

    # ------------------------------------------------------------------
    # Option list editing
    # ------------------------------------------------------------------
    def _option_field(self, field_id: str, operation: str) -> tuple[int, FormField] | None:
        index = self._schema.index_of(field_id)
        if index is None:
            self._warn(f"{operation}: field '{field_id}' not found")
            return None
        field = self._schema.fields[index]
        if field.kind not in OPTION_KINDS:
            self._warn(f"{operation}: field '{field.name}' does not take options")
            return None
        return index, field

    def add_option(
        self, field_id: str, label: str | None = None, value: str | None = None
    ) -> FieldOption | None:
        """Append an option; value defaults to the next free "optionN"."""
        found = self._option_field(field_id, "add_option")
        if found is None:
            return None
        _, field = found

        taken = {o.value for o in field.options or []}
        if value is None:
            n = len(taken) + 1
            while f"option{n}" in taken:
                n += 1
            value = f"option{n}"
        elif value in taken:
            self._warn(f"add_option: value '{value}' already exists on '{field.name}'")
            return None

        option = FieldOption(
            id=generate_field_id(),
            label=label if label is not None else f"Option {len(taken) + 1}",
            value=value,
        )
        field.options = [*(field.options or []), option]
        return option

    def update_option(self, field_id: str, option_id: str, patch: dict[str, Any]) -> FieldOption | None:
        """Merge a patch into one option; the option id is immutable."""
        found = self._option_field(field_id, "update_option")
        if found is None:
            return None
        _, field = found

        options = list(field.options or [])
        position = next((i for i, o in enumerate(options) if o.id == option_id), None)
        if position is None:
            self._warn(f"update_option: option '{option_id}' not found on '{field.name}'")
            return None

        merged = {**options[position].model_dump(), **patch, "id": option_id}
        try:
            option = FieldOption.model_validate(merged)
        except ValidationError as e:
            self._warn(f"update_option: rejected patch: {e.errors()[0]['msg']}")
            return None

        if any(o.value == option.value for i, o in enumerate(options) if i != position):
            self._warn(f"update_option: value '{option.value}' already exists on '{field.name}'")
            return None

        options[position] = option
        field.options = options
        return option

    def remove_option(self, field_id: str, option_id: str) -> bool:
        found = self._option_field(field_id, "remove_option")
        if found is None:
            return False
        _, field = found

        remaining = [o for o in field.options or [] if o.id != option_id]
        if len(remaining) == len(field.options or []):
            self._warn(f"remove_option: option '{option_id}' not found on '{field.name}'")
            return False
        field.options = remaining
        return True

    # ------------------------------------------------------------------
    # Schema-level mutations
    # ------------------------------------------------------------------
    def set_meta(self, name: str | None = None, description: str | None = None) -> None:
        if name is not None:
            self._schema.name = name
        if description is not None:
            self._schema.description = description

    def set_entity_type(self, entity_type: str) -> None:
        self._schema.entity_type = entity_type

    def set_schema(self, schema: FormSchema) -> None:
        """Replace the working schema (copied) and clear the selection and warnings."""
        self._schema = schema.model_copy(deep=True)
        self._selected_field_id = None
        self.warnings = []

    def set_locked_names(self, names: set[str] | frozenset[str]) -> None:
        self._locked_names = frozenset(names)
