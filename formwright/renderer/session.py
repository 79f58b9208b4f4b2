# formwright/renderer/session.py
"""
Render session: one interactive pass of a form.

A RenderSession interprets a FormSchema plus an initial value map. It
routes edits into the value map, keeps cascading fields resolved through
a DependentFieldResolver, validates on submit and hands the final value
map to the caller's callback.

State machine:
    EDITING -> VALIDATING -> EDITING   (errors present)
                          -> SUBMITTED (terminal)
"""

import copy
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from formwright.models.schema import FieldKind, FieldOption, FormField, FormSchema
from formwright.models.values import ValueMap, is_missing_value
from formwright.renderer.controls import control_for, sub_fields
from formwright.renderer.validation import validate_values
from formwright.resolver.dependency import (
    DependentFieldResolver,
    ResolutionResult,
    downstream_of,
)

logger = logging.getLogger(__name__)

SubmitCallback = Callable[[ValueMap], Awaitable[Any] | Any]


class SessionState(Enum):
    """Render session lifecycle states."""

    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class RenderedControl:
    """What a UI needs to draw one field."""

    field_id: str
    name: str
    label: str
    kind: FieldKind
    widget: str
    input_type: str | None
    value: Any
    options: tuple[FieldOption, ...]
    disabled: bool
    required: bool
    placeholder: str | None = None
    help_text: str | None = None
    error: str | None = None
    accept: str | None = None


class RenderSession:
    """
    One render session over an immutable schema.

    The schema is copied on construction; only the value map and the error
    map change during the session.
    """

    def __init__(
        self,
        schema: FormSchema,
        initial_values: ValueMap | None = None,
        resolver: DependentFieldResolver | None = None,
        on_submit: SubmitCallback | None = None,
        edit_mode: bool = False,
    ) -> None:
        """
        Initialize render session.

        Args:
            schema: Schema to render
            initial_values: Starting values keyed by field name; field
                            default values fill the gaps
            resolver: Resolver for cascading fields (one without a lookup
                      if omitted, which leaves cascading fields disabled)
            on_submit: Called once with the final value map; may be async
            edit_mode: Render required fields that hold a value read-only
                       (editing an existing record keeps its core fields)
        """
        self._schema = schema.model_copy(deep=True)
        self._resolver = resolver or DependentFieldResolver()
        self._on_submit = on_submit
        self._edit_mode = edit_mode
        self._state = SessionState.EDITING
        self._started = False
        self._errors: dict[str, str] = {}
        self.submitted_values: ValueMap | None = None

        self._values: ValueMap = {
            f.name: copy.deepcopy(f.default_value)
            for f in self._schema.fields
            if f.default_value is not None
        }
        for name, value in copy.deepcopy(initial_values or {}).items():
            field = self._schema.field_by_name(name)
            control = control_for(field.kind) if field else None
            self._values[name] = control.normalize(field, value) if control else value

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def schema(self) -> FormSchema:
        return self._schema

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def values(self) -> ValueMap:
        """Copy of the current value map."""
        return copy.deepcopy(self._values)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def edit_mode(self) -> bool:
        return self._edit_mode

    def options_for(self, field: FormField) -> list[FieldOption]:
        """Live options: resolved for cascading fields, static otherwise."""
        return self._resolver.resolution_for(field).options

    def is_locked(self, field: FormField) -> bool:
        """
        Edit mode keeps a required field's stored value read-only.

        A required field without a value, or whose value failed validation,
        is not locked so the record can still be completed.
        """
        return (
            self._edit_mode
            and field.is_required
            and not is_missing_value(self._values.get(field.name))
            and field.name not in self._errors
        )

    def is_disabled(self, field: FormField) -> bool:
        if self.is_locked(field):
            return True
        return bool(field.depends_on) and not self._resolver.resolution_for(field).enabled

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def start(self) -> ResolutionResult:
        """
        Resolve every cascading field against the initial values.

        Locked fields keep their stored values on this pass even when their
        lookup fails or no longer offers them.
        """
        locked = {f.name for f in self._schema.fields if self.is_locked(f)}
        result = await self._resolver.resolve(self._schema, self._values, keep=locked)
        self._started = True
        for name in result.cleared:
            self._errors.pop(name, None)
        return result

    async def _ensure_started(self) -> None:
        if not self._started:
            await self.start()

    def controls(self) -> list[RenderedControl]:
        """
        One control per renderable field, in schema order.

        Fields whose kind has no control are skipped.
        """
        rendered: list[RenderedControl] = []
        for field in self._schema.fields:
            control = control_for(field.kind)
            if control is None:
                continue
            rendered.append(
                RenderedControl(
                    field_id=field.id,
                    name=field.name,
                    label=field.label,
                    kind=field.kind,
                    widget=control.widget,
                    input_type=control.input_type,
                    value=copy.deepcopy(self._values.get(field.name)),
                    options=tuple(self.options_for(field)),
                    disabled=self.is_disabled(field),
                    required=field.is_required,
                    placeholder=field.placeholder,
                    help_text=field.help_text,
                    error=self._errors.get(field.name),
                    accept=control.accept,
                )
            )
        return rendered

    async def set_value(self, name: str, value: Any) -> bool:
        """
        Apply a user edit.

        Clears the field's error and re-resolves every field downstream of
        it. Edits to unknown, unrenderable or disabled fields, and edits
        after submission, are ignored with a warning.

        Returns:
            True if the edit was applied
        """
        if self._state is SessionState.SUBMITTED:
            logger.warning(f"Ignoring edit of '{name}': session already submitted")
            return False

        field = self._schema.field_by_name(name)
        if field is None:
            logger.warning(f"Ignoring edit of unknown field '{name}'")
            return False
        control = control_for(field.kind)
        if control is None:
            logger.warning(f"Ignoring edit of '{name}': kind '{field.kind}' is not rendered")
            return False

        await self._ensure_started()
        if self.is_disabled(field):
            logger.warning(f"Ignoring edit of disabled field '{name}'")
            return False

        normalized = control.normalize(field, value)
        if is_missing_value(normalized):
            self._values.pop(name, None)
        else:
            self._values[name] = normalized
        self._errors.pop(name, None)

        if downstream_of(self._schema, name):
            result = await self._resolver.resolve(self._schema, self._values, changed=name)
            for cleared in result.cleared:
                self._errors.pop(cleared, None)
        return True

    def entries(self, name: str) -> "DynamicEntries":
        """Entry editor for a dynamic-config field."""
        field = self._schema.field_by_name(name)
        if field is None or field.kind != FieldKind.DYNAMIC_CONFIG:
            raise KeyError(f"'{name}' is not a dynamic-config field")
        return DynamicEntries(self, field)

    async def submit(self) -> bool:
        """
        Validate and, if valid, emit the value map.

        Returns:
            True if the form was submitted; False if validation failed or
            the session was already submitted
        """
        if self._state is SessionState.SUBMITTED:
            logger.warning("Ignoring submit: session already submitted")
            return False

        await self._ensure_started()
        self._state = SessionState.VALIDATING
        self._errors = validate_values(self._schema, self._values, self.options_for)

        if self._errors:
            self._state = SessionState.EDITING
            logger.info(f"Submission blocked by {len(self._errors)} field error(s): {sorted(self._errors)}")
            return False

        emitted = self._emit()
        if self._on_submit is not None:
            try:
                result = self._on_submit(copy.deepcopy(emitted))
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # Let the caller retry the submission
                self._state = SessionState.EDITING
                raise

        self.submitted_values = emitted
        self._state = SessionState.SUBMITTED
        logger.info(f"Submitted form '{self._schema.key or self._schema.name}'")
        return True

    def _emit(self) -> ValueMap:
        """Values of renderable fields only, keyed by field name."""
        emitted: ValueMap = {}
        for field in self._schema.fields:
            if control_for(field.kind) is None:
                continue
            value = self._values.get(field.name)
            if not is_missing_value(value):
                emitted[field.name] = copy.deepcopy(value)
        return emitted


class DynamicEntries:
    """
    Local add/update/remove surface for a dynamic-config field.

    Every change writes the full entry list back through set_value().
    """

    def __init__(self, session: RenderSession, field: FormField) -> None:
        self._session = session
        self._field = field

    @property
    def sub_fields(self) -> list[dict[str, Any]]:
        return sub_fields(self._field)

    @property
    def items(self) -> list[dict[str, Any]]:
        return list(self._session.values.get(self._field.name) or [])

    def blank_entry(self) -> dict[str, Any]:
        blank: dict[str, Any] = {}
        for d in self.sub_fields:
            kind = d.get("kind")
            blank[d["name"]] = False if kind in ("checkbox", "toggle") else ""
        return blank

    async def add(self, entry: dict[str, Any] | None = None) -> int | None:
        """Append an entry (blank if None). Returns its index, or None if rejected."""
        new_entry = {**self.blank_entry(), **(entry or {})}
        items = [*self.items, new_entry]
        if not await self._session.set_value(self._field.name, items):
            return None
        return len(items) - 1

    async def update(self, index: int, patch: dict[str, Any]) -> bool:
        items = self.items
        if not 0 <= index < len(items):
            logger.warning(f"No entry {index} in '{self._field.name}'")
            return False
        items[index] = {**items[index], **patch}
        return await self._session.set_value(self._field.name, items)

    async def remove(self, index: int) -> bool:
        items = self.items
        if not 0 <= index < len(items):
            logger.warning(f"No entry {index} in '{self._field.name}'")
            return False
        del items[index]
        return await self._session.set_value(self._field.name, items)
