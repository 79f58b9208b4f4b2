# formwright/resolver/dependency.py
"""
Dependent-field resolution for cascading fields.

For every field with a dependsOn declaration the resolver decides whether
it is enabled and what its option list is, calling the injected option
lookup only when every upstream field has a value. Cascades resolve in
dependency order. An option field value that is no longer offered is
cleared; other cascading fields lose their value only while disabled.

Lookups may be slow. Each field carries a generation counter; a lookup
result is applied only if no newer resolution of that field started while
it was in flight, so a late answer for an old upstream value never
overwrites a newer one.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from formwright.models.schema import OPTION_KINDS, FieldKind, FieldOption, FormField, FormSchema
from formwright.models.values import ValueMap, is_missing_value
from formwright.resolver.lookups import OptionLookup, normalize_options

logger = logging.getLogger(__name__)


@dataclass
class FieldResolution:
    """Resolved availability of one field."""

    name: str
    enabled: bool
    options: list[FieldOption] = field(default_factory=list)
    lookup_key: tuple[Any, ...] | None = None
    error: str | None = None


@dataclass
class ResolutionResult:
    """Outcome of one resolution pass."""

    resolutions: dict[str, FieldResolution] = field(default_factory=dict)
    cleared: list[str] = field(default_factory=list)
    stale: bool = False


def cascade_order(schema: FormSchema) -> tuple[list[FormField], set[str]]:
    """
    Order cascading fields so every field comes after its cascading upstreams.

    The sort is stable with respect to schema order. Fields on a dependency
    cycle (including self-references) cannot be ordered; they are appended
    at the end and reported.

    Returns:
        (ordered cascading fields, names of fields on a cycle)
    """
    dependent = [f for f in schema.fields if f.depends_on]
    dependent_names = {f.name for f in dependent}

    ordered: list[FormField] = []
    placed: set[str] = set()
    remaining = list(dependent)

    while remaining:
        ready = next(
            (
                f
                for f in remaining
                if all(u not in dependent_names or u in placed for u in f.depends_on)
            ),
            None,
        )
        if ready is None:
            break
        ordered.append(ready)
        placed.add(ready.name)
        remaining.remove(ready)

    cyclic = {f.name for f in remaining}
    if cyclic:
        logger.warning(f"Dependency cycle among fields {sorted(cyclic)}; they stay disabled")
    return ordered + remaining, cyclic


def downstream_of(schema: FormSchema, name: str) -> set[str]:
    """Names of all fields that depend on ``name``, directly or transitively."""
    result: set[str] = set()
    frontier = [name]
    while frontier:
        current = frontier.pop()
        for f in schema.fields:
            if current in f.depends_on and f.name not in result:
                result.add(f.name)
                frontier.append(f.name)
    return result


class DependentFieldResolver:
    """
    Computes enabled state and live options for cascading fields.

    One resolver instance belongs to one render session; it remembers the
    latest resolution per field so the renderer can read it between passes.
    """

    def __init__(self, lookup: OptionLookup | None = None) -> None:
        """
        Initialize resolver.

        Args:
            lookup: Async option lookup; None leaves every cascading field
                    disabled
        """
        self._lookup = lookup
        self._generations: dict[str, int] = {}
        self._resolutions: dict[str, FieldResolution] = {}

    def resolution_for(self, field: FormField) -> FieldResolution:
        """
        Current resolution of a field.

        Non-cascading fields are always enabled with their static options.
        Cascading fields that were never resolved are disabled.
        """
        if not field.depends_on:
            return FieldResolution(field.name, True, list(field.options or []))
        return self._resolutions.get(field.name) or FieldResolution(field.name, False)

    @staticmethod
    def upstream_values(
        schema: FormSchema, field: FormField, values: ValueMap
    ) -> dict[str, Any] | None:
        """
        Upstream values in dependsOn order, or None if any is missing.

        An upstream name that is not a field of the schema counts as missing.
        """
        upstream: dict[str, Any] = {}
        for name in field.depends_on:
            if schema.field_by_name(name) is None:
                return None
            value = values.get(name)
            if is_missing_value(value):
                return None
            upstream[name] = value
        return upstream

    async def resolve_field(
        self,
        schema: FormSchema,
        field: FormField,
        values: ValueMap,
        cyclic: set[str] | frozenset[str] = frozenset(),
    ) -> FieldResolution | None:
        """
        Resolve one field.

        Returns:
            The new resolution, or None if a newer resolution of the same
            field started while this one awaited its lookup (stale result,
            discarded)
        """
        if not field.depends_on:
            return self.resolution_for(field)

        generation = self._generations.get(field.name, 0) + 1
        self._generations[field.name] = generation

        if field.name in cyclic:
            resolution = FieldResolution(field.name, False, error="dependency cycle")
        else:
            upstream = self.upstream_values(schema, field, values)
            if upstream is None:
                resolution = FieldResolution(field.name, False)
            elif self._lookup is None:
                logger.warning(f"No option lookup configured; '{field.name}' stays disabled")
                resolution = FieldResolution(field.name, False, error="no option lookup configured")
            else:
                key = tuple(upstream.values())
                try:
                    items = await self._lookup(field.name, upstream)
                    resolution = FieldResolution(
                        field.name, True, normalize_options(items), lookup_key=key
                    )
                except Exception as e:
                    logger.warning(f"Option lookup for '{field.name}' with {upstream} failed: {e}")
                    resolution = FieldResolution(field.name, False, lookup_key=key, error=str(e))

                if self._generations.get(field.name) != generation:
                    logger.debug(f"Discarding stale options for '{field.name}' (key={key})")
                    return None

        self._resolutions[field.name] = resolution
        return resolution

    async def resolve(
        self,
        schema: FormSchema,
        values: ValueMap,
        changed: str | None = None,
        keep: set[str] | frozenset[str] = frozenset(),
    ) -> ResolutionResult:
        """
        Run a resolution pass and invalidate stale child values in place.

        Args:
            schema: Schema being rendered
            values: Value map; values no longer offered are removed from it
            changed: Name of the field whose edit triggered the pass; only
                     its downstream fields are resolved. None resolves all.
            keep: Fields that are resolved but whose values are never
                  invalidated in this pass

        Returns:
            ResolutionResult with the resolutions of this pass and the names
            of fields whose values were cleared. ``stale`` is set if the pass
            stopped because a newer pass superseded it.
        """
        ordered, cyclic = cascade_order(schema)
        if changed is not None:
            targets = downstream_of(schema, changed)
            ordered = [f for f in ordered if f.name in targets]

        result = ResolutionResult()
        for f in ordered:
            resolution = await self.resolve_field(schema, f, values, cyclic)
            if resolution is None:
                result.stale = True
                return result

            result.resolutions[f.name] = resolution
            if f.name not in keep and self._invalidate(f, resolution, values):
                result.cleared.append(f.name)

        if result.cleared:
            logger.info(f"Cleared values no longer offered: {result.cleared}")
        return result

    @staticmethod
    def _invalidate(field: FormField, resolution: FieldResolution, values: ValueMap) -> bool:
        """
        Drop the field's value (or the unoffered part of a multi-select).

        Option fields keep only offered values. Other kinds (text, number,
        dynamic-config, ...) have nothing to match against options, so their
        value is dropped only when the field is disabled.
        """
        value = values.get(field.name)
        if is_missing_value(value):
            return False

        if field.kind not in OPTION_KINDS:
            if resolution.enabled:
                return False
            values.pop(field.name, None)
            return True

        offered = {o.value for o in resolution.options}
        if field.kind == FieldKind.MULTI_SELECT and isinstance(value, (list, tuple)):
            kept = [v for v in value if str(v) in offered]
            if len(kept) == len(value):
                return False
            if kept:
                values[field.name] = kept
            else:
                values.pop(field.name, None)
            return True

        if str(value) in offered:
            return False
        values.pop(field.name, None)
        return True
