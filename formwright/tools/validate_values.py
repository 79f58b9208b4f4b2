# formwright/tools/validate_values.py
"""
validate_values tool implementation.

Runs a value map through a headless render session: cascading fields are
resolved, stale child values cleared, and every field validated.
"""

import logging

from formwright.models.errors import ValidationFailure
from formwright.models.responses import ValidationReport
from formwright.models.store import SchemaStore, load_schema_or_default
from formwright.models.values import ValueMap
from formwright.renderer.session import RenderSession
from formwright.resolver.dependency import DependentFieldResolver
from formwright.resolver.lookups import OptionLookup

logger = logging.getLogger(__name__)


async def validate_values(
    key: str,
    values: ValueMap,
    store: SchemaStore,
    lookup: OptionLookup | None = None,
    raise_on_invalid: bool = False,
) -> dict:
    """
    Validate a value map against a stored schema.

    Args:
        key: Schema key (missing keys fall back to the entity default)
        values: Value map keyed by field name
        store: Schema storage instance
        lookup: Option lookup for cascading fields; without one, cascading
                fields are disabled and their values dropped
        raise_on_invalid: Raise instead of returning an invalid report

    Returns:
        ValidationReport as dict

    Raises:
        ValidationFailure: If raise_on_invalid is set and any field fails
    """
    schema = await load_schema_or_default(store, key)

    session = RenderSession(
        schema,
        initial_values=values,
        resolver=DependentFieldResolver(lookup),
    )
    resolution = await session.start()
    submitted = await session.submit()
    if not submitted and raise_on_invalid:
        raise ValidationFailure(session.errors)

    report = ValidationReport(
        key=schema.key or key,
        valid=submitted,
        errors=session.errors,
        values=session.submitted_values or {},
        cleared=resolution.cleared,
    )

    logger.info(
        f"Validated values for {report.key}: "
        f"{'valid' if submitted else f'{len(report.errors)} error(s)'}"
    )
    return report.model_dump()
