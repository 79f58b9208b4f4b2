# formwright/tools/list_schemas.py
"""
list_schemas tool implementation.

Lists all stored schemas with their field counts and cascading fields.
"""

import logging

from formwright.models.responses import ListSchemasResponse, SchemaSummary
from formwright.models.store import SchemaStore

logger = logging.getLogger(__name__)


async def list_schemas(store: SchemaStore, entity_type: str | None = None) -> dict:
    """
    List stored schemas.

    Args:
        store: Schema storage instance
        entity_type: Only list schemas for this entity type

    Returns:
        ListSchemasResponse as dict
    """
    schemas = await store.list_all()
    if entity_type:
        schemas = [s for s in schemas if s.entity_type == entity_type]

    summaries = [
        SchemaSummary(
            key=schema.key or "",
            name=schema.name,
            entity_type=schema.entity_type,
            field_count=len(schema.fields),
            cascading_fields=[f.name for f in schema.fields if f.is_cascading],
        )
        for schema in schemas
    ]

    response = ListSchemasResponse(schemas=summaries, total=len(summaries))

    logger.info(f"Listed {len(summaries)} schemas")
    return response.model_dump()
