# formwright/tools/get_schema.py
"""
get_schema and get_default_schema tool implementations.

get_schema applies the load fallback: a missing key resolves to the
default schema of its entity type.
"""

import logging

from formwright.models.errors import SchemaNotFound
from formwright.models.responses import SchemaRecordResponse
from formwright.models.store import SchemaStore, entity_type_from_key

logger = logging.getLogger(__name__)


async def get_schema(key: str, store: SchemaStore, fallback: bool = True) -> dict:
    """
    Retrieve a schema record by key.

    Args:
        key: Schema key (e.g. "student_form")
        store: Schema storage instance
        fallback: Use the entity type's default schema if nothing is stored

    Returns:
        SchemaRecordResponse as dict

    Raises:
        SchemaNotFound: If nothing is stored under key and fallback is off
    """
    from_default = False
    try:
        schema = await store.load(key)
    except SchemaNotFound:
        if not fallback:
            raise
        entity_type = entity_type_from_key(key)
        logger.info(f"Schema '{key}' not found, using default for '{entity_type}'")
        schema = await store.get_or_create_default(entity_type)
        from_default = True

    response = SchemaRecordResponse(
        key=schema.key or key,
        record=schema.to_record(),
        from_default=from_default,
    )
    return response.model_dump()


async def get_default_schema(entity_type: str, store: SchemaStore) -> dict:
    """
    Retrieve (creating if needed) the default schema of an entity type.

    Args:
        entity_type: Business entity (student, teacher, class, ...)
        store: Schema storage instance

    Returns:
        SchemaRecordResponse as dict

    Raises:
        ValueError: If entity_type is empty
    """
    if not entity_type.strip():
        raise ValueError("Entity type must not be empty")

    schema = await store.get_or_create_default(entity_type.strip())
    response = SchemaRecordResponse(
        key=schema.key or "",
        record=schema.to_record(),
        from_default=True,
    )
    return response.model_dump()
