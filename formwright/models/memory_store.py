# formwright/models/memory_store.py
"""
In-memory schema storage.

Used by tests and by the CLI when store.backend is "memory".
"""

import logging

from formwright.models.defaults import build_default_schema
from formwright.models.errors import SchemaNotFound
from formwright.models.schema import FormSchema
from formwright.models.store import SchemaStore, default_key_for

logger = logging.getLogger(__name__)


class InMemorySchemaStore(SchemaStore):
    """
    Simple in-memory schema storage.

    Single-process only. Schemas are deep-copied on save and on load so
    callers never share instances with the store.
    """

    def __init__(self, schemas: list[FormSchema] | None = None) -> None:
        """
        Initialize the store.

        Args:
            schemas: Optional schemas to preload (each must have a key)
        """
        self._schemas: dict[str, FormSchema] = {}
        for schema in schemas or []:
            if not schema.key:
                raise ValueError("Cannot preload a schema without a key")
            self._schemas[schema.key] = schema.model_copy(deep=True)
        logger.info(f"Initialized InMemorySchemaStore with {len(self._schemas)} schema(s)")

    async def load(self, key: str) -> FormSchema:
        schema = self._schemas.get(key)
        if schema is None:
            raise SchemaNotFound(key)
        return schema.model_copy(deep=True)

    async def save(self, schema: FormSchema) -> FormSchema:
        if not schema.key:
            raise ValueError("Cannot save a schema without a key")

        stored = schema.model_copy(deep=True)
        action = "Updated" if schema.key in self._schemas else "Added"
        self._schemas[schema.key] = stored
        logger.info(f"{action} schema {schema.key} ({len(schema.fields)} fields)")
        return stored.model_copy(deep=True)

    async def get_or_create_default(self, entity_type: str) -> FormSchema:
        key = default_key_for(entity_type)
        if key in self._schemas:
            return await self.load(key)

        logger.info(f"Synthesizing default schema for entity type '{entity_type}'")
        return await self.save(build_default_schema(entity_type))

    async def list_all(self) -> list[FormSchema]:
        return [self._schemas[k].model_copy(deep=True) for k in sorted(self._schemas)]

    async def delete(self, key: str) -> bool:
        if self._schemas.pop(key, None) is None:
            return False
        logger.info(f"Deleted schema {key}")
        return True
