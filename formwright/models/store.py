# formwright/models/store.py
"""
Schema store protocol definition.

Defines the abstract interface that both InMemorySchemaStore and
SQLiteSchemaStore implement, plus the engine's NotFound fallback policy.
"""

import logging
from abc import ABC, abstractmethod

from formwright.models.errors import SchemaNotFound
from formwright.models.schema import FormSchema

logger = logging.getLogger(__name__)

FORM_KEY_SUFFIX = "_form"


def default_key_for(entity_type: str) -> str:
    """Key under which the default schema of an entity type is stored."""
    return f"{entity_type}{FORM_KEY_SUFFIX}"


def entity_type_from_key(key: str) -> str:
    """Inverse of default_key_for; keys without the suffix map to themselves."""
    if key.endswith(FORM_KEY_SUFFIX) and len(key) > len(FORM_KEY_SUFFIX):
        return key[: -len(FORM_KEY_SUFFIX)]
    return key


class SchemaStore(ABC):
    """
    Abstract base class for schema persistence.

    Both in-memory and persistent (SQLite) stores implement this protocol.
    Stores hand out copies: mutating a returned schema never changes what
    is stored until it is passed back to save().
    """

    @abstractmethod
    async def load(self, key: str) -> FormSchema:
        """
        Load the schema stored under a key.

        Args:
            key: Schema key (e.g. "student_form")

        Returns:
            The stored FormSchema

        Raises:
            SchemaNotFound: If nothing is stored under key
        """
        pass

    @abstractmethod
    async def save(self, schema: FormSchema) -> FormSchema:
        """
        Insert or update a schema by its key.

        Args:
            schema: Schema to store (must have a non-empty key)

        Returns:
            The stored schema

        Raises:
            ValueError: If schema.key is empty
        """
        pass

    @abstractmethod
    async def get_or_create_default(self, entity_type: str) -> FormSchema:
        """
        Return the default schema for an entity type, creating it if missing.

        Args:
            entity_type: Business entity (student, teacher, class, ...)

        Returns:
            Stored or freshly synthesized FormSchema
        """
        pass

    @abstractmethod
    async def list_all(self) -> list[FormSchema]:
        """
        List all stored schemas.

        Returns:
            Schemas ordered by key
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a stored schema.

        Returns:
            True if a schema was deleted, False if none was stored
        """
        pass

    async def close(self) -> None:
        """Release resources. Stores without resources do nothing."""
        return None


async def load_schema_or_default(
    store: SchemaStore, key: str | None, entity_type: str | None = None
) -> FormSchema:
    """
    Load a schema by key, falling back to the entity type's default.

    The entity type for the fallback is the explicit argument, else the key
    with its "_form" suffix removed, else the key itself.

    Args:
        store: Schema store
        key: Schema key (None goes straight to the default)
        entity_type: Optional entity type for the fallback

    Returns:
        The stored schema or the entity type's default schema

    Raises:
        ValueError: If neither key nor entity_type is given
    """
    if not key and not entity_type:
        raise ValueError("Either a schema key or an entity type is required")

    if key:
        try:
            return await store.load(key)
        except SchemaNotFound:
            logger.info(f"Schema '{key}' not found, falling back to default")

    fallback_type = entity_type or entity_type_from_key(key or "")
    return await store.get_or_create_default(fallback_type)
