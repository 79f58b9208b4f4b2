# formwright/tools/import_schema.py
"""
import_schema tool implementation.

Reads a schema record from a JSON file, validates it and saves it.
"""

import logging
from pathlib import Path

from formwright.models.errors import FormwrightError
from formwright.models.responses import SchemaRecordResponse
from formwright.models.schema import FormSchema
from formwright.models.store import SchemaStore, default_key_for

logger = logging.getLogger(__name__)


async def import_schema(
    path: Path,
    store: SchemaStore,
    key: str | None = None,
    entity_type: str | None = None,
) -> dict:
    """
    Import a schema record from a JSON file.

    The stored key is, in order: the explicit key, the record's key, or
    "<entity_type>_form".

    Args:
        path: JSON file holding a schema record
        store: Schema storage instance
        key: Override the record's key
        entity_type: Override the record's entity type

    Returns:
        SchemaRecordResponse as dict

    Raises:
        FormwrightError: If the file is unreadable or not a valid schema,
                         or no key can be determined
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FormwrightError(f"Cannot read {path}: {e}") from e

    try:
        schema = FormSchema.from_json(text)
    except ValueError as e:
        # pydantic.ValidationError and json.JSONDecodeError are both ValueErrors
        raise FormwrightError(f"Invalid schema in {path}: {e}") from e

    if entity_type:
        schema.entity_type = entity_type
    if key:
        schema.key = key
    elif not schema.key:
        if not schema.entity_type:
            raise FormwrightError(f"Schema in {path} has neither a key nor an entity type")
        schema.key = default_key_for(schema.entity_type)

    stored = await store.save(schema)
    logger.info(f"Imported schema {stored.key} from {path}")

    response = SchemaRecordResponse(key=stored.key or "", record=stored.to_record())
    return response.model_dump()
