# formwright/tools/export_schema.py
"""
export_schema tool implementation.

Writes a stored schema to a JSON file in its persisted record shape.
"""

import logging
from pathlib import Path

from formwright.models.store import SchemaStore

logger = logging.getLogger(__name__)


async def export_schema(key: str, path: Path, store: SchemaStore) -> dict:
    """
    Export a stored schema to a JSON file.

    Args:
        key: Schema key
        path: Destination file (parent directories are created)
        store: Schema storage instance

    Returns:
        Dict with key, path and field_count

    Raises:
        SchemaNotFound: If nothing is stored under key
    """
    schema = await store.load(key)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(schema.to_json(indent=2), encoding="utf-8")

    logger.info(f"Exported schema {key} to {path}")
    return {"key": key, "path": str(path), "field_count": len(schema.fields)}
