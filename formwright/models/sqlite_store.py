# formwright/models/sqlite_store.py
"""
SQLite-backed schema persistence.

Provides async upsert/load operations with WAL mode and IMMEDIATE
transactions. The full schema record is stored as JSON next to a few
columns used for listing.
"""

import json
import logging
from datetime import datetime, timezone

import aiosqlite

from formwright.models.db import init_db
from formwright.models.defaults import build_default_schema
from formwright.models.errors import SchemaNotFound
from formwright.models.schema import FormSchema
from formwright.models.store import SchemaStore, default_key_for

logger = logging.getLogger(__name__)


class SQLiteSchemaStore(SchemaStore):
    """
    Async SQLite-backed schema storage.

    Features:
        - WAL mode for concurrent reads/writes
        - IMMEDIATE transactions for write safety
        - No persistent connections (avoids resource leaks)
    """

    def __init__(self, db_path: str) -> None:
        """
        Initialize SQLite schema store.

        Args:
            db_path: Path to SQLite database file
        """
        self._db_path = db_path
        logger.info(f"Created SQLiteSchemaStore with path: {db_path}")

    async def initialize(self) -> None:
        """Create tables if needed. Must be called before first use."""
        await init_db(self._db_path)

    async def load(self, key: str) -> FormSchema:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute("SELECT record FROM form_schemas WHERE key = ?", (key,))
            row = await cursor.fetchone()

        if not row:
            raise SchemaNotFound(key)
        return FormSchema.from_record(json.loads(row[0]))

    async def save(self, schema: FormSchema) -> FormSchema:
        if not schema.key:
            raise ValueError("Cannot save a schema without a key")

        now = datetime.now(timezone.utc).isoformat()
        record_json = json.dumps(schema.to_record(), ensure_ascii=False)

        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")

            try:
                await db.execute(
                    """
                    INSERT INTO form_schemas (
                        key, entity_type, name, description, record, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        entity_type = excluded.entity_type,
                        name = excluded.name,
                        description = excluded.description,
                        record = excluded.record,
                        updated_at = excluded.updated_at
                    """,
                    (
                        schema.key,
                        schema.entity_type,
                        schema.name,
                        schema.description,
                        record_json,
                        now,
                        now,
                    ),
                )
                await db.commit()
                logger.info(f"Saved schema {schema.key} ({len(schema.fields)} fields)")

            except Exception:
                await db.rollback()
                raise

        return FormSchema.from_record(json.loads(record_json))

    async def get_or_create_default(self, entity_type: str) -> FormSchema:
        key = default_key_for(entity_type)
        try:
            return await self.load(key)
        except SchemaNotFound:
            logger.info(f"Synthesizing default schema for entity type '{entity_type}'")
            return await self.save(build_default_schema(entity_type))

    async def list_all(self) -> list[FormSchema]:
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute("SELECT record FROM form_schemas ORDER BY key ASC")
            rows = await cursor.fetchall()

        return [FormSchema.from_record(json.loads(row[0])) for row in rows]

    async def delete(self, key: str) -> bool:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                cursor = await db.execute("DELETE FROM form_schemas WHERE key = ?", (key,))
                deleted = cursor.rowcount > 0
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        if deleted:
            logger.info(f"Deleted schema {key}")
        return deleted
