# formwright/builder/session.py
"""
Builder session: the open / edit / cancel / save workflow around a
BuilderState.

Persistence only happens on an explicit save(). The session keeps a
snapshot of the last loaded or saved schema so an edit can be cancelled.
"""

import logging

from formwright.builder.state import BuilderState
from formwright.config.schema import BuilderConfig
from formwright.models.schema import FormSchema
from formwright.models.store import SchemaStore, default_key_for, load_schema_or_default

logger = logging.getLogger(__name__)


class BuilderSession:
    """
    One interactive editing pass over a single schema.

    Usage:
        session = BuilderSession(store)
        await session.open("student")
        session.begin_edit()
        session.state.add_field("text")
        await session.save()
    """

    def __init__(self, store: SchemaStore, config: BuilderConfig | None = None) -> None:
        """
        Initialize builder session.

        Args:
            store: Schema store used by open() and save()
            config: Builder settings (locked base fields, name suffix length)
        """
        self._store = store
        self._config = config or BuilderConfig()
        self._state = BuilderState(name_suffix_length=self._config.name_suffix_length)
        self._snapshot: FormSchema | None = None
        self._editing = False

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def schema(self) -> FormSchema:
        return self._state.schema

    @property
    def is_editing(self) -> bool:
        return self._editing

    @property
    def is_dirty(self) -> bool:
        """True if the working schema differs from the last loaded/saved one."""
        if self._snapshot is None:
            return bool(self._state.fields)
        return self._snapshot.to_record() != self._state.schema.to_record()

    def _apply_locks(self, entity_type: str) -> None:
        self._state.set_locked_names(set(self._config.locked_fields.get(entity_type, [])))

    async def open(self, entity_type: str, key: str | None = None) -> FormSchema:
        """
        Load the schema to edit.

        Loads by key when given, falling back to (and creating) the entity
        type's default schema when nothing is stored.

        Args:
            entity_type: Entity the schema configures
            key: Optional schema key (defaults to "<entity_type>_form")

        Returns:
            The working schema
        """
        schema = await load_schema_or_default(self._store, key, entity_type)
        if not schema.entity_type:
            schema.entity_type = entity_type

        self._state.set_schema(schema)
        self._apply_locks(entity_type)
        self._snapshot = self._state.schema.model_copy(deep=True)
        self._editing = False
        logger.info(f"Opened schema '{schema.key}' for {entity_type} ({len(schema.fields)} fields)")
        return self._state.schema

    def begin_edit(self) -> None:
        """Enter edit mode; the current schema becomes the cancel point."""
        self._snapshot = self._state.schema.model_copy(deep=True)
        self._editing = True

    def cancel_edit(self) -> FormSchema:
        """Leave edit mode, discarding all changes since begin_edit()."""
        if self._snapshot is not None:
            self._state.set_schema(self._snapshot)
        self._editing = False
        return self._state.schema

    async def save(self) -> FormSchema:
        """
        Persist the working schema.

        A schema without a key is stored under "<entity_type>_form".

        Returns:
            The stored schema

        Raises:
            ValueError: If the schema has neither a key nor an entity type
        """
        schema = self._state.schema
        if not schema.key:
            if not schema.entity_type:
                raise ValueError("Cannot save a schema without a key or entity type")
            schema.key = default_key_for(schema.entity_type)

        stored = await self._store.save(schema)
        self._snapshot = stored.model_copy(deep=True)
        self._editing = False
        logger.info(f"Saved schema '{stored.key}'")
        return stored
