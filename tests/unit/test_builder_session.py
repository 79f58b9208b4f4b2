# tests/unit/test_builder_session.py
"""
Unit tests for BuilderSession open/edit/cancel/save workflow.

Uses InMemorySchemaStore so no filesystem is touched.
"""

import pytest

from formwright.builder.session import BuilderSession
from formwright.config.schema import BuilderConfig
from formwright.models.memory_store import InMemorySchemaStore
from formwright.models.schema import FieldKind, FormField, FormSchema


@pytest.fixture
def store() -> InMemorySchemaStore:
    return InMemorySchemaStore()


@pytest.mark.asyncio
async def test_open_missing_schema_creates_default(store: InMemorySchemaStore):
    """Opening an entity with nothing stored yields (and stores) its default."""
    session = BuilderSession(store)
    schema = await session.open("student")

    assert schema.key == "student_form"
    assert schema.entity_type == "student"
    assert "student_id" in schema.field_names()
    assert session.is_dirty is False
    assert session.is_editing is False

    stored = await store.load("student_form")
    assert stored.field_names() == schema.field_names()


@pytest.mark.asyncio
async def test_open_by_key(store: InMemorySchemaStore):
    custom = FormSchema(
        key="scholarship_form",
        entity_type="student",
        fields=[FormField(name="essay", kind=FieldKind.TEXTAREA)],
    )
    await store.save(custom)

    session = BuilderSession(store)
    schema = await session.open("student", key="scholarship_form")

    assert schema.key == "scholarship_form"
    assert schema.field_names() == ["essay"]


@pytest.mark.asyncio
async def test_open_unknown_key_falls_back_to_entity_default(store: InMemorySchemaStore):
    session = BuilderSession(store)
    schema = await session.open("teacher", key="missing_form")

    assert schema.key == "teacher_form"
    assert "employee_id" in schema.field_names()


@pytest.mark.asyncio
async def test_cancel_edit_restores_snapshot(store: InMemorySchemaStore):
    session = BuilderSession(store)
    await session.open("class")
    original = session.schema.to_record()

    session.begin_edit()
    assert session.is_editing is True
    session.state.add_field(FieldKind.TEXT)
    session.state.set_meta(name="Renamed")
    assert session.is_dirty is True

    session.cancel_edit()

    assert session.is_editing is False
    assert session.is_dirty is False
    assert session.schema.to_record() == original


@pytest.mark.asyncio
async def test_changes_not_persisted_until_save(store: InMemorySchemaStore):
    session = BuilderSession(store)
    await session.open("class")
    session.begin_edit()
    added = session.state.add_field(FieldKind.NUMBER)

    assert added.name not in (await store.load("class_form")).field_names()

    await session.save()

    assert added.name in (await store.load("class_form")).field_names()
    assert session.is_dirty is False
    assert session.is_editing is False


@pytest.mark.asyncio
async def test_base_fields_locked_for_student(store: InMemorySchemaStore):
    session = BuilderSession(store)
    schema = await session.open("student")
    student_id = schema.field_by_name("student_id")

    assert session.state.remove_field(student_id.id) is False
    assert "student_id" in session.schema.field_names()

    first_name = schema.field_by_name("first_name")
    assert session.state.remove_field(first_name.id) is True


@pytest.mark.asyncio
async def test_locked_fields_come_from_config(store: InMemorySchemaStore):
    config = BuilderConfig(locked_fields={"teacher": ["email"]})
    session = BuilderSession(store, config=config)
    schema = await session.open("teacher")

    assert session.state.locked_names == frozenset({"email"})
    assert session.state.remove_field(schema.field_by_name("email").id) is False


@pytest.mark.asyncio
async def test_save_assigns_default_key(store: InMemorySchemaStore):
    session = BuilderSession(store)
    session.state.set_entity_type("exam")
    session.state.add_field(FieldKind.TEXT)

    stored = await session.save()

    assert stored.key == "exam_form"
    assert len((await store.load("exam_form")).fields) == 1


@pytest.mark.asyncio
async def test_save_without_key_or_entity_type_raises(store: InMemorySchemaStore):
    session = BuilderSession(store)
    session.state.add_field(FieldKind.TEXT)

    with pytest.raises(ValueError, match="without a key or entity type"):
        await session.save()
