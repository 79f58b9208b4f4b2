# tests/unit/test_cli.py
"""
CLI unit tests.

Tests each command via typer's CliRunner, using an in-memory schema store
and default config to avoid filesystem side effects.
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from formwright.cli import app
from formwright.config.schema import FormwrightConfig
from formwright.models.memory_store import InMemorySchemaStore
from formwright.models.schema import FieldKind, FormField, FormSchema

runner = CliRunner()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store() -> InMemorySchemaStore:
    return InMemorySchemaStore(
        [
            FormSchema(
                key="club_form",
                name="Club Form",
                entity_type="club",
                fields=[
                    FormField(name="club_name", label="Club Name", kind=FieldKind.TEXT, required=True),
                    FormField(
                        name="members",
                        label="Members",
                        kind=FieldKind.NUMBER,
                        validations={"maxValue": 40},
                    ),
                ],
            )
        ]
    )


@pytest.fixture(autouse=True)
def cli_env(store):
    """Patch config loading, logging setup and store creation."""

    async def _fake_get_store(config):
        return store

    with patch("formwright.cli._load_config", return_value=FormwrightConfig()), \
         patch("formwright.cli.configure_logging"), \
         patch("formwright.cli._get_store", _fake_get_store):
        yield


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("list", "show", "default", "export", "import", "validate"):
            assert command in result.output


class TestList:
    def test_lists_schemas(self):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "club_form" in result.output

    def test_empty(self, store):
        result = runner.invoke(app, ["list", "--entity-type", "nobody"])
        assert result.exit_code == 0
        assert "No schemas found." in result.output


class TestShow:
    def test_show_stored(self):
        result = runner.invoke(app, ["show", "club_form"])
        assert result.exit_code == 0
        assert '"key": "club_form"' in result.output
        assert '"club_name"' in result.output

    def test_show_falls_back_to_default(self):
        result = runner.invoke(app, ["show", "teacher_form"])
        assert result.exit_code == 0
        assert '"employee_id"' in result.output

    def test_show_without_fallback_fails(self):
        result = runner.invoke(app, ["show", "teacher_form", "--no-fallback"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestDefault:
    def test_creates_default(self, store):
        result = runner.invoke(app, ["default", "exam"])
        assert result.exit_code == 0
        assert '"subject_id"' in result.output
        assert "exam_form" in store._schemas


class TestExportImport:
    def test_export_and_import(self, store, tmp_path):
        path = tmp_path / "club.json"

        result = runner.invoke(app, ["export", "club_form", str(path)])
        assert result.exit_code == 0
        assert "Exported club_form (2 fields)" in result.output
        assert json.loads(path.read_text())["name"] == "Club Form"

        result = runner.invoke(app, ["import", str(path), "--key", "club_copy_form"])
        assert result.exit_code == 0
        assert "Imported club_copy_form (2 fields)" in result.output
        assert "club_copy_form" in store._schemas

    def test_export_missing_fails(self, tmp_path):
        result = runner.invoke(app, ["export", "nope_form", str(tmp_path / "x.json")])
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestValidate:
    def test_valid_values(self, tmp_path):
        path = tmp_path / "values.json"
        path.write_text(json.dumps({"club_name": "Chess", "members": 12}))

        result = runner.invoke(app, ["validate", "club_form", str(path)])
        assert result.exit_code == 0
        assert "club_form: valid" in result.output

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "values.json"
        path.write_text(json.dumps({"members": 99}))

        result = runner.invoke(app, ["validate", "club_form", str(path)])
        assert result.exit_code == 1
        assert "2 error(s)" in result.output
        assert "club_name: Club Name is required" in result.output
        assert "members: Members must be at most 40" in result.output

    def test_values_file_must_be_object(self, tmp_path):
        path = tmp_path / "values.json"
        path.write_text("[1, 2]")

        result = runner.invoke(app, ["validate", "club_form", str(path)])
        assert result.exit_code == 1
        assert "must hold a JSON object" in result.output
