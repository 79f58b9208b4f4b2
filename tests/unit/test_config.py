# tests/unit/test_config.py
"""Unit tests for configuration loading and logging setup."""

import json
import logging
from pathlib import Path

import yaml

from formwright.config.loader import load_config, resolve_db_path
from formwright.config.schema import FormwrightConfig
from formwright.logging_config import JsonFormatter, configure_logging


def test_missing_config_created_with_defaults(tmp_path: Path):
    path = tmp_path / "nested" / "config.yaml"

    config = load_config(path)

    assert path.exists()
    assert config.store.backend == "sqlite"
    written = yaml.safe_load(path.read_text())
    assert written["lookup"]["endpoints"]["class_id"] == "/teachers/{teacher_id}/classes"
    assert "student_id" in written["builder"]["locked_fields"]["student"]


def test_existing_config_loaded(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "store": {"backend": "memory"},
                "lookup": {"base_url": "https://school.test/api", "max_attempts": 5},
                "output": {"verbosity": "verbose"},
                "unknown_section": {"ignored": True},
            }
        )
    )

    config = load_config(path)

    assert config.store.backend == "memory"
    assert config.lookup.base_url == "https://school.test/api"
    assert config.lookup.max_attempts == 5
    assert config.lookup.timeout == 10.0
    assert config.output.verbosity == "verbose"


def test_empty_config_file_gives_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert load_config(path).model_dump() == FormwrightConfig().model_dump()


def test_explicit_db_path(tmp_path: Path):
    config = FormwrightConfig(store={"db_path": str(tmp_path / "forms.db")})
    assert resolve_db_path(config) == str(tmp_path / "forms.db")


def test_json_formatter():
    record = logging.LogRecord("formwright.test", logging.WARNING, __file__, 1, "hello %s", ("x",), None)
    line = json.loads(JsonFormatter().format(record))

    assert line["level"] == "WARNING"
    assert line["logger"] == "formwright.test"
    assert line["msg"] == "hello x"


def test_configure_logging_levels():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        handler = configure_logging("quiet", json_logs=True)
        assert root.handlers == [handler]
        assert root.level == logging.WARNING
        assert isinstance(handler.formatter, JsonFormatter)

        configure_logging("verbose")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
