# formwright/config/loader.py
"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config directory management.
"""

import logging
from pathlib import Path

import yaml
from platformdirs import user_config_path

from .schema import FormwrightConfig

logger = logging.getLogger(__name__)

APP_NAME = "formwright"


def get_config_dir() -> Path:
    """Get the user config directory, creating it if needed."""
    return user_config_path(APP_NAME, ensure_exists=True)


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    return get_config_dir() / "config.yaml"


def load_config(config_path: Path | None = None) -> FormwrightConfig:
    """
    Load configuration from YAML file.

    If the config file doesn't exist, creates it with defaults.

    Args:
        config_path: Explicit file (defaults to get_config_path())

    Returns:
        Validated FormwrightConfig
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        default_config = FormwrightConfig()
        config_dict = default_config.model_dump(mode="json")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Created default config at {config_path}")
        return default_config

    with config_path.open("r") as f:
        config_data = yaml.safe_load(f) or {}

    config = FormwrightConfig(**config_data)
    logger.info(f"Loaded config from {config_path}")
    return config


def resolve_db_path(config: FormwrightConfig) -> str:
    """SQLite path from config, defaulting to schemas.db in the config dir."""
    if config.store.db_path:
        return config.store.db_path
    return str(get_config_dir() / "schemas.db")
