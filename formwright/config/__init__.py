# formwright/config/__init__.py
"""Configuration system for formwright."""

from .loader import get_config_path, load_config, resolve_db_path
from .schema import (
    BuilderConfig,
    FormwrightConfig,
    LookupConfig,
    OutputConfig,
    StoreConfig,
)

__all__ = [
    "FormwrightConfig",
    "StoreConfig",
    "LookupConfig",
    "BuilderConfig",
    "OutputConfig",
    "load_config",
    "get_config_path",
    "resolve_db_path",
]
