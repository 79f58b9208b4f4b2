# formwright/models/values.py
"""
Value map types.

A value map is a flat dict keyed by field name. Values are strings,
numbers, booleans, option values, lists of option values, file values
(a PendingUpload or a resolved reference string) or, for dynamic-config
fields, a list of entry dicts.
"""

from dataclasses import dataclass
from typing import Any

ValueMap = dict[str, Any]


@dataclass(frozen=True)
class PendingUpload:
    """A raw binary chosen for a file/image field that has not been uploaded yet."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


def is_missing_value(value: Any) -> bool:
    """True for None, blank strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False
