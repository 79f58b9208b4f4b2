# formwright/renderer/__init__.py
"""Form rendering: controls, validation and the render session."""

from .controls import CONTROLS, Control, control_for
from .initial import initial_values_from_record
from .session import DynamicEntries, RenderedControl, RenderSession, SessionState
from .validation import validate_field, validate_values

__all__ = [
    "CONTROLS",
    "Control",
    "control_for",
    "initial_values_from_record",
    "DynamicEntries",
    "RenderedControl",
    "RenderSession",
    "SessionState",
    "validate_field",
    "validate_values",
]
