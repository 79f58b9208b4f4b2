# formwright/builder/__init__.py
"""Interactive schema construction: builder state and builder session."""

from .session import BuilderSession
from .state import BuilderState

__all__ = ["BuilderState", "BuilderSession"]
