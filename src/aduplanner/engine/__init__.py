"""Engine module for scene operations.

This module provides the operation API, the selection controller, undo/redo
history and the editor state that ties them together.
"""

from .api import apply, apply_operations, build_export_snapshot
from .editor import EditorState
from .history import HistoryManager
from .ops import list_operations
from .selection import SelectionController

__all__ = [
    "EditorState",
    "HistoryManager",
    "SelectionController",
    "apply",
    "apply_operations",
    "build_export_snapshot",
    "list_operations",
]
