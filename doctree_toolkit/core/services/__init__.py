from __future__ import annotations

"""Command-side services (commands, undo/redo history, progress adapter).

The :class:`ExplorerService` facade lives in ``explorer_service`` and is
re-exported from the top-level package; it is not imported here because it
depends on :mod:`doctree_toolkit.core.context`, which itself needs the history.
"""

from .commands import (  # noqa: F401
    Command,
    CopyCommand,
    DeleteCommand,
    MoveCommand,
    PasteCommand,
    SortCommand,
    TagCommand,
)
from .command_history import CommandHistory  # noqa: F401
from .progress_service import ProgressService  # noqa: F401

__all__: list[str] = [
    "Command",
    "CopyCommand",
    "DeleteCommand",
    "MoveCommand",
    "PasteCommand",
    "SortCommand",
    "TagCommand",
    "CommandHistory",
    "ProgressService",
]
