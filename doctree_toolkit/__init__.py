from __future__ import annotations

"""Top-level package for the in-memory document tree toolkit.

Front-ends (GUI, CLI) should only depend on the public API exposed here rather
than importing internal modules directly.
"""

from .core.services.explorer_service import ExplorerService, OperationResult
from .core.context import AppContext
from .core.models import Directory, Document, Image, TextFile

__all__: list[str] = [
    "AppContext",
    "Directory",
    "Document",
    "ExplorerService",
    "Image",
    "OperationResult",
    "TextFile",
]
