from __future__ import annotations

"""Shared data structures used across the doctree_toolkit core.

This package exposes the entry tree and label value objects used by services
and other core layers. It is intentionally free of UI / I/O code so that the
contained objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from .entries import (
    Directory,
    Document,
    Entry,
    EntryType,
    FileEntry,
    Image,
    TextFile,
)
from .labels import Label, LabelCache

__all__ = [
    "Directory",
    "Document",
    "Entry",
    "EntryType",
    "FileEntry",
    "Image",
    "Label",
    "LabelCache",
    "TextFile",
]
