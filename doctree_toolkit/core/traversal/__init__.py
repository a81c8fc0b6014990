from __future__ import annotations

"""Read-only tree traversals (statistics, search, lookup, export)."""

from .base import Traversal, count_nodes  # noqa: F401
from .exporters import ExportTemplate, MarkdownExporter, SafeFragment, XmlExporter  # noqa: F401
from .operations import (  # noqa: F401
    FileStats,
    FinderTraversal,
    SearchTraversal,
    StatisticsResults,
    StatisticsTraversal,
)

__all__: list[str] = [
    "Traversal",
    "count_nodes",
    "ExportTemplate",
    "MarkdownExporter",
    "SafeFragment",
    "XmlExporter",
    "FileStats",
    "FinderTraversal",
    "SearchTraversal",
    "StatisticsResults",
    "StatisticsTraversal",
]
