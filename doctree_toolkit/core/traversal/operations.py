from __future__ import annotations

"""Analysis traversals: statistics, keyword search and id lookup."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from doctree_toolkit.core.models.entries import Directory, Entry, FileEntry
from doctree_toolkit.core.traversal.base import Traversal

__all__ = [
    "FileStats",
    "StatisticsResults",
    "StatisticsTraversal",
    "SearchTraversal",
    "FinderTraversal",
]


@dataclass(frozen=True)
class FileStats:
    """Aggregated sizes over a group of files (KB)."""

    count: int = 0
    total_size: int = 0
    max_size: int = 0
    min_size: int = 0
    avg_size: float = 0.0


@dataclass(frozen=True)
class StatisticsResults:
    total_nodes: int
    dir_count: int
    file_stats: FileStats
    by_extension: Optional[Dict[str, FileStats]] = None


class _Accumulator:
    def __init__(self) -> None:
        self.count = 0
        self.total_size = 0
        self.max_size: Optional[int] = None
        self.min_size: Optional[int] = None

    def add(self, size: int) -> None:
        self.count += 1
        self.total_size += size
        self.max_size = size if self.max_size is None else max(self.max_size, size)
        self.min_size = size if self.min_size is None else min(self.min_size, size)

    def finalize(self) -> FileStats:
        return FileStats(
            count=self.count,
            total_size=self.total_size,
            max_size=self.max_size or 0,
            min_size=self.min_size or 0,
            avg_size=round(self.total_size / self.count, 2) if self.count else 0.0,
        )


class StatisticsTraversal(Traversal):
    """Count nodes and sum file sizes.

    Directory sizes are never read; the total is the sum over files only, so
    the result does not depend on any size stored on containers.
    """

    def __init__(self, group_by_extension: bool = False) -> None:
        super().__init__()
        self.group_by_extension = group_by_extension
        self.total_nodes = 0
        self.dir_count = 0
        self._overall = _Accumulator()
        self._by_ext: Dict[str, _Accumulator] = {}

    @property
    def total_size(self) -> int:
        return self._overall.total_size

    def visit_file(self, file: FileEntry) -> None:
        self.total_nodes += 1
        self._overall.add(file.size)
        if self.group_by_extension:
            ext = f".{file.extension}" if file.extension else "no-ext"
            self._by_ext.setdefault(ext, _Accumulator()).add(file.size)
        self._progress(f"Counting file: {file.name}", file)

    def visit_directory(self, directory: Directory) -> None:
        self.total_nodes += 1
        self.dir_count += 1
        self._progress(f"Analysing directory: {directory.name}", directory)
        self.visit_children(directory)

    def results(self) -> StatisticsResults:
        by_extension = None
        if self.group_by_extension:
            by_extension = {ext: acc.finalize() for ext, acc in self._by_ext.items()}
        return StatisticsResults(
            total_nodes=self.total_nodes,
            dir_count=self.dir_count,
            file_stats=self._overall.finalize(),
            by_extension=by_extension,
        )


class SearchTraversal(Traversal):
    """Collect ids of files whose name contains a keyword (case-insensitive).

    Directories are walked but never matched.
    """

    def __init__(self, keyword: str) -> None:
        super().__init__()
        self.keyword = keyword.casefold()
        self.found_ids: List[str] = []

    def _matches(self, file: FileEntry) -> bool:
        return self.keyword in file.name.casefold()

    def visit_file(self, file: FileEntry) -> None:
        if self._matches(file):
            self.found_ids.append(file.id)
            self._progress(f"[Match] {file.name}", file)
        else:
            self._progress(f"Scanning file: {file.name}", file)

    def visit_directory(self, directory: Directory) -> None:
        self._progress(f"Searching directory: {directory.name}", directory)
        self.visit_children(directory)


class FinderTraversal(Traversal):
    """Locate the entry with a given id and its immediate parent.

    Both ``found`` and ``parent`` stay ``None`` when the id is absent;
    ``parent`` is also ``None`` when the target is the walked root. The walk
    stops descending as soon as the target is found.
    """

    def __init__(self, target_id: str) -> None:
        super().__init__()
        self.target_id = target_id
        self.found: Optional[Entry] = None
        self.parent: Optional[Directory] = None

    def visit_file(self, file: FileEntry) -> None:
        if self.found is not None:
            return
        self._progress(f"Checking file: {file.name}", file)
        if file.id == self.target_id:
            self.found = file

    def visit_directory(self, directory: Directory) -> None:
        if self.found is not None:
            return
        self._progress(f"Checking directory: {directory.name}", directory)
        if directory.id == self.target_id:
            self.found = directory
            return
        for child in directory.get_children():
            self.dispatch(child)
            if self.found is not None:
                if self.parent is None and self.found is child:
                    self.parent = directory
                return
