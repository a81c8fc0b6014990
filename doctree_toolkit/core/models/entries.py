from __future__ import annotations

"""Entry types forming the in-memory document tree.

A tree is made of :class:`Directory` containers holding an ordered list of
child entries, and file leaves (:class:`Document`, :class:`Image`,
:class:`TextFile`). Every entry carries a globally unique ``id`` that is
assigned once at creation and never changes; clones always receive fresh ids.

Size policy
-----------
File sizes are stored (KB, non-negative integers). A directory has no stored
size: :attr:`Directory.size` is always derived as the sum of the sizes of all
descendant files, so an empty directory reports 0.
"""

from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from doctree_toolkit.core.utils import generate_entry_id, today_iso

if TYPE_CHECKING:
    from doctree_toolkit.core.sorting import SortStrategy
    from doctree_toolkit.core.traversal.base import Traversal

__all__ = [
    "EntryType",
    "Entry",
    "Directory",
    "FileEntry",
    "Document",
    "Image",
    "TextFile",
]


class EntryType(str, Enum):
    """Closed set of entry kinds."""

    DIRECTORY = "Directory"
    DOCUMENT = "Document"
    IMAGE = "Image"
    TEXT = "Text"


class Entry(ABC):
    """Abstract node of the document tree.

    Attributes
    ----------
    id
        Unique identifier, read-only.
    name
        Display name, freely mutable.
    type
        One of :class:`EntryType`.
    created
        Creation date as ``YYYY-MM-DD``.
    """

    def __init__(
        self,
        name: str,
        entry_type: EntryType,
        created: Optional[str] = None,
        entry_id: Optional[str] = None,
    ) -> None:
        self._id: str = entry_id or generate_entry_id()
        self.name: str = name
        self._type: EntryType = EntryType(entry_type)
        self.created: str = created or today_iso()

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> EntryType:
        return self._type

    @property
    @abstractmethod
    def size(self) -> int:
        """Size in KB."""

    @property
    def attributes(self) -> Mapping[str, Any]:
        """Read-only snapshot of type-specific display fields."""
        return MappingProxyType(dict(self._attributes()))

    @property
    def extension(self) -> str:
        """Lower-cased file extension, empty for directories."""
        return ""

    def is_directory(self) -> bool:
        return self._type is EntryType.DIRECTORY

    def _attributes(self) -> Dict[str, Any]:
        return {}

    @abstractmethod
    def accept(self, operation: "Traversal") -> None:
        """Dispatch to the handler of *operation* matching this entry kind."""

    @abstractmethod
    def clone(self) -> "Entry":
        """Return a deep copy carrying fresh ids."""

    @abstractmethod
    def structure(self) -> Tuple[Any, ...]:
        """Return an id-free nested tuple describing this subtree."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r}, name={self.name!r})"


class Directory(Entry):
    """Container entry owning an ordered list of children."""

    def __init__(
        self,
        name: str,
        created: Optional[str] = None,
        entry_id: Optional[str] = None,
    ) -> None:
        super().__init__(name, EntryType.DIRECTORY, created, entry_id)
        self._children: List[Entry] = []
        self._strategy: Optional["SortStrategy"] = None

    # ------------------------------------------------------------------ Size

    @property
    def size(self) -> int:
        return sum(child.size for child in self._children)

    # -------------------------------------------------------------- Children

    def add(self, child: Entry, index: Optional[int] = None) -> None:
        """Add *child* to this directory.

        Without *index* the child is appended and the active sort strategy, if
        any, is re-applied. With an explicit *index* the child is inserted at
        that exact position and no re-sort happens.
        """
        if index is None:
            self._children.append(child)
            self._apply_sort()
        else:
            self._children.insert(index, child)

    def remove(self, child_id: str) -> Optional[Entry]:
        """Remove the direct child with *child_id* and return it.

        Unknown ids are ignored and ``None`` is returned.
        """
        idx = self.index_of(child_id)
        if idx < 0:
            return None
        return self._children.pop(idx)

    def index_of(self, child_id: str) -> int:
        """Return the position of the direct child with *child_id*, or -1."""
        for idx, child in enumerate(self._children):
            if child.id == child_id:
                return idx
        return -1

    def get_children(self) -> List[Entry]:
        """Return a copy of the child list."""
        return list(self._children)

    def has_children(self) -> bool:
        return len(self._children) > 0

    # --------------------------------------------------------------- Sorting

    @property
    def sort_strategy(self) -> Optional["SortStrategy"]:
        return self._strategy

    def sort(self, strategy: "SortStrategy") -> None:
        """Store *strategy* and re-order the children immediately."""
        self._strategy = strategy
        self._apply_sort()

    def restore_order(self, children: List[Entry], strategy: Optional["SortStrategy"]) -> None:
        """Reinstate an exact child order and active strategy."""
        self._children = list(children)
        self._strategy = strategy

    def _apply_sort(self) -> None:
        if self._strategy is not None:
            self._strategy.sort(self._children)

    # ------------------------------------------------------------- Protocols

    def accept(self, operation: "Traversal") -> None:
        operation.visit_directory(self)

    def clone(self) -> "Directory":
        copy = Directory(self.name, self.created)
        copy._strategy = self._strategy
        for child in self._children:
            copy._children.append(child.clone())
        return copy

    def structure(self) -> Tuple[Any, ...]:
        return (
            self._type.value,
            self.name,
            self.created,
            tuple(child.structure() for child in self._children),
        )


class FileEntry(Entry):
    """Terminal entry (file). Subclasses add type-specific fields."""

    entry_type: EntryType = EntryType.TEXT

    def __init__(
        self,
        name: str,
        size: int = 0,
        created: Optional[str] = None,
        entry_id: Optional[str] = None,
    ) -> None:
        super().__init__(name, self.entry_type, created, entry_id)
        size = int(size)
        if size < 0:
            raise ValueError(f"Entry size must be non-negative, got {size}")
        self._size: int = size

    @property
    def size(self) -> int:
        return self._size

    @property
    def extension(self) -> str:
        stem, dot, suffix = self.name.rpartition(".")
        return suffix.lower() if dot and stem else ""

    def accept(self, operation: "Traversal") -> None:
        operation.visit_file(self)

    def _init_kwargs(self) -> Dict[str, Any]:
        """Constructor arguments reproducing this file, id excluded."""
        return {"name": self.name, "size": self._size, "created": self.created}

    def clone(self) -> "FileEntry":
        return type(self)(**self._init_kwargs())

    def structure(self) -> Tuple[Any, ...]:
        return (
            self._type.value,
            self.name,
            self._size,
            self.created,
            tuple(sorted(self._attributes().items())),
        )


class Document(FileEntry):
    """Word-processor document with a page count."""

    entry_type = EntryType.DOCUMENT

    def __init__(
        self,
        name: str,
        size: int = 0,
        created: Optional[str] = None,
        pages: int = 1,
        entry_id: Optional[str] = None,
    ) -> None:
        super().__init__(name, size, created, entry_id)
        self.pages = pages

    def _attributes(self) -> Dict[str, Any]:
        return {"pages": self.pages}

    def _init_kwargs(self) -> Dict[str, Any]:
        return {**super()._init_kwargs(), "pages": self.pages}


class Image(FileEntry):
    entry_type = EntryType.IMAGE

    def __init__(
        self,
        name: str,
        size: int = 0,
        created: Optional[str] = None,
        width: int = 800,
        height: int = 600,
        entry_id: Optional[str] = None,
    ) -> None:
        super().__init__(name, size, created, entry_id)
        self.width = width
        self.height = height

    def _attributes(self) -> Dict[str, Any]:
        return {"res": f"{self.width}x{self.height}"}

    def _init_kwargs(self) -> Dict[str, Any]:
        return {**super()._init_kwargs(), "width": self.width, "height": self.height}


class TextFile(FileEntry):
    entry_type = EntryType.TEXT

    def __init__(
        self,
        name: str,
        size: int = 0,
        created: Optional[str] = None,
        encoding: str = "UTF-8",
        entry_id: Optional[str] = None,
    ) -> None:
        super().__init__(name, size, created, entry_id)
        self.encoding = encoding

    def _attributes(self) -> Dict[str, Any]:
        return {"enc": self.encoding}

    def _init_kwargs(self) -> Dict[str, Any]:
        return {**super()._init_kwargs(), "encoding": self.encoding}
