from __future__ import annotations

"""Base class for read-only walks over the entry tree.

Entries dispatch to ``visit_directory`` or ``visit_file`` through their
``accept`` method, so concrete traversals add analyses without the model
knowing about them. Every visited node emits one ``progress`` event on the
traversal's own channel carrying the node name, the running count and the
total node count computed before the walk started.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from doctree_toolkit.core.exceptions import UnhandledEntryError
from doctree_toolkit.core.models.entries import Directory, Entry
from doctree_toolkit.core.notifications import NotificationChannel, NotificationEvent

if TYPE_CHECKING:
    from doctree_toolkit.core.models.entries import FileEntry

__all__ = ["Traversal", "count_nodes"]


def count_nodes(root: Entry) -> int:
    """Return the number of entries in the subtree rooted at *root*."""
    if isinstance(root, Directory):
        return 1 + sum(count_nodes(child) for child in root.get_children())
    return 1


class Traversal(ABC):
    """Skeleton shared by all tree operations.

    Attributes
    ----------
    channel
        Channel receiving one ``progress`` event per visited node.
    processed
        Number of nodes reported so far.
    total
        Node count of the walked tree, known before the walk starts.
    """

    source = "traversal"

    def __init__(self) -> None:
        self.channel = NotificationChannel()
        self.processed = 0
        self.total = 0

    def walk(self, root: Entry, total: Optional[int] = None) -> "Traversal":
        """Visit the subtree rooted at *root* and return ``self``."""
        self.processed = 0
        self.total = count_nodes(root) if total is None else total
        self.dispatch(root)
        return self

    def dispatch(self, entry: Entry) -> None:
        if not isinstance(entry, Entry):
            raise UnhandledEntryError(
                f"{type(self).__name__} cannot visit {type(entry).__name__!r} objects"
            )
        entry.accept(self)

    def visit_children(self, directory: Directory) -> None:
        for child in directory.get_children():
            self.dispatch(child)

    def _progress(self, message: str, node: Entry) -> None:
        self.processed += 1
        self.channel.notify(
            NotificationEvent(
                source=self.source,
                type="progress",
                message=message,
                data={
                    "current_node": node.name,
                    "count": self.processed,
                    "total": self.total,
                    "node_type": node.type.value,
                },
            )
        )

    @abstractmethod
    def visit_file(self, file: "FileEntry") -> None:
        ...

    @abstractmethod
    def visit_directory(self, directory: Directory) -> None:
        ...
