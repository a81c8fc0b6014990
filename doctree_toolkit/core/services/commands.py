from __future__ import annotations

"""Reversible commands mutating the entry tree and the tag index.

Each command captures what it needs to reverse itself. Commands that find
nothing to do (unknown id, already-attached tag, empty clipboard) become
no-ops and their ``undo`` is a no-op too. Delete, move and paste no-ops also
clear ``undoable`` so the history never records them.

Commands
--------
- DeleteCommand: splice an entry out of its parent, undo reinserts it at its
  former index.
- TagCommand: attach or detach one label, undo applies the inverse only if the
  forward action changed the index.
- SortCommand: apply a strategy to a directory and all its sub-directories,
  undo restores every prior child order and strategy exactly.
- CopyCommand: put a clone on the clipboard. Not undoable.
- PasteCommand: insert a clone of the clipboard content; redo reinserts the
  same pasted object, undo restores the destination order.
- MoveCommand: detach from one directory, attach to another; undo restores the
  former position and the destination order.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Tuple

from doctree_toolkit.core.models.entries import Directory, Entry

if TYPE_CHECKING:
    from doctree_toolkit.core.clipboard import Clipboard
    from doctree_toolkit.core.sorting import SortState, SortStrategy
    from doctree_toolkit.core.tag_index import TagIndex

__all__ = [
    "Command",
    "DeleteCommand",
    "TagCommand",
    "SortCommand",
    "CopyCommand",
    "PasteCommand",
    "MoveCommand",
]


class Command(ABC):
    """Encapsulated mutation with a forward and a reverse action.

    Attributes
    ----------
    name
        Human-readable label used in notifications and history listings.
    undoable
        False for one-way commands and for commands whose first execute
        found nothing to do; the history runs them but does not record them.
    old_sort_state, new_sort_state
        Sort states reported in notifications (sort commands only).
    """

    undoable: bool = True

    def __init__(self, name: str) -> None:
        self.name = name
        self.old_sort_state: Optional["SortState"] = None
        self.new_sort_state: Optional["SortState"] = None

    @abstractmethod
    def execute(self) -> None:
        ...

    @abstractmethod
    def undo(self) -> None:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class DeleteCommand(Command):
    def __init__(self, target_id: str, parent: Directory) -> None:
        super().__init__("Delete item")
        self.target_id = target_id
        self.parent = parent
        self._removed: Optional[Entry] = None
        self._index = -1

    def execute(self) -> None:
        self._index = self.parent.index_of(self.target_id)
        self._removed = self.parent.remove(self.target_id)
        if self._removed is None:
            self.undoable = False
            return
        self.name = f"Delete item ({self._removed.name})"

    def undo(self) -> None:
        if self._removed is not None:
            self.parent.add(self._removed, self._index)
            self._removed = None


class TagCommand(Command):
    def __init__(self, tag_index: "TagIndex", entry_id: str, label_name: str, attach: bool = True) -> None:
        super().__init__(f"Add tag ({label_name})" if attach else f"Remove tag ({label_name})")
        self.tag_index = tag_index
        self.entry_id = entry_id
        self.label_name = label_name
        self.attach = attach
        self._changed = False

    def execute(self) -> None:
        if self.attach:
            self._changed = self.tag_index.attach(self.entry_id, self.label_name)
        else:
            self._changed = self.tag_index.detach(self.entry_id, self.label_name)

    def undo(self) -> None:
        if not self._changed:
            return
        if self.attach:
            self.tag_index.detach(self.entry_id, self.label_name)
        else:
            self.tag_index.attach(self.entry_id, self.label_name)
        self._changed = False


class SortCommand(Command):
    """Apply *strategy* to *target* and, when recursive, every sub-directory."""

    def __init__(
        self,
        target: Directory,
        strategy: "SortStrategy",
        old_state: Optional["SortState"] = None,
        recursive: bool = True,
    ) -> None:
        new_state = strategy.state
        super().__init__(f"Sort by {new_state.attribute} {new_state.direction}")
        self.target = target
        self.strategy = strategy
        self.recursive = recursive
        self.old_sort_state = old_state
        self.new_sort_state = new_state
        self._snapshots: List[Tuple[Directory, List[Entry], Optional["SortStrategy"]]] = []

    def _directories(self) -> List[Directory]:
        if not self.recursive:
            return [self.target]
        found: List[Directory] = []
        pending = [self.target]
        while pending:
            current = pending.pop()
            found.append(current)
            pending.extend(c for c in current.get_children() if isinstance(c, Directory))
        return found

    def execute(self) -> None:
        self._snapshots = []
        for directory in self._directories():
            self._snapshots.append((directory, directory.get_children(), directory.sort_strategy))
            directory.sort(self.strategy)

    def undo(self) -> None:
        for directory, children, strategy in reversed(self._snapshots):
            directory.restore_order(children, strategy)
        self._snapshots = []


class CopyCommand(Command):
    undoable = False

    def __init__(self, entry: Optional[Entry], clipboard: "Clipboard") -> None:
        super().__init__("Copy item")
        self.entry = entry
        self.clipboard = clipboard

    def execute(self) -> None:
        if self.entry is not None:
            self.clipboard.set(self.entry.clone())
            self.name = f"Copy item ({self.entry.name})"

    def undo(self) -> None:
        pass


class PasteCommand(Command):
    """Insert a clone of the clipboard content into *destination*.

    The first execute takes the clone; redo reinserts that same object. When
    the clipboard was empty at first execute the command stays a no-op for
    good and is not recorded by the history.
    """

    def __init__(self, destination: Directory, clipboard: "Clipboard") -> None:
        super().__init__("Paste item")
        self.destination = destination
        self.clipboard = clipboard
        self.pasted: Optional[Entry] = None
        self._executed = False
        self._order: List[Entry] = []

    def execute(self) -> None:
        if not self._executed:
            self._executed = True
            self.pasted = self.clipboard.get()
            if self.pasted is None:
                self.undoable = False
                return
            self.name = f"Paste item ({self.pasted.name})"
        if self.pasted is None:
            return
        # Adding re-applies the active strategy to every sibling
        self._order = self.destination.get_children()
        self.destination.add(self.pasted)

    def undo(self) -> None:
        if self.pasted is not None:
            self.destination.restore_order(self._order, self.destination.sort_strategy)


class MoveCommand(Command):
    def __init__(self, source_id: str, source_parent: Directory, destination: Directory) -> None:
        super().__init__("Move item")
        self.source_id = source_id
        self.source_parent = source_parent
        self.destination = destination
        self._moved: Optional[Entry] = None
        self._index = -1
        self._order: List[Entry] = []

    def execute(self) -> None:
        self._index = self.source_parent.index_of(self.source_id)
        self._moved = self.source_parent.remove(self.source_id)
        if self._moved is None:
            self.undoable = False
            return
        self._order = self.destination.get_children()
        self.destination.add(self._moved)
        self.name = f"Move item ({self._moved.name})"

    def undo(self) -> None:
        if self._moved is None:
            return
        self.destination.restore_order(self._order, self.destination.sort_strategy)
        self.source_parent.add(self._moved, self._index)
        self._moved = None
