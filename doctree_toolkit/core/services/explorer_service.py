from __future__ import annotations

"""Facade exposing task-level explorer operations to the presentation layer.

This module provides a UI-agnostic, testable service that wires the entry
tree, the tag index, the command history, the clipboard and the traversals
into the calls a file-explorer front-end needs.

Scope and guarantees:
- Operates purely in-memory on the entry tree, no file I/O nor UI imports.
- Conservative behavior with boundary checks; invalid operations return
  OperationResult(success=False, ...) with clear messaging, never raise.
- Analyses (search, export, size) are coroutines. They are serialised by a
  lock, and mutations requested while one is running are refused.

Examples
--------
Basic usage:

    service = ExplorerService(root)
    result = service.delete_item("f1")
    if not result.success:
        print(result.message)
    ids = asyncio.run(service.search_files("report"))

"""

import asyncio
from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Optional

from doctree_toolkit.core.clipboard import Clipboard
from doctree_toolkit.core.context import AppContext
from doctree_toolkit.core.models.entries import Directory, Entry
from doctree_toolkit.core.models.labels import Label
from doctree_toolkit.core.notifications import NotificationChannel, NotificationEvent, Observer
from doctree_toolkit.core.services.command_history import CommandHistory
from doctree_toolkit.core.services.commands import (
    CopyCommand,
    DeleteCommand,
    MoveCommand,
    PasteCommand,
    SortCommand,
    TagCommand,
)
from doctree_toolkit.core.sorting import Direction, SortState, make_strategy
from doctree_toolkit.core.tag_index import TagIndex
from doctree_toolkit.core.traversal import (
    FinderTraversal,
    MarkdownExporter,
    SearchTraversal,
    StatisticsResults,
    StatisticsTraversal,
    Traversal,
    XmlExporter,
    count_nodes,
)

__all__ = ["OperationResult", "ExplorerService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of a mutating explorer operation.

    Attributes
    ----------
    success
        Whether the operation changed anything.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None


class _BufferObserver:
    def __init__(self, buffer: List[NotificationEvent]) -> None:
        self._buffer = buffer

    def update(self, event: NotificationEvent) -> None:
        self._buffer.append(event)


class ExplorerService:
    """Single entry point for the explorer front-end.

    Parameters
    ----------
    root
        Root directory of the tree. It can never be deleted or moved.
    app_context
        Shared collaborators; a fresh :class:`AppContext` is built when omitted.
    """

    def __init__(self, root: Directory, app_context: Optional[AppContext] = None) -> None:
        self.root = root
        self._ctx = app_context if app_context is not None else AppContext()
        self._busy = False
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    # -------------------------------------------------------------------------
    # Collaborators
    # -------------------------------------------------------------------------

    @property
    def context(self) -> AppContext:
        return self._ctx

    @property
    def tag_index(self) -> TagIndex:
        return self._ctx.tag_index

    @property
    def history(self) -> CommandHistory:
        return self._ctx.history

    @property
    def clipboard(self) -> Clipboard:
        return self._ctx.clipboard

    def subscribe(self, observer: Observer) -> None:
        """Receive command and clipboard notifications."""
        self._ctx.channel.subscribe(observer)
        self._ctx.clipboard.channel.subscribe(observer)

    def unsubscribe(self, observer: Observer) -> None:
        self._ctx.channel.unsubscribe(observer)
        self._ctx.clipboard.channel.unsubscribe(observer)

    @property
    def busy(self) -> bool:
        """True while an analysis coroutine is running."""
        return self._busy

    # -------------------------------------------------------------------------
    # Analyses (async)
    # -------------------------------------------------------------------------

    async def calculate_size(self, observers: Iterable[Observer] = ()) -> int:
        """Return the total size in KB of every file under the root."""
        traversal = StatisticsTraversal()
        await self._run_traversal(traversal, "SIZE", observers)
        return traversal.total_size

    async def get_detailed_stats(
        self, group_by_extension: bool = True, observers: Iterable[Observer] = ()
    ) -> StatisticsResults:
        traversal = StatisticsTraversal(group_by_extension)
        await self._run_traversal(traversal, "STATS", observers)
        return traversal.results()

    async def search_files(self, keyword: str, observers: Iterable[Observer] = ()) -> List[str]:
        """Return ids of files whose name contains *keyword* (case-insensitive)."""
        traversal = SearchTraversal(keyword)
        await self._run_traversal(traversal, "SEARCH", observers)
        return list(traversal.found_ids)

    async def export_xml(self, observers: Iterable[Observer] = ()) -> str:
        exporter = XmlExporter(int(self._ctx.settings.get("xml_indent", 2)))
        await self._run_traversal(exporter, "XML", observers)
        return exporter.result()

    async def export_markdown(self, observers: Iterable[Observer] = ()) -> str:
        exporter = MarkdownExporter(int(self._ctx.settings.get("markdown_indent", 2)))
        await self._run_traversal(exporter, "MARKDOWN", observers)
        return exporter.result()

    def _traversal_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def _run_traversal(self, traversal: Traversal, type_name: str, observers: Iterable[Observer]) -> None:
        """Walk the tree, then replay the collected progress to *observers*.

        The walk itself is synchronous; replaying yields to the event loop
        between events so a host UI can paint progress.
        """
        delay = float(self._ctx.settings.get("progress_delay") or 0.0)
        async with self._traversal_lock():
            self._busy = True
            try:
                total = self.total_items()
                buffer: List[NotificationEvent] = []
                traversal.channel.subscribe(_BufferObserver(buffer))
                traversal.walk(self.root, total)
                logger.debug("Traversal %s visited %d/%d nodes", type_name, traversal.processed, total)

                outlet = NotificationChannel()
                for observer in observers:
                    outlet.subscribe(observer)
                if not buffer or not len(outlet):
                    return
                outlet.notify(
                    NotificationEvent(
                        source="system",
                        type="progress",
                        message=f"[System] Starting {type_name}...",
                        data={"total": total},
                    )
                )
                for event in buffer:
                    outlet.notify(event)
                    await asyncio.sleep(delay)
            finally:
                self._busy = False

    # -------------------------------------------------------------------------
    # Command operations
    # -------------------------------------------------------------------------

    def _refuse_if_busy(self, operation: str) -> Optional[OperationResult]:
        if self._busy:
            logger.warning("Edit FAIL: %s refused while an analysis is running", operation)
            return OperationResult(False, "Another operation is in progress.", {"reason": "busy"})
        return None

    def undo(self) -> OperationResult:
        refused = self._refuse_if_busy("undo")
        if refused:
            return refused
        command = self.history.undo()
        if command is None:
            return OperationResult(False, "Nothing to undo.")
        logger.info("Edit OK: undo %s", command.name)
        return OperationResult(True, f"Undid {command.name}.", {"name": command.name, "sort_state": command.old_sort_state})

    def redo(self) -> OperationResult:
        refused = self._refuse_if_busy("redo")
        if refused:
            return refused
        command = self.history.redo()
        if command is None:
            return OperationResult(False, "Nothing to redo.")
        logger.info("Edit OK: redo %s", command.name)
        return OperationResult(True, f"Redid {command.name}.", {"name": command.name, "sort_state": command.new_sort_state})

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def tag_item(self, entry_id: str, label_name: str) -> OperationResult:
        logger.info("Edit: tag_item id=%s label=%s", entry_id, label_name)
        refused = self._refuse_if_busy("tag_item")
        if refused:
            return refused
        if self.find_item(entry_id) is None:
            logger.warning("Edit FAIL: tag_item entry_not_found id=%s", entry_id)
            return OperationResult(False, f"Entry not found for id '{entry_id}'.", {"entry_id": entry_id})
        if self.tag_index.has(entry_id, label_name):
            logger.info("Edit noop: tag_item already tagged id=%s label=%s", entry_id, label_name)
            return OperationResult(False, f"Entry already tagged '{label_name}'.", {"entry_id": entry_id})
        self.history.execute(TagCommand(self.tag_index, entry_id, label_name, attach=True))
        return OperationResult(True, f"Tagged with '{label_name}'.", {"entry_id": entry_id, "label": label_name})

    def remove_tag(self, entry_id: str, label_name: str) -> OperationResult:
        logger.info("Edit: remove_tag id=%s label=%s", entry_id, label_name)
        refused = self._refuse_if_busy("remove_tag")
        if refused:
            return refused
        if not self.tag_index.has(entry_id, label_name):
            logger.info("Edit noop: remove_tag not tagged id=%s label=%s", entry_id, label_name)
            return OperationResult(False, f"Entry is not tagged '{label_name}'.", {"entry_id": entry_id})
        self.history.execute(TagCommand(self.tag_index, entry_id, label_name, attach=False))
        return OperationResult(True, f"Removed tag '{label_name}'.", {"entry_id": entry_id, "label": label_name})

    def delete_item(self, entry_id: str) -> OperationResult:
        logger.info("Edit: delete_item id=%s", entry_id)
        refused = self._refuse_if_busy("delete_item")
        if refused:
            return refused
        if entry_id == self.root.id:
            logger.warning("Edit FAIL: delete_item root refused")
            return OperationResult(False, "The root directory cannot be deleted.", {"entry_id": entry_id})
        parent = self.find_parent(entry_id)
        if parent is None:
            logger.info("Edit noop: delete_item entry_not_found id=%s", entry_id)
            return OperationResult(False, f"Entry not found for id '{entry_id}'.", {"entry_id": entry_id})
        self.history.execute(DeleteCommand(entry_id, parent))
        logger.info("Edit OK: delete_item id=%s parent=%s", entry_id, parent.id)
        return OperationResult(True, "Deleted item.", {"entry_id": entry_id, "parent_id": parent.id})

    def copy_item(self, entry_id: str) -> OperationResult:
        logger.info("Edit: copy_item id=%s", entry_id)
        entry = self.find_item(entry_id)
        if entry is None:
            return OperationResult(False, f"Entry not found for id '{entry_id}'.", {"entry_id": entry_id})
        self.history.execute(CopyCommand(entry, self.clipboard))
        return OperationResult(True, f"Copied '{entry.name}'.", {"entry_id": entry_id})

    def paste_item(self, target_id: Optional[str] = None) -> OperationResult:
        """Paste the clipboard content into *target_id*.

        A directory target receives the paste; a file target pastes into its
        parent; no target pastes into the root.
        """
        logger.info("Edit: paste_item target=%s", target_id)
        refused = self._refuse_if_busy("paste_item")
        if refused:
            return refused
        if not self.clipboard.has_content():
            logger.info("Edit noop: paste_item clipboard empty")
            return OperationResult(False, "Clipboard is empty.", {"reason": "empty_clipboard"})

        destination: Optional[Directory] = None
        target = self.root if target_id is None else self.find_item(target_id)
        if isinstance(target, Directory):
            destination = target
        elif target is not None:
            destination = self.find_parent(target.id)
        if destination is None:
            logger.warning("Edit FAIL: paste_item target_not_found target=%s", target_id)
            return OperationResult(False, f"Paste target not found for id '{target_id}'.", {"target_id": target_id})

        command = self.history.execute(PasteCommand(destination, self.clipboard))
        pasted = command.pasted  # type: ignore[attr-defined]
        logger.info("Edit OK: paste_item destination=%s", destination.id)
        return OperationResult(
            True,
            "Pasted item.",
            {"destination_id": destination.id, "entry_id": pasted.id if pasted is not None else None},
        )

    def move_item(self, source_id: str, destination_id: str) -> OperationResult:
        """Move an entry into another directory."""
        logger.info("Edit: move_item source=%s destination=%s", source_id, destination_id)
        refused = self._refuse_if_busy("move_item")
        if refused:
            return refused
        if source_id == destination_id:
            return OperationResult(False, "Cannot move an item into itself.", {"source_id": source_id})
        if source_id == self.root.id:
            logger.warning("Edit FAIL: move_item root refused")
            return OperationResult(False, "The root directory cannot be moved.", {"source_id": source_id})

        source = self.find_item(source_id)
        source_parent = self.find_parent(source_id)
        destination = self.find_item(destination_id)
        if source is None or source_parent is None or destination is None:
            logger.info("Edit noop: move_item entry_not_found source=%s destination=%s", source_id, destination_id)
            return OperationResult(False, "Source or destination not found.", {"source_id": source_id, "destination_id": destination_id})
        if not isinstance(destination, Directory):
            return OperationResult(False, "Destination is not a directory.", {"destination_id": destination_id})
        if source_parent is destination:
            return OperationResult(False, "Item is already in that directory.", {"destination_id": destination_id})
        if isinstance(source, Directory):
            # A directory cannot be moved below itself
            finder = FinderTraversal(destination_id).walk(source)
            if finder.found is not None:
                return OperationResult(False, "Cannot move a directory into its own subtree.", {"destination_id": destination_id})

        self.history.execute(MoveCommand(source_id, source_parent, destination))
        logger.info("Edit OK: move_item source=%s destination=%s", source_id, destination_id)
        return OperationResult(True, "Moved item.", {"source_id": source_id, "destination_id": destination_id})

    def sort_items(
        self,
        attribute: str,
        current_state: Optional[SortState] = None,
        target_id: Optional[str] = None,
        direction: Optional[Direction] = None,
    ) -> Optional[SortState]:
        """Sort *target_id* (default: root) and every sub-directory.

        Without an explicit *direction*, requesting the attribute currently
        sorted ascending flips to descending; anything else sorts ascending.
        Returns the new sort state, or *current_state* when nothing was done.
        """
        logger.info("Edit: sort_items attribute=%s target=%s", attribute, target_id)
        if self._busy:
            logger.warning("Edit FAIL: sort_items refused while an analysis is running")
            return current_state
        target = self.root if target_id is None else self.find_item(target_id)
        if not isinstance(target, Directory):
            logger.info("Edit noop: sort_items target_not_directory target=%s", target_id)
            return current_state

        if direction is not None:
            next_state = SortState(attribute, direction)
        elif current_state is not None:
            next_state = current_state.toggled_for(attribute)
        else:
            next_state = SortState(attribute, "asc")

        try:
            strategy = make_strategy(next_state.attribute, next_state.direction, self.tag_index)
        except ValueError as exc:
            logger.warning("Edit FAIL: sort_items %s", exc)
            return current_state
        self.history.execute(SortCommand(target, strategy, old_state=current_state))
        logger.info("Edit OK: sort_items %s %s", next_state.attribute, next_state.direction)
        return next_state

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find_item(self, entry_id: str) -> Optional[Entry]:
        return FinderTraversal(entry_id).walk(self.root).found

    def find_parent(self, entry_id: str) -> Optional[Directory]:
        if entry_id == self.root.id:
            return None
        return FinderTraversal(entry_id).walk(self.root).parent

    def total_items(self) -> int:
        return count_nodes(self.root)

    def get_labels(self, entry_id: str) -> List[Label]:
        return self.tag_index.get_labels(entry_id)

    def get_files(self, label_name: str) -> List[str]:
        return self.tag_index.get_files(label_name)

    def get_clipboard_status(self) -> bool:
        return self.clipboard.has_content()
