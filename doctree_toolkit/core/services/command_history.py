from __future__ import annotations

"""Undo/redo history of executed commands.

This service is UI-agnostic and keeps the executed commands on two stacks.
Unlike snapshot-based undo, every command carries what it needs to reverse
itself, so undo and redo are exact and cheap.

Design principles
-----------------
- No UI imports and no I/O.
- Redo stack is cleared on every newly executed undoable command (linear
  history, no branching).
- Undo/redo on an empty stack is a no-op returning None.
- Memory usage controlled by an optional max_history cap (trim oldest).
- Every transition is broadcast on the notification channel.
"""

import logging
from typing import List, Optional

from doctree_toolkit.core.notifications import NotificationChannel, NotificationEvent
from doctree_toolkit.core.services.commands import Command

__all__ = ["CommandHistory"]

logger = logging.getLogger(__name__)


class CommandHistory:
    """Invoker maintaining undo and redo stacks.

    Parameters
    ----------
    channel : NotificationChannel, optional
        Channel receiving ``executed`` / ``undone`` / ``redone`` events. A
        private channel is created when omitted.
    max_history : int, optional
        Maximum number of undoable commands to keep. Oldest entries are
        discarded when the capacity is exceeded. ``None`` means unbounded;
        values lower than 1 are coerced to 1.

    Examples
    --------
    >>> history = CommandHistory()
    >>> history.execute(DeleteCommand(file.id, parent))
    >>> history.undo()   # file is back at its former index
    >>> history.redo()   # and deleted again
    """

    def __init__(self, channel: Optional[NotificationChannel] = None, max_history: Optional[int] = None) -> None:
        self.channel = channel if channel is not None else NotificationChannel()
        self._max_history: Optional[int] = None if max_history is None else max(1, int(max_history))
        self._undo_stack: List[Command] = []
        self._redo_stack: List[Command] = []

    # --------------------------------------------------------------------- API

    def execute(self, command: Command) -> Command:
        """Run *command*, record it when undoable and notify subscribers."""
        command.execute()
        if command.undoable:
            self._undo_stack.append(command)
            # New user action invalidates redo history
            self._redo_stack.clear()
            self._trim(self._undo_stack)
        logger.debug("Command executed: %s (undo=%d)", command.name, len(self._undo_stack))
        self._emit("executed", f"[Command] Executed {command.name}", command, command.new_sort_state)
        return command

    def undo(self) -> Optional[Command]:
        """Reverse the most recent command. Returns it, or None if nothing to undo."""
        if not self._undo_stack:
            return None
        command = self._undo_stack.pop()
        command.undo()
        self._redo_stack.append(command)
        logger.debug("Command undone: %s", command.name)
        self._emit("undone", f"[Undo] Reverted {command.name}", command, command.old_sort_state)
        return command

    def redo(self) -> Optional[Command]:
        """Re-apply the most recently undone command. Returns it, or None."""
        if not self._redo_stack:
            return None
        command = self._redo_stack.pop()
        command.execute()
        self._undo_stack.append(command)
        self._trim(self._undo_stack)
        logger.debug("Command redone: %s", command.name)
        self._emit("redone", f"[Redo] Executed {command.name}", command, command.new_sort_state)
        return command

    def can_undo(self) -> bool:
        """Return True if an undo operation is currently possible."""
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        """Return True if a redo operation is currently possible."""
        return bool(self._redo_stack)

    def undo_names(self) -> List[str]:
        """Names of undoable commands, most recent last."""
        return [c.name for c in self._undo_stack]

    def redo_names(self) -> List[str]:
        return [c.name for c in self._redo_stack]

    def clear(self) -> None:
        """Clear both undo and redo histories."""
        self._undo_stack.clear()
        self._redo_stack.clear()

    # --------------------------------------------------------------- Internals

    def _trim(self, stack: List[Command]) -> None:
        if self._max_history is None:
            return
        overflow = len(stack) - self._max_history
        if overflow > 0:
            del stack[0:overflow]

    def _emit(self, kind: str, message: str, command: Command, sort_state) -> None:
        self.channel.notify(
            NotificationEvent(
                source="command",
                type=kind,
                message=message,
                data={"name": command.name, "sort_state": sort_state},
            )
        )
