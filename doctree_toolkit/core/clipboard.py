from __future__ import annotations

"""Process-wide clipboard holding at most one pending entry.

Public API:
- get_clipboard() -> Clipboard singleton for the process
- Clipboard.set(entry) / Clipboard.get() / Clipboard.clear()
- Clipboard.has_content() -> bool

``get`` always returns a fresh deep clone, so two consecutive pastes never
share subtree identity. Constructing :class:`Clipboard` directly while the
process instance exists raises :class:`SingletonViolationError`.
"""

import logging
from typing import Optional

from doctree_toolkit.core.exceptions import SingletonViolationError
from doctree_toolkit.core.models.entries import Entry
from doctree_toolkit.core.notifications import NotificationChannel, NotificationEvent

__all__ = ["get_clipboard", "Clipboard"]

logger = logging.getLogger(__name__)


class Clipboard:
    """Single holder of one copied entry."""

    _instance: Optional["Clipboard"] = None

    def __init__(self) -> None:
        if Clipboard._instance is not None:
            raise SingletonViolationError(
                "Clipboard already exists; use get_clipboard() or Clipboard.get_instance()"
            )
        Clipboard._instance = self
        self._content: Optional[Entry] = None
        self.channel = NotificationChannel()

    @classmethod
    def get_instance(cls) -> "Clipboard":
        if cls._instance is None:
            cls()
        return cls._instance  # type: ignore[return-value]

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the process instance so the next accessor call builds a new one."""
        cls._instance = None

    def set(self, entry: Entry) -> None:
        """Replace the clipboard content with *entry*."""
        self._content = entry
        logger.debug("Clipboard set: %s", entry.name)
        self.channel.notify(
            NotificationEvent(
                source="clipboard",
                type="set",
                message=f"[Clipboard] Copied: {entry.name}",
                data={"name": entry.name},
            )
        )

    def get(self) -> Optional[Entry]:
        """Return a deep clone of the content, or None when empty."""
        if self._content is None:
            return None
        return self._content.clone()

    def has_content(self) -> bool:
        return self._content is not None

    def clear(self) -> None:
        self._content = None
        self.channel.notify(
            NotificationEvent(source="clipboard", type="cleared", message="[Clipboard] Cleared")
        )


def get_clipboard() -> Clipboard:
    return Clipboard.get_instance()
