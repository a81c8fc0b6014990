from __future__ import annotations

"""Application context wiring the explorer's shared collaborators.

The AppContext is an explicitly constructed container handed to the
:class:`ExplorerService`. It replaces module-level globals so that tests can
build fresh, isolated contexts while the application builds exactly one.
"""

import logging
from typing import Any, Dict, Optional

from doctree_toolkit.config import ConfigManager
from doctree_toolkit.core.clipboard import Clipboard, get_clipboard
from doctree_toolkit.core.models.labels import LabelCache
from doctree_toolkit.core.notifications import NotificationChannel
from doctree_toolkit.core.services.command_history import CommandHistory
from doctree_toolkit.core.tag_index import TagIndex

logger = logging.getLogger(__name__)

__all__ = ["AppContext"]


class AppContext:
    """Holds the label cache, tag index, command history and clipboard.

    Every argument is optional; missing collaborators are built from the
    configuration. The clipboard defaults to the process instance returned by
    :func:`get_clipboard`.

    Args:
        label_cache: Shared label registry
        tag_index: Bidirectional entry/label index
        history: Command invoker with undo/redo stacks
        clipboard: Clipboard holding the copied entry
        channel: Channel on which command transitions are broadcast
        settings: Explorer settings overriding ``explorer.yml``
    """

    def __init__(
        self,
        label_cache: Optional[LabelCache] = None,
        tag_index: Optional[TagIndex] = None,
        history: Optional[CommandHistory] = None,
        clipboard: Optional[Clipboard] = None,
        channel: Optional[NotificationChannel] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.settings: Dict[str, Any] = dict(ConfigManager().get_explorer_settings())
        if settings:
            self.settings.update(settings)

        if tag_index is not None:
            self.tag_index = tag_index
            self.label_cache = label_cache or tag_index.label_cache
        else:
            self.label_cache = label_cache or LabelCache()
            self.tag_index = TagIndex(self.label_cache)

        if history is not None:
            self.history = history
            self.channel = history.channel
        else:
            self.channel = channel if channel is not None else NotificationChannel()
            self.history = CommandHistory(self.channel, self.settings.get("max_history"))

        self.clipboard = clipboard if clipboard is not None else get_clipboard()
        logger.debug("AppContext initialized (max_history=%s)", self.settings.get("max_history"))

    def get_context_stats(self) -> Dict[str, Any]:
        """Get context statistics for debugging."""
        return {
            "labels_cached": len(self.label_cache),
            "tagged_pairs": len(self.tag_index.pairs()),
            "can_undo": self.history.can_undo(),
            "can_redo": self.history.can_redo(),
            "clipboard_has_content": self.clipboard.has_content(),
            "subscribers": len(self.channel),
        }
