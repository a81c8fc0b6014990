"""Progress observer translating traversal events for a dashboard callback."""

from typing import Any, Callable, Dict, Optional

from doctree_toolkit.core.notifications import NotificationEvent

ProgressCallback = Callable[[Dict[str, Any]], None]


class ProgressService:
    """Observer adapting progress events to a ``callback(stats)`` function.

    The callback receives ``{"name", "count", "total", "type"}`` instead of a
    raw event, so a progress display never has to know the event shape.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None, total: Optional[int] = None):
        """Initialize the progress service."""
        self._callback = callback
        self._total = total

    def set_callback(self, callback: Optional[ProgressCallback]) -> None:
        """Set the current progress callback."""
        self._callback = callback

    def update(self, event: NotificationEvent) -> None:
        """Send progress update if callback is available."""
        if self._callback is None:
            return
        payload = event.data or {}
        self._callback({
            "name": payload.get("current_node") or "-",
            "count": payload.get("count") or 0,
            "total": self._total if self._total is not None else payload.get("total") or 0,
            "type": payload.get("node_type") or "-",
        })
