from __future__ import annotations

"""Observer wrappers that restyle event messages.

Each decorator implements the observer contract, rewrites the message of
matching events and forwards a copy to the wrapped observer. Only the
message text differs between the received and the forwarded event, so
decorators can be stacked in any order::

    observer = BoldDecorator(IconDecorator(console, "[Undo]", "<-"), "Delete")
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Sequence, Union

from doctree_toolkit.core.notifications import NotificationEvent, Observer

__all__ = [
    "ObserverDecorator",
    "HighlightDecorator",
    "IconDecorator",
    "BoldDecorator",
]

Keywords = Union[str, Sequence[str]]


class ObserverDecorator(ABC):
    """Base wrapper holding the next observer and the keyword matcher."""

    def __init__(self, wrapped: Observer, keyword: Keywords) -> None:
        self.wrapped = wrapped
        self._keywords = (keyword,) if isinstance(keyword, str) else tuple(keyword)

    def is_match(self, message: str) -> bool:
        return any(kw in message for kw in self._keywords)

    def update(self, event: NotificationEvent) -> None:
        if self.is_match(event.message):
            event = replace(event, message=self.decorate(event.message))
        self.wrapped.update(event)

    @abstractmethod
    def decorate(self, message: str) -> str:
        """Return the restyled message."""


class HighlightDecorator(ObserverDecorator):
    """Wrap matching messages in a styled span."""

    def __init__(self, wrapped: Observer, keyword: Keywords, style: str) -> None:
        super().__init__(wrapped, keyword)
        self.style = style

    def decorate(self, message: str) -> str:
        return f'<span class="{self.style}">{message}</span>'


class IconDecorator(ObserverDecorator):
    """Prefix matching messages with an icon."""

    def __init__(self, wrapped: Observer, keyword: Keywords, icon: str) -> None:
        super().__init__(wrapped, keyword)
        self.icon = icon

    def decorate(self, message: str) -> str:
        return f"{self.icon} {message}"


class BoldDecorator(ObserverDecorator):
    def decorate(self, message: str) -> str:
        return f"<strong>{message}</strong>"
