from __future__ import annotations

"""Shared label objects and the cache handing them out.

A :class:`Label` is immutable. The :class:`LabelCache` guarantees that every
request for the same name returns the *same* instance, so callers may compare
labels with ``is``.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from doctree_toolkit.config import ConfigManager

__all__ = ["Label", "LabelCache"]

_FALLBACK_COLOR = "bg-slate-500"


@dataclass(frozen=True)
class Label:
    """Tag that can be attached to entries.

    Attributes
    ----------
    name
        Unique key of the label.
    color
        Display token (CSS class) used by the presentation layer.
    """

    name: str
    color: str


class LabelCache:
    """Keyed registry returning one shared :class:`Label` per name.

    Parameters
    ----------
    colors
        Name to colour table. When omitted, the ``colors`` table of
        ``label_colors.yml`` is used.
    default_color
        Colour for names missing from the table. When omitted, the configured
        ``default_color`` is used.
    """

    def __init__(
        self,
        colors: Optional[Mapping[str, str]] = None,
        default_color: Optional[str] = None,
    ) -> None:
        if colors is None or default_color is None:
            cfg = ConfigManager().get_label_colors()
            if colors is None:
                colors = cfg.get("colors") or {}
            if default_color is None:
                default_color = cfg.get("default_color") or _FALLBACK_COLOR
        self._colors: Dict[str, str] = dict(colors)
        self._default_color: str = default_color
        self._labels: Dict[str, Label] = {}

    def get_label(self, name: str) -> Label:
        """Return the cached label for *name*, creating it on first use."""
        label = self._labels.get(name)
        if label is None:
            label = Label(name, self._colors.get(name, self._default_color))
            self._labels[name] = label
        return label

    def clear(self) -> None:
        self._labels.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._labels

    def __len__(self) -> int:
        return len(self._labels)
