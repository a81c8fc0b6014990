from __future__ import annotations

"""Pluggable ordering strategies for directory children.

Every strategy sorts a list in place. Orders are fully reproducible: the
primary key follows the requested direction and ties are always broken by
entry id in ascending order, whatever the direction.

Label ordering places entries without any label after all labelled entries,
in both directions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Literal, Optional

if TYPE_CHECKING:
    from doctree_toolkit.core.models.entries import Entry
    from doctree_toolkit.core.tag_index import TagIndex

__all__ = [
    "Direction",
    "SortState",
    "SortStrategy",
    "AttributeSortStrategy",
    "LabelSortStrategy",
    "make_strategy",
]

Direction = Literal["asc", "desc"]

_ATTRIBUTE_KEYS: Dict[str, Callable[["Entry"], Any]] = {
    "name": lambda e: e.name.casefold(),
    "size": lambda e: e.size,
    "type": lambda e: e.type.value,
    "created": lambda e: e.created,
    "extension": lambda e: e.extension,
}


@dataclass(frozen=True)
class SortState:
    """Attribute and direction of the ordering currently applied."""

    attribute: str = "name"
    direction: Direction = "asc"

    def toggled_for(self, attribute: str) -> "SortState":
        """Return the state produced by requesting a sort on *attribute*.

        Re-sorting by the attribute already sorted ascending flips to
        descending; anything else starts ascending.
        """
        if self.attribute == attribute and self.direction == "asc":
            return SortState(attribute, "desc")
        return SortState(attribute, "asc")


class SortStrategy(ABC):
    """Base strategy holding the sort direction."""

    def __init__(self, direction: Direction = "asc") -> None:
        if direction not in ("asc", "desc"):
            raise ValueError(f"Unsupported sort direction '{direction}'")
        self.direction: Direction = direction

    @property
    def descending(self) -> bool:
        return self.direction == "desc"

    @abstractmethod
    def sort(self, entries: List["Entry"]) -> None:
        """Reorder *entries* in place."""

    @property
    @abstractmethod
    def state(self) -> SortState:
        """Describe this strategy as a :class:`SortState`."""


class AttributeSortStrategy(SortStrategy):
    """Order by a named entry attribute."""

    def __init__(self, attribute: str, direction: Direction = "asc") -> None:
        super().__init__(direction)
        if attribute not in _ATTRIBUTE_KEYS:
            raise ValueError(
                f"Unsupported sort attribute '{attribute}'; expected one of {sorted(_ATTRIBUTE_KEYS)}"
            )
        self.attribute = attribute

    @property
    def state(self) -> SortState:
        return SortState(self.attribute, self.direction)

    def sort(self, entries: List["Entry"]) -> None:
        key = _ATTRIBUTE_KEYS[self.attribute]
        # Two stable passes: id first, then the primary key in the requested direction
        entries.sort(key=lambda e: e.id)
        entries.sort(key=key, reverse=self.descending)

    def __repr__(self) -> str:
        return f"AttributeSortStrategy({self.attribute!r}, {self.direction!r})"


class LabelSortStrategy(SortStrategy):
    """Order by the name of each entry's first attached label."""

    def __init__(self, tag_index: "TagIndex", direction: Direction = "asc") -> None:
        super().__init__(direction)
        self._tag_index = tag_index

    @property
    def state(self) -> SortState:
        return SortState("label", self.direction)

    def _first_label(self, entry: "Entry") -> Optional[str]:
        labels = self._tag_index.get_labels(entry.id)
        return labels[0].name if labels else None

    def sort(self, entries: List["Entry"]) -> None:
        entries.sort(key=lambda e: e.id)
        keyed = [(self._first_label(e), e) for e in entries]
        labelled = [pair for pair in keyed if pair[0] is not None]
        unlabelled = [e for name, e in keyed if name is None]
        labelled.sort(key=lambda pair: pair[0], reverse=self.descending)
        entries[:] = [e for _, e in labelled] + unlabelled

    def __repr__(self) -> str:
        return f"LabelSortStrategy({self.direction!r})"


def make_strategy(
    attribute: str,
    direction: Direction = "asc",
    tag_index: Optional["TagIndex"] = None,
) -> SortStrategy:
    """Build the strategy for *attribute*; ``"label"`` needs a tag index."""
    if attribute == "label":
        if tag_index is None:
            raise ValueError("Label ordering requires a TagIndex")
        return LabelSortStrategy(tag_index, direction)
    return AttributeSortStrategy(attribute, direction)
