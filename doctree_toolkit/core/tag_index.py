from __future__ import annotations

"""Bidirectional index between entry ids and label names.

The index keeps two maps, entry-id -> label names and label-name -> entry ids.
Both always contain exactly the same pairs; empty buckets are dropped so that
the symmetry holds for the key sets too. Buckets are dicts used as ordered
sets, which keeps lookups O(1) and results in insertion order.
"""

from typing import Dict, List, Optional, Tuple

from doctree_toolkit.core.models.labels import Label, LabelCache

__all__ = ["TagIndex"]


class TagIndex:
    """Mediates tag attachments between entries and shared labels."""

    def __init__(self, label_cache: Optional[LabelCache] = None) -> None:
        self._cache = label_cache if label_cache is not None else LabelCache()
        self._labels_by_entry: Dict[str, Dict[str, None]] = {}
        self._entries_by_label: Dict[str, Dict[str, None]] = {}

    @property
    def label_cache(self) -> LabelCache:
        return self._cache

    def attach(self, entry_id: str, label_name: str) -> bool:
        """Attach *label_name* to *entry_id*.

        Returns True when the pair was added, False if it already existed.
        """
        if self.has(entry_id, label_name):
            return False
        self._cache.get_label(label_name)
        self._labels_by_entry.setdefault(entry_id, {})[label_name] = None
        self._entries_by_label.setdefault(label_name, {})[entry_id] = None
        return True

    def detach(self, entry_id: str, label_name: str) -> bool:
        """Detach *label_name* from *entry_id*.

        Returns True when the pair was removed, False if it was absent.
        """
        if not self.has(entry_id, label_name):
            return False
        self._discard(self._labels_by_entry, entry_id, label_name)
        self._discard(self._entries_by_label, label_name, entry_id)
        return True

    def has(self, entry_id: str, label_name: str) -> bool:
        return label_name in self._labels_by_entry.get(entry_id, {})

    def get_labels(self, entry_id: str) -> List[Label]:
        """Return the shared Label objects attached to *entry_id*."""
        names = self._labels_by_entry.get(entry_id, {})
        return [self._cache.get_label(name) for name in names]

    def get_files(self, label_name: str) -> List[str]:
        """Return the ids of all entries carrying *label_name*."""
        return list(self._entries_by_label.get(label_name, {}))

    def label_names(self) -> List[str]:
        """Return every label name currently attached to at least one entry."""
        return list(self._entries_by_label)

    def pairs(self) -> List[Tuple[str, str]]:
        """Return every (entry_id, label_name) pair, grouped by entry."""
        return [(eid, name) for eid, names in self._labels_by_entry.items() for name in names]

    def clear(self) -> None:
        self._labels_by_entry.clear()
        self._entries_by_label.clear()

    @staticmethod
    def _discard(mapping: Dict[str, Dict[str, None]], key: str, member: str) -> None:
        bucket = mapping.get(key)
        if bucket is None:
            return
        bucket.pop(member, None)
        if not bucket:
            del mapping[key]
