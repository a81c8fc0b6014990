from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no I/O; they can be used
across all layers of the toolkit.
"""

from datetime import date
import uuid

__all__ = [
    "generate_entry_id",
    "today_iso",
]


def generate_entry_id() -> str:
    """Generate a globally unique ID for a tree entry."""
    return f"entry-{uuid.uuid4().hex}"


def today_iso() -> str:
    """Return today's date as ``YYYY-MM-DD``."""
    return date.today().isoformat()
