from __future__ import annotations

"""Exception classes for the explorer core.

Ordinary UI-driven misuse (unknown ids, empty clipboard, empty history) never
raises; the services report it through ``OperationResult`` or ``None``. The
classes below are reserved for programming errors that should fail loudly.
"""

from typing import Optional


class DoctreeError(Exception):
    """Base exception for all explorer core errors."""

    def __init__(self, message: str, entry_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.entry_id = entry_id

    def __str__(self) -> str:
        if self.entry_id:
            return f"[Entry: {self.entry_id}] {super().__str__()}"
        return super().__str__()


class SingletonViolationError(DoctreeError):
    """Raised when a process-wide object is constructed a second time.

    Indicates that a caller bypassed the accessor function.
    """
    pass


class UnhandledEntryError(DoctreeError):
    """Raised when a traversal meets an entry kind it has no handler for."""
    pass


class UnsafeFragmentError(DoctreeError):
    """Raised when an export hook returns raw text instead of a SafeFragment.

    Export hooks must build their output through ``ExportTemplate.format`` so
    that every interpolated value is escaped.
    """
    pass
