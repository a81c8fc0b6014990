"""Shared fixtures for the doctree_toolkit test-suite.

Every test gets a fresh clipboard singleton and, through the ``tree``
fixture, the same small reference tree::

    root/
      dirA/
        report.pdf   (500 KB, id "file1")
        photo.png    (2048 KB, id "file2")
"""

import os
import sys
from types import SimpleNamespace

import pytest

# Ensure project root is importable when running pytest from repository root
_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from doctree_toolkit.core.clipboard import Clipboard
from doctree_toolkit.core.context import AppContext
from doctree_toolkit.core.models import Directory, Document, Image, LabelCache
from doctree_toolkit.core.services.explorer_service import ExplorerService

LABEL_COLORS = {
    "Urgent": "bg-red-500",
    "Work": "bg-blue-500",
    "Personal": "bg-green-500",
}


@pytest.fixture(autouse=True)
def fresh_clipboard():
    """Drop the process clipboard before and after each test."""
    Clipboard.reset_instance()
    yield
    Clipboard.reset_instance()


@pytest.fixture
def tree():
    root = Directory("root", created="2024-01-01", entry_id="root")
    dir_a = Directory("dirA", created="2024-01-02", entry_id="dirA")
    file1 = Document("report.pdf", 500, created="2024-01-03", pages=3, entry_id="file1")
    file2 = Image("photo.png", 2048, created="2024-01-04", width=1920, height=1080, entry_id="file2")
    dir_a.add(file1)
    dir_a.add(file2)
    root.add(dir_a)
    return SimpleNamespace(root=root, dir_a=dir_a, file1=file1, file2=file2)


@pytest.fixture
def label_cache():
    return LabelCache(LABEL_COLORS, "bg-slate-500")


@pytest.fixture
def app_context(label_cache):
    return AppContext(
        label_cache=label_cache,
        clipboard=Clipboard.get_instance(),
        settings={"max_history": 100, "progress_delay": 0.0, "xml_indent": 2, "markdown_indent": 2},
    )


@pytest.fixture
def service(tree, app_context):
    return ExplorerService(tree.root, app_context)


class RecordingObserver:
    """Observer storing every received event."""

    def __init__(self):
        self.events = []

    def update(self, event):
        self.events.append(event)

    @property
    def messages(self):
        return [e.message for e in self.events]


@pytest.fixture
def recorder():
    return RecordingObserver()


@pytest.fixture
def recorder_factory():
    return RecordingObserver
