import logging

import pytest

from doctree_toolkit.config import ConfigManager
from doctree_toolkit.logging_config import setup_logging

_WATCHED = (
    "",
    "doctree_toolkit",
    "doctree_toolkit.core.services.command_history",
    "doctree_toolkit.core.services.explorer_service",
    "tests.debug.target",
)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the global logging changes made by setup_logging."""
    saved = {}
    for name in _WATCHED:
        lg = logging.getLogger(name)
        saved[name] = (lg.level, set(lg.handlers), lg.propagate)
    yield
    for name, (level, handlers, propagate) in saved.items():
        lg = logging.getLogger(name)
        for handler in list(lg.handlers):
            # pytest manages its own capture handlers per test phase
            if handler not in handlers and not type(handler).__module__.startswith("_pytest"):
                lg.removeHandler(handler)
                handler.close()
        lg.setLevel(level)
        lg.propagate = propagate


@pytest.fixture
def log_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCTREE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("DOCTREE_DEBUG_COMMANDS", raising=False)
    monkeypatch.delenv("DOCTREE_DEBUG_MODULES", raising=False)
    return tmp_path / "logs"


def test_file_handler_written_to_log_dir(log_dir):
    setup_logging()
    assert (log_dir / "app.log").exists()
    handlers = logging.getLogger("doctree_toolkit").handlers
    assert any(isinstance(h, logging.FileHandler) for h in handlers)


def test_packaged_config_not_mutated(log_dir):
    setup_logging()
    filename = ConfigManager().get_logging_config()["handlers"]["file"]["filename"]
    assert filename == "logs/app.log"


def test_debug_overrides(log_dir, monkeypatch):
    monkeypatch.setenv("DOCTREE_DEBUG_COMMANDS", "true")
    monkeypatch.setenv("DOCTREE_DEBUG_MODULES", "tests.debug.target, ")
    setup_logging()
    assert logging.getLogger("doctree_toolkit.core.services.command_history").level == logging.DEBUG
    assert logging.getLogger("tests.debug.target").level == logging.DEBUG


def test_minimal_fallback(log_dir, monkeypatch):
    monkeypatch.setattr(ConfigManager, "get_logging_config", lambda self: {})
    setup_logging()
    assert logging.getLogger().level == logging.INFO
