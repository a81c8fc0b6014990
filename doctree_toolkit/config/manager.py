from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises the declarative settings of the explorer core (label
colour table, history cap, export indentation, logging). It loads YAML files
packaged with *doctree_toolkit* and optionally merges them with user overrides.

Override directory: ``$DOCTREE_CONFIG_DIR`` when set, otherwise
``~/.doctree_toolkit/``. Overrides are read only; nothing is written back.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Return the directory searched for user override files."""
    override = os.environ.get("DOCTREE_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".doctree_toolkit"


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):  # type: ignore[no-self-use]
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "label_colors": "label_colors.yml",
        "explorer": "explorer.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_label_colors(self) -> Dict[str, Any]:
        return self._data.get("label_colors", {})

    def get_explorer_settings(self) -> Dict[str, Any]:
        return self._data.get("explorer", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    def reload(self) -> None:
        """Drop cached sections and read the files again."""
        self._data = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        user_config_dir = _get_user_config_dir()
        defaults = self._builtin_defaults()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = dict(defaults[key])
            status = "missing"

            # 1. load packaged default
            try:
                text = pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")
                packaged_data = yaml.safe_load(text) or {}
                merged_cfg.update(packaged_data)
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))

    @staticmethod
    def _builtin_defaults() -> Dict[str, Dict[str, Any]]:
        """Return the values used when a packaged file cannot be read."""
        return {
            "label_colors": {"colors": {}, "default_color": "bg-slate-500"},
            "explorer": {
                "max_history": 100,
                "progress_delay": 0.0,
                "xml_indent": 2,
                "markdown_indent": 4,
            },
            "logging": {},
        }
