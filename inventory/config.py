"""
Configuration management for the inventory store.
Handles storage location, SQLite settings and logging preferences.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from inventory.constants import APP_DIR_NAME, DATA_DIR_ENV_VAR, JOURNAL_MODES

logger = logging.getLogger(__name__)


def get_app_dir() -> Path:
    """
    Get the application directory.

    Returns:
        Path to the application directory (~/.inventory/)
    """
    app_dir = Path.home() / APP_DIR_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class Config:
    """
    Application configuration with JSON persistence.

    Key ideas:
    - "storage" selects where the item database lives and how SQLite journals.
    - "logging" holds the debug flag used by setup_logging().
    - The backing store is a JSON file on disk (user config file).
    """

    # NOTE: This structure is treated as immutable. Always use
    # _default_config_deepcopy() when you need a fresh copy of defaults.
    DEFAULT_CONFIG: Dict[str, Any] = {
        "storage": {
            # None = <app dir>/data
            "data_dir": None,
            "journal_mode": "WAL",
        },
        "logging": {
            "debug": False,
        },
    }

    def __init__(self, config_file: Optional[Path] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_file: Optional path to config JSON file. When omitted,
                         the default path under ~/.inventory/config.json
                         is used.
        """
        self.config_file: Path = self._resolve_config_path(config_file)
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        self.data: Dict[str, Any] = self._load()
        logger.info(f"Config loaded from {self.config_file}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_config_path(config_file: Optional[Path]) -> Path:
        if config_file is not None:
            return config_file
        return Path.home() / APP_DIR_NAME / "config.json"

    def _load(self) -> Dict[str, Any]:
        """Load configuration from JSON file, merging with defaults."""
        if self.config_file.exists():
            try:
                with self.config_file.open("r", encoding="utf-8") as f:
                    raw = json.load(f)

                merged = self._merge_with_defaults(raw)
                logger.info("Configuration loaded successfully")
                return merged
            except (OSError, ValueError) as exc:
                logger.error(f"Failed to load config: {exc}. Using defaults.")
                return self._default_config_deepcopy()
        else:
            logger.info("No config file found, using defaults")
            return self._default_config_deepcopy()

    @classmethod
    def _default_config_deepcopy(cls) -> Dict[str, Any]:
        return copy.deepcopy(cls.DEFAULT_CONFIG)

    def _merge_with_defaults(self, user_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge user config with defaults to handle new keys.

        Nested section dictionaries are merged so new keys under e.g.
        "storage" appear without discarding user-provided values.
        """
        merged = self._default_config_deepcopy()

        for key, value in user_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key].update(value)
            else:
                merged[key] = value

        return merged

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Persist the current configuration to the config file."""
        try:
            with self.config_file.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, ensure_ascii=False)
            logger.info("Configuration saved")
        except OSError as exc:
            logger.error(f"Failed to save config: {exc}")

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        """
        Directory holding the item database.

        Resolution order: INVENTORY_DATA_DIR env var, storage.data_dir,
        then <config dir>/data.
        """
        env_dir = os.environ.get(DATA_DIR_ENV_VAR)
        if env_dir:
            return Path(env_dir)

        configured = self.data["storage"].get("data_dir")
        if configured:
            return Path(configured).expanduser()

        return self.config_file.parent / "data"

    @data_dir.setter
    def data_dir(self, value: Optional[Path]) -> None:
        self.data["storage"]["data_dir"] = str(value) if value is not None else None
        self.save()

    @property
    def journal_mode(self) -> str:
        """SQLite journal mode; falls back to WAL for unknown values."""
        mode = str(self.data["storage"].get("journal_mode") or "WAL").upper()
        if mode not in JOURNAL_MODES:
            logger.warning(f"Unknown journal_mode {mode!r}, using WAL")
            return "WAL"
        return mode

    @journal_mode.setter
    def journal_mode(self, value: str) -> None:
        mode = str(value).upper()
        if mode not in JOURNAL_MODES:
            raise ValueError(f"Invalid journal mode: {value}")
        self.data["storage"]["journal_mode"] = mode
        self.save()

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    @property
    def debug_logging(self) -> bool:
        """Root log level DEBUG instead of INFO; see create_app_context()."""
        return bool(self.data["logging"].get("debug", False))

    @debug_logging.setter
    def debug_logging(self, value: bool) -> None:
        self.data["logging"]["debug"] = bool(value)
        self.save()
