# inventory/app_context.py
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Optional

from inventory.config import Config
from inventory.database import InventoryDatabase, get_database
from inventory.logging_setup import setup_logging
from inventory.repository import ItemsRepository, OfflineItemsRepository

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """
    Application-lifecycle context and dependency container.

    Keeps wiring in one place:
    - config: user settings (data directory, journal mode, logging)
    - database: the process-wide InventoryDatabase, opened on first use
    - items_repository: what screens use to read and change items

    The context only resolves where the database file lives; the database
    itself is shared by every context in the process and is never closed
    while the application runs.
    """
    config: Config
    _items_repository: Optional[ItemsRepository] = field(
        default=None, init=False, repr=False
    )

    @property
    def data_dir(self) -> Path:
        return self.config.data_dir

    @property
    def journal_mode(self) -> str:
        return self.config.journal_mode

    def get_database_path(self, name: str) -> Path:
        """Absolute path of the named database, creating its directory."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir / name

    @property
    def database(self) -> InventoryDatabase:
        return get_database(self)

    @property
    def items_repository(self) -> ItemsRepository:
        if self._items_repository is None:
            self._items_repository = OfflineItemsRepository(self.database.item_dao())
            logger.debug("Items repository created")
        return self._items_repository


def create_app_context(
    config_file: Optional[Path] = None,
    configure_logging: bool = False,
) -> AppContext:
    """
    Build the application context.

    With ``configure_logging`` the root logger is set up from the config's
    ``debug_logging`` flag, writing app.log next to the config file.
    """
    config = Config(config_file=config_file)
    if configure_logging:
        setup_logging(debug=config.debug_logging, log_dir=config.config_file.parent)
    logger.info(f"Item database directory: {config.data_dir}")
    return AppContext(config=config)
