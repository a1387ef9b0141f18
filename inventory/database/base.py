"""
SQLite-backed item database for the inventory application.

Responsibilities:
- Owning the one SQLite connection per process (lazy, thread-safe singleton)
- Schema initialization + destructive recreation on version mismatch
- Background executors for writes and live queries
- Handing out the ItemDao

Thread Safety:
- Uses a threading.RLock for all statements on the shared connection
- Writes are serialized on a single write thread
- Live query refreshes and emissions run on a single query thread
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Protocol

from inventory.constants import (
    DATABASE_NAME,
    JOURNAL_MODES,
    QUERY_THREAD_PREFIX,
    WRITE_THREAD_PREFIX,
)
from inventory.database.migrations import MigrationRunner
from inventory.database.repositories.item_repository import ItemDao
from inventory.exceptions import DatabaseOpenError
from inventory.observable import InvalidationTracker

logger = logging.getLogger(__name__)


class StorageContext(Protocol):
    """What the database needs from the application context."""

    @property
    def journal_mode(self) -> str:
        ...

    def get_database_path(self, name: str) -> Path:
        ...


class InventoryDatabase:
    """
    Manages persistent inventory items through SQLite.

    An InventoryDatabase instance is associated with one database file.
    Applications should obtain it through get_database(context) so that the
    whole process shares one instance; constructing it directly is meant
    for tests and tools.
    """

    _instance: Optional["InventoryDatabase"] = None
    _instance_lock: threading.Lock = threading.Lock()

    def __init__(self, db_path: Path, journal_mode: str = "WAL"):
        """
        Open (creating if needed) the database file at db_path.

        Raises:
            DatabaseOpenError: if the file or its directory cannot be
                created or opened.
        """
        self.db_path = db_path

        # Thread safety lock for all database operations
        self._lock = threading.RLock()

        self.conn = self._connect(db_path, journal_mode)
        logger.info(f"Database initialized: {db_path}")

        self._tracker = InvalidationTracker()
        self._write_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=WRITE_THREAD_PREFIX
        )
        self._query_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=QUERY_THREAD_PREFIX
        )

        self._item_dao = ItemDao(
            self.conn,
            self._lock,
            self._tracker,
            self._write_executor,
            self._query_executor,
        )

    def _connect(self, db_path: Path, journal_mode: str) -> sqlite3.Connection:
        mode = journal_mode.upper()
        if mode not in JOURNAL_MODES:
            raise DatabaseOpenError(db_path, f"invalid journal mode {journal_mode!r}")

        conn: Optional[sqlite3.Connection] = None
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(db_path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute(f"PRAGMA journal_mode = {mode}")

            runner = MigrationRunner(conn, self._lock)
            self.schema_was_reset = runner.initialize_schema()
        except (OSError, sqlite3.Error) as exc:
            logger.error(f"Failed to open database {db_path}: {exc}")
            if conn is not None:
                conn.close()
            raise DatabaseOpenError(db_path, str(exc)) from exc

        return conn

    # ----------------------------------------------------------------------
    # Shared instance
    # ----------------------------------------------------------------------

    @classmethod
    def get_database(cls, context: StorageContext) -> "InventoryDatabase":
        """
        Return the process-wide database, creating it on first use.

        Double-checked locking guarantees a single instance even when many
        threads race on the first call. The context is only consulted for
        that first construction.
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    db_path = context.get_database_path(DATABASE_NAME)
                    cls._instance = cls(db_path, journal_mode=context.journal_mode)
        return cls._instance

    @classmethod
    def reset_for_testing(cls) -> None:
        """
        Close and forget the shared instance for test isolation.
        """
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance.close()
            cls._instance = None
        logger.debug("InventoryDatabase reset for testing")

    # ----------------------------------------------------------------------
    # Access
    # ----------------------------------------------------------------------

    def item_dao(self) -> ItemDao:
        """Return the item repository bound to this database."""
        return self._item_dao

    @property
    def invalidation_tracker(self) -> InvalidationTracker:
        return self._tracker

    def close(self) -> None:
        """
        Finish pending writes, stop the executors and close the connection.

        Live subscriptions stop receiving emissions. The application itself
        never calls this; the shared instance lives as long as the process.
        """
        self._write_executor.shutdown(wait=True)
        self._query_executor.shutdown(wait=True, cancel_futures=True)
        try:
            self.conn.close()
        except sqlite3.Error as exc:
            logger.error(f"Error closing database connection: {exc}")


def get_database(context: StorageContext) -> InventoryDatabase:
    """Module-level accessor for the shared InventoryDatabase."""
    return InventoryDatabase.get_database(context)
