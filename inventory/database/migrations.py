"""
Database schema runner for schema versioning.

Handles schema initialization and the destructive fallback used whenever
the stored schema version differs from the one this code expects.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from threading import RLock
from typing import Iterator, List

from inventory.database.schema import CREATE_SCHEMA_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)


class MigrationRunner:
    """
    Handles database schema initialization and version mismatches.

    Responsible for:
    - Creating schema for fresh databases
    - Wiping and recreating databases recorded under another version
    - Tracking schema version
    """

    def __init__(self, conn: sqlite3.Connection, lock: RLock):
        """
        Initialize the migration runner.

        Args:
            conn: SQLite connection to initialize
            lock: Thread lock for safe execution
        """
        self._conn = conn
        self._lock = lock

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Provide a transaction scope with thread safety."""
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except Exception as exc:
                self._conn.rollback()
                logger.error(f"Migration transaction failed: {exc}")
                raise

    def initialize_schema(self) -> bool:
        """
        Create tables if they don't exist, or recreate them on mismatch.

        Returns:
            True if existing data was destroyed because of a version mismatch.
        """
        current_version = self.get_schema_version()

        if current_version == 0 and not self._user_tables():
            logger.info("No schema detected - creating schema.")
            self._create_schema()
            self._set_schema_version(SCHEMA_VERSION)
            return False

        if current_version != SCHEMA_VERSION:
            logger.warning(
                f"Schema v{current_version} does not match v{SCHEMA_VERSION}; "
                "falling back to destructive recreation. Stored items are lost."
            )
            self.reset_schema()
            return True

        logger.debug(f"Schema v{current_version} is up-to-date.")
        return False

    def get_schema_version(self) -> int:
        """Return the schema version stored in the DB."""
        try:
            cursor = self._conn.execute(
                "SELECT version FROM schema_version ORDER BY id DESC LIMIT 1"
            )
            row = cursor.fetchone()
            return row[0] if row else 0
        except sqlite3.OperationalError:
            # No schema_version table yet
            return 0

    def reset_schema(self) -> None:
        """Drop every table and recreate the current schema from scratch."""
        with self._transaction() as conn:
            for table in self._user_tables():
                logger.debug(f"Dropping table {table}")
                conn.execute(f'DROP TABLE IF EXISTS "{table}"')
            if "sqlite_sequence" in self._all_tables():
                conn.execute("DELETE FROM sqlite_sequence")

        self._create_schema()
        self._set_schema_version(SCHEMA_VERSION)
        logger.info(f"Schema recreated at v{SCHEMA_VERSION}.")

    def _user_tables(self) -> List[str]:
        return [name for name in self._all_tables() if not name.startswith("sqlite_")]

    def _all_tables(self) -> List[str]:
        rows = self._conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        ).fetchall()
        return [row[0] for row in rows]

    def _set_schema_version(self, version: int) -> None:
        """Record the schema version."""
        with self._lock:
            self._conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (version,),
            )
            self._conn.commit()

    def _create_schema(self) -> None:
        """Create all necessary tables for a fresh database."""
        logger.info("Creating database schema...")

        with self._transaction() as conn:
            conn.executescript(CREATE_SCHEMA_SQL)
