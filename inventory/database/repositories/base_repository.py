"""
Base repository class for thread-safe database operations.

Provides common execution helpers used by all domain-specific repositories,
plus the write helper that publishes table invalidations to live queries.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Tuple, Union, cast

from inventory.observable import InvalidationTracker

logger = logging.getLogger(__name__)

# Type alias for SQL parameters
SqlParams = Union[Tuple[()], Tuple[object, ...]]


class BaseRepository:
    """
    Base class for all database repositories.

    Each repository receives the shared connection, lock and invalidation
    tracker from the parent InventoryDatabase instance.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        lock: threading.RLock,
        tracker: InvalidationTracker,
    ):
        """
        Args:
            conn: SQLite connection (shared across all repositories)
            lock: Threading lock for thread-safe operations
            tracker: Receives the tables touched by each committed write
        """
        self._conn = conn
        self._lock = lock
        self._tracker = tracker

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Provide a transaction scope with thread safety.

        Usage:
            with repo.transaction() as conn:
                conn.execute(...)
            # Commits on success, rolls back on error
        """
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except Exception as exc:
                self._conn.rollback()
                logger.error(f"Transaction failed: {exc}")
                raise

    def _write(self, sql: str, params: SqlParams, tables: Iterable[str]) -> int:
        """
        Run one data-changing statement in its own transaction.

        Live queries on ``tables`` are invalidated after the commit, but
        only when the statement affected at least one row.

        Returns:
            Number of rows affected
        """
        with self.transaction() as conn:
            rowcount = conn.execute(sql, params).rowcount

        if rowcount > 0:
            self._tracker.notify(tables)
        return rowcount

    def _execute_fetchone(
        self, sql: str, params: SqlParams = ()
    ) -> Optional[sqlite3.Row]:
        """Thread-safe fetchone helper."""
        with self._lock:
            cursor = self._conn.execute(sql, params)
            return cast(Optional[sqlite3.Row], cursor.fetchone())

    def _execute_fetchall(
        self, sql: str, params: SqlParams = ()
    ) -> List[sqlite3.Row]:
        """Thread-safe fetchall helper."""
        with self._lock:
            cursor = self._conn.execute(sql, params)
            return cursor.fetchall()
