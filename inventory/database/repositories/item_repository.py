"""
Item repository: the single point of access to stored inventory items.

Writes run on the database's write executor and return futures that
resolve once the change is committed. Reads return LiveQuery streams that
re-emit whenever a committed write touches the items table.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from concurrent.futures import Executor, Future
from typing import List, Optional

from inventory.database.repositories.base_repository import BaseRepository
from inventory.database.schema import ITEMS_TABLE
from inventory.models import Item
from inventory.observable import InvalidationTracker, LiveQuery

logger = logging.getLogger(__name__)


class ItemDao(BaseRepository):
    """Repository for item database operations."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        lock: threading.RLock,
        tracker: InvalidationTracker,
        write_executor: Executor,
        query_executor: Executor,
    ):
        super().__init__(conn, lock, tracker)
        self._write_executor = write_executor
        self._query_executor = query_executor

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, item: Item) -> "Future[None]":
        """
        Insert an item, assigning it a new id when it has none.

        An item whose id already exists is ignored; the future still
        completes normally.
        """
        return self._write_executor.submit(self._insert, item)

    def update(self, item: Item) -> "Future[None]":
        """Overwrite name, quantity and price of the item with ``item.id``."""
        return self._write_executor.submit(self._update, item)

    def delete(self, item: Item) -> "Future[None]":
        """Remove the item with ``item.id``. Missing ids are a no-op."""
        return self._write_executor.submit(self._delete, item)

    def _insert(self, item: Item) -> None:
        if item.is_assigned:
            rowcount = self._write(
                """
                INSERT OR IGNORE INTO items (id, name, quantity, price)
                VALUES (?, ?, ?, ?)
                """,
                (item.id, item.name, item.quantity, item.price),
                (ITEMS_TABLE,),
            )
        else:
            rowcount = self._write(
                """
                INSERT OR IGNORE INTO items (name, quantity, price)
                VALUES (?, ?, ?)
                """,
                (item.name, item.quantity, item.price),
                (ITEMS_TABLE,),
            )

        if rowcount:
            logger.debug(f"Inserted item {item.name!r}")
        else:
            logger.debug(f"Insert of item id={item.id} ignored (conflict)")

    def _update(self, item: Item) -> None:
        rowcount = self._write(
            "UPDATE items SET name = ?, quantity = ?, price = ? WHERE id = ?",
            (item.name, item.quantity, item.price, item.id),
            (ITEMS_TABLE,),
        )
        logger.debug(f"Updated item id={item.id} ({rowcount} row(s))")

    def _delete(self, item: Item) -> None:
        rowcount = self._write(
            "DELETE FROM items WHERE id = ?",
            (item.id,),
            (ITEMS_TABLE,),
        )
        logger.debug(f"Deleted item id={item.id} ({rowcount} row(s))")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_item(self, item_id: int) -> LiveQuery[Optional[Item]]:
        """
        Observe one item by id.

        The first emission is the current item, or None if it does not
        exist. Later emissions follow changes to the item; once it is
        deleted the stream emits nothing further.
        """
        return LiveQuery(
            lambda: self._select_item(item_id),
            tables=(ITEMS_TABLE,),
            tracker=self._tracker,
            executor=self._query_executor,
            distinct=True,
            skip_none=True,
        )

    def get_all_items(self) -> LiveQuery[List[Item]]:
        """
        Observe every item, ordered by name ascending.

        Each emission is the complete, freshly sorted list; items sharing a
        name keep insertion (id) order.
        """
        return LiveQuery(
            self._select_all_items,
            tables=(ITEMS_TABLE,),
            tracker=self._tracker,
            executor=self._query_executor,
        )

    def _select_item(self, item_id: int) -> Optional[Item]:
        row = self._execute_fetchone("SELECT * FROM items WHERE id = ?", (item_id,))
        return Item.from_row(row) if row is not None else None

    def _select_all_items(self) -> List[Item]:
        rows = self._execute_fetchall("SELECT * FROM items ORDER BY name ASC, id ASC")
        return [Item.from_row(row) for row in rows]
