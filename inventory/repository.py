"""
Items repository used by application code.

Screens and services depend on the ItemsRepository protocol; the offline
implementation stores everything in the local item database.
"""
from __future__ import annotations

from concurrent.futures import Future
from typing import List, Optional, Protocol, runtime_checkable

from inventory.database.repositories.item_repository import ItemDao
from inventory.models import Item
from inventory.observable import LiveQuery


@runtime_checkable
class ItemsRepository(Protocol):
    """Insert, update, delete and observe items from a data source."""

    def get_all_items_stream(self) -> LiveQuery[List[Item]]:
        """All items, ordered by name."""
        ...

    def get_item_stream(self, item_id: int) -> LiveQuery[Optional[Item]]:
        """The item matching item_id."""
        ...

    def insert_item(self, item: Item) -> "Future[None]":
        ...

    def delete_item(self, item: Item) -> "Future[None]":
        ...

    def update_item(self, item: Item) -> "Future[None]":
        ...


class OfflineItemsRepository:
    """ItemsRepository backed by the local SQLite item database."""

    def __init__(self, item_dao: ItemDao):
        self._item_dao = item_dao

    def get_all_items_stream(self) -> LiveQuery[List[Item]]:
        return self._item_dao.get_all_items()

    def get_item_stream(self, item_id: int) -> LiveQuery[Optional[Item]]:
        return self._item_dao.get_item(item_id)

    def insert_item(self, item: Item) -> "Future[None]":
        return self._item_dao.insert(item)

    def delete_item(self, item: Item) -> "Future[None]":
        return self._item_dao.delete(item)

    def update_item(self, item: Item) -> "Future[None]":
        return self._item_dao.update(item)
