"""
Inventory persistence layer.

SQLite-backed storage for inventory items (name, quantity, price) with a
process-wide database handle, asynchronous writes and live queries that
re-emit whenever stored items change.
"""

from inventory.app_context import AppContext, create_app_context
from inventory.database import InventoryDatabase, get_database
from inventory.models import Item
from inventory.repository import ItemsRepository, OfflineItemsRepository

__all__ = [
    "AppContext",
    "create_app_context",
    "InventoryDatabase",
    "get_database",
    "Item",
    "ItemsRepository",
    "OfflineItemsRepository",
]
