"""
Database repositories package.

Public API:
- BaseRepository: Shared thread-safe execution and invalidating writes
- ItemDao: Inventory item mutations and live queries
"""
from inventory.database.repositories.base_repository import BaseRepository
from inventory.database.repositories.item_repository import ItemDao

__all__ = [
    "BaseRepository",
    "ItemDao",
]
