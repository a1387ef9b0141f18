"""
Database Package.

This package provides SQLite-backed persistence for inventory items.

Public API:
- InventoryDatabase: Owns the connection, executors and ItemDao
- get_database: Process-wide shared InventoryDatabase accessor
- SCHEMA_VERSION: Current schema version number

Example:
    from inventory.database import get_database
    dao = get_database(context).item_dao()
    dao.insert(Item(name="Widget", quantity=5, price=2.50)).result()
"""
from inventory.database.base import InventoryDatabase, StorageContext, get_database
from inventory.database.schema import SCHEMA_VERSION

__all__ = [
    "InventoryDatabase",
    "StorageContext",
    "get_database",
    "SCHEMA_VERSION",
]
