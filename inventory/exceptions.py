"""Exceptions raised by the inventory store."""


class InventoryError(Exception):
    """Base class for inventory store errors"""
    pass


class DatabaseOpenError(InventoryError):
    """Raised when the item database cannot be created or opened"""

    def __init__(self, db_path, reason: str = ""):
        self.db_path = db_path
        message = f"Unable to open item database at {db_path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
