"""
Item record stored by the inventory database.

Provides the Item dataclass plus row conversion helpers used by the
item repository.
"""

from __future__ import annotations

import sqlite3
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Union

# Marks an Item that has not been assigned an id by the database yet
UNASSIGNED_ID = 0


@dataclass(frozen=True)
class Item:
    """A single inventory item.

    Attributes:
        name: Display name (not unique).
        quantity: Current stock count.
        price: Unit price.
        id: Database-assigned identifier; 0 until the item is inserted.
    """

    name: str
    quantity: int
    price: float
    id: int = UNASSIGNED_ID

    @property
    def is_assigned(self) -> bool:
        """True once the database has assigned this item an id."""
        return bool(self.id)

    @classmethod
    def from_row(cls, row: Union[sqlite3.Row, Mapping[str, Any]]) -> "Item":
        """Create an Item from an `items` table row."""
        return cls(
            id=int(row["id"]),
            name=row["name"],
            quantity=int(row["quantity"]),
            price=float(row["price"]),
        )

    def with_changes(self, **changes: Any) -> "Item":
        """Return a copy with the given fields replaced.

        Raises:
            ValueError: if an attempt is made to change an assigned id.
        """
        if "id" in changes and self.is_assigned and changes["id"] != self.id:
            raise ValueError(f"Item id {self.id} cannot be changed")
        return replace(self, **changes)

    def formatted_price(self, symbol: str = "$") -> str:
        """Unit price as a currency string, e.g. ``$2.50``."""
        sign = "-" if self.price < 0 else ""
        return f"{sign}{symbol}{abs(self.price):,.2f}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
